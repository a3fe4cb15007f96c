"""Shared runtime for CLI commands: settings, logging and service lifecycle."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from ragcrawl.core.config import Settings
from ragcrawl.core.errors import RagCrawlError
from ragcrawl.core.logger import configure_logging
from ragcrawl.services.container import ServiceContainer, build_container

T = TypeVar("T")

console = Console()


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc


def run_with_services(operation: Callable[[ServiceContainer], Awaitable[T]]) -> T:
    """Build services, run an async operation and close provider clients.

    RagCrawlError is reported on the console and turned into exit code 1.
    """
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_file)

    async def _run() -> T:
        container = build_container(settings)
        try:
            return await operation(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(_run())
    except RagCrawlError as exc:
        console.print(f"[red]{exc.kind.value}:[/red] {exc.message}")
        diagnostic = exc.details.get("diagnostic")
        if diagnostic and settings.is_development:
            console.print(f"[dim]{diagnostic}[/dim]")
        raise typer.Exit(code=1) from exc
