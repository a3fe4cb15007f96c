"""Crawl command: fetch a site and report what was found."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from ragcrawl.api.models.responses import to_payload
from ragcrawl.cli.runtime import console, run_with_services
from ragcrawl.crawler.models import CrawlResult
from ragcrawl.services.container import ServiceContainer


def crawl_command(
    url: str = typer.Argument(..., help="Seed URL to crawl"),
    depth: int | None = typer.Option(None, "-d", "--depth", min=1, max=10, help="Maximum link depth"),
    max_pages: int | None = typer.Option(None, "-n", "--max-pages", min=1, max=1000, help="Page budget"),
    delay: int | None = typer.Option(None, "--delay", min=100, max=10000, help="Delay between requests (ms)"),
    include: list[str] = typer.Option([], "-i", "--include", help="Only follow links containing this pattern"),
    exclude: list[str] = typer.Option([], "-x", "--exclude", help="Skip links containing this pattern"),
    external: bool = typer.Option(False, "--external", help="Consider links to other hosts"),
    preview: bool = typer.Option(False, "--preview", help="Show the crawl plan without fetching"),
    output: Path | None = typer.Option(None, "-o", "--output", help="Write pages as JSON to this file"),
) -> None:
    """Crawl a website breadth-first and summarize the result."""

    def _request(container: ServiceContainer):
        return container.crawl_request(
            url,
            max_depth=depth,
            max_pages=max_pages,
            delay_ms=delay,
            include_patterns=list(include),
            exclude_patterns=list(exclude) or None,
            follow_external_links=external,
        )

    if preview:

        async def _preview(container: ServiceContainer):
            return container.ingestion.preview(_request(container))

        plan = run_with_services(_preview)
        console.print(
            Panel(
                f"Start: {plan.starting_url}\n"
                f"Domains: {', '.join(plan.allowed_domains)}\n"
                f"Estimated pages: {plan.estimated_pages}",
                title="Crawl Preview",
            )
        )
        return

    async def _crawl(container: ServiceContainer) -> CrawlResult:
        with console.status(f"Crawling {url}..."):
            return await container.ingestion.crawl(_request(container))

    result = run_with_services(_crawl)
    _print_result(result)

    if output is not None:
        output.write_text(json.dumps(to_payload(result), indent=2))
        console.print(f"Wrote {len(result.pages)} pages to {output}")


def _print_result(result: CrawlResult) -> None:
    summary = result.summary
    console.print(
        Panel(
            f"Pages: {summary.total_pages}\n"
            f"Words: {summary.total_words}\n"
            f"Max depth: {summary.max_depth_reached}\n"
            f"Domains: {', '.join(summary.unique_domains)}\n"
            f"Errors: {len(summary.errors)}\n"
            f"Duration: {summary.duration:.2f}s",
            title="Crawl Summary",
        )
    )

    if summary.errors:
        table = Table(title="Errors")
        table.add_column("URL")
        table.add_column("Status")
        table.add_column("Error")
        for error in summary.errors:
            table.add_row(error.url, str(error.status or "-"), f"[red]{error.error}[/red]")
        console.print(table)
