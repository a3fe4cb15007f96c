"""Stats command for index and namespace visibility."""

from __future__ import annotations

import typer
from rich.table import Table

from ragcrawl.cli.runtime import console, run_with_services
from ragcrawl.services.container import ServiceContainer


def stats_command(
    namespace: str | None = typer.Argument(None, help="Namespace to report on"),
    index: str | None = typer.Option(None, "--index", help="Report on an index instead"),
) -> None:
    """Show vector counts for a namespace, an index, or list namespaces."""

    if index is not None:

        async def _index(container: ServiceContainer):
            return await container.rag.index_stats(index)

        stats = run_with_services(_index)
        if not stats.exists:
            console.print(f"[yellow]Index {stats.index_name} does not exist[/yellow]")
            return
        table = Table(title=f"Index {stats.index_name}")
        table.add_column("Vectors")
        table.add_column("Dimension")
        table.add_column("Fullness")
        table.add_row(
            str(stats.total_vector_count), str(stats.dimension), f"{stats.index_fullness:.2f}"
        )
        console.print(table)
        return

    if namespace is None:

        async def _list(container: ServiceContainer):
            return await container.rag.list_namespaces()

        listing = run_with_services(_list)
        if not listing.namespaces:
            console.print(f"No namespaces in {listing.index_name}")
            return
        for name in listing.namespaces:
            console.print(name)
        return

    async def _namespace(container: ServiceContainer):
        return await container.rag.namespace_stats(namespace)

    ns_stats = run_with_services(_namespace)
    table = Table(title=f"Namespace {ns_stats.namespace}")
    table.add_column("Vectors")
    table.add_column("Index total")
    table.add_column("Fullness")
    table.add_row(
        str(ns_stats.vector_count),
        str(ns_stats.total_vector_count),
        f"{ns_stats.index_fullness:.2f}",
    )
    console.print(table)
