"""Query and search commands over the knowledge base."""

from __future__ import annotations

import typer
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ragcrawl.cli.runtime import console, run_with_services
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.retrieval.models import RAGAnswer, SearchResult
from ragcrawl.services.container import ServiceContainer


def query_command(
    question: str = typer.Argument(..., help="Question to answer"),
    namespace: str | None = typer.Option(None, "--namespace", "-N", help="Namespace to search"),
    top_k: int = typer.Option(5, "-k", "--top-k", min=1, max=20, help="Sources to retrieve"),
) -> None:
    """Answer a question from the indexed content, with citations."""

    async def _answer(container: ServiceContainer) -> RAGAnswer:
        with console.status("Thinking..."):
            return await container.rag.answer(
                question, namespace or container.settings.default_namespace, top_k=top_k
            )

    answer = run_with_services(_answer)
    console.print(Panel(Markdown(answer.answer), title="Answer"))
    console.print(f"Confidence: {answer.confidence:.1f}%  ({answer.duration:.2f}s)")

    table = Table(title="Sources")
    table.add_column("#")
    table.add_column("Title")
    table.add_column("URL")
    table.add_column("Score")
    for number, source in enumerate(answer.sources, 1):
        table.add_row(
            str(number),
            str(source.metadata.get(MetadataKeys.TITLE, "")),
            str(source.metadata.get(MetadataKeys.URL, "")),
            f"{source.score:.3f}",
        )
    console.print(table)


def search_command(
    query: str = typer.Argument(..., help="Search text"),
    namespace: str | None = typer.Option(None, "--namespace", "-N", help="Namespace to search"),
    top_k: int = typer.Option(5, "-k", "--top-k", min=1, max=20, help="Matches to return"),
) -> None:
    """Find the stored chunks closest to a query."""

    async def _search(container: ServiceContainer) -> SearchResult:
        return await container.rag.search(
            query, namespace or container.settings.default_namespace, top_k=top_k
        )

    result = run_with_services(_search)
    if not result.matches:
        console.print("No matches found")
        return

    table = Table(title=f"{result.total_matches} matches ({result.duration:.2f}s)")
    table.add_column("Score")
    table.add_column("Title")
    table.add_column("Section")
    table.add_column("URL")
    for match in result.matches:
        table.add_row(
            f"{match.score:.3f}",
            str(match.metadata.get(MetadataKeys.TITLE, "")),
            str(match.metadata.get(MetadataKeys.SECTION, "")),
            str(match.metadata.get(MetadataKeys.URL, "")),
        )
    console.print(table)
