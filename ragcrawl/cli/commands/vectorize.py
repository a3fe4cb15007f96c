"""Vectorize command: crawl a site into the vector index."""

from __future__ import annotations

import typer
from rich.panel import Panel

from ragcrawl.cli.runtime import console, run_with_services
from ragcrawl.services.container import ServiceContainer
from ragcrawl.services.models import VectorizeRequest, VectorStoreResult


def vectorize_command(
    url: str = typer.Argument(..., help="Seed URL to crawl"),
    index: str | None = typer.Option(None, "--index", help="Target index (defaults to INDEX_NAME)"),
    namespace: str | None = typer.Option(None, "--namespace", "-N", help="Target namespace"),
    depth: int | None = typer.Option(None, "-d", "--depth", min=1, max=10, help="Maximum link depth"),
    max_pages: int | None = typer.Option(None, "-n", "--max-pages", min=1, max=1000, help="Page budget"),
    delay: int | None = typer.Option(None, "--delay", min=100, max=10000, help="Delay between requests (ms)"),
    chunk_size: int | None = typer.Option(None, "--chunk-size", min=100, max=8000, help="Tokens per chunk"),
    chunk_overlap: int | None = typer.Option(None, "--chunk-overlap", min=0, max=500, help="Tokens shared by chunks"),
) -> None:
    """Crawl a website, embed its pages and store them for retrieval."""

    async def _vectorize(container: ServiceContainer) -> VectorStoreResult:
        settings = container.settings
        request = VectorizeRequest(
            crawl=container.crawl_request(
                url, max_depth=depth, max_pages=max_pages, delay_ms=delay
            ),
            index_name=index or settings.index_name,
            namespace=namespace or settings.default_namespace,
            chunk_size=chunk_size or settings.chunk_size,
            chunk_overlap=chunk_overlap if chunk_overlap is not None else settings.chunk_overlap,
        )
        with console.status(f"Vectorizing {url}..."):
            return await container.ingestion.vectorize(request)

    result = run_with_services(_vectorize)
    console.print(
        Panel(
            f"Index: {result.index_name}\n"
            f"Namespace: {result.namespace}\n"
            f"Pages: {result.crawl_summary.total_pages}\n"
            f"Chunks: {result.total_chunks}\n"
            f"Vectors stored: {result.vectors_stored}\n"
            f"Model: {result.embeddings.model} ({result.embeddings.dimensions} dims)\n"
            f"Tokens: {result.embeddings.total_tokens}\n"
            f"Crawl errors: {len(result.crawl_summary.errors)}\n"
            f"Duration: {result.duration:.2f}s",
            title="Vectorize Summary",
        )
    )
