"""Typer application entry point for the ragcrawl CLI."""

import typer
import uvicorn

from ragcrawl.cli.commands import crawl as crawl_command
from ragcrawl.cli.commands import query as query_command
from ragcrawl.cli.commands import stats as stats_command
from ragcrawl.cli.commands import vectorize as vectorize_command

app = typer.Typer(no_args_is_help=True, name="ragcrawl")

app.command(name="crawl", help="Crawl a website and summarize the pages found")(
    crawl_command.crawl_command
)
app.command(name="vectorize", help="Crawl a website into the vector index")(
    vectorize_command.vectorize_command
)
app.command(name="query", help="Answer a question from indexed content")(
    query_command.query_command
)
app.command(name="search", help="Search indexed content")(query_command.search_command)
app.command(name="stats", help="Show namespace or index statistics")(
    stats_command.stats_command
)


@app.command(name="serve", help="Run the HTTP API")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    uvicorn.run("ragcrawl.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
