"""CLI entry point — Typer app for docsearch commands.

Usage:
    docsearch chunk docs/agent-card.md
    docsearch ingest docs/*.md --base-url https://google-a2a.vercel.app
    docsearch search "How does task streaming work?"
    docsearch cost docs/agent-card.md
    docsearch status
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="docsearch",
    help="Documentation search — chunk, ingest, search.",
    no_args_is_help=True,
)

console = Console()

_DOC_PATH = typer.Argument(..., help="Path to a markdown page")
_DOC_PATHS = typer.Argument(..., help="Markdown pages or directories to ingest")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable info logging"),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def chunk(
    path: Annotated[Path, _DOC_PATH],
    base_url: str | None = typer.Option(
        None, "--base-url", "-b", help="Site origin prefixed to page URLs",
    ),
) -> None:
    """Chunk a page and show the resulting passages."""
    from docsearch.chunking.markdown_chunker import MarkdownChunker, analyze_chunking
    from docsearch.config import load_settings
    from docsearch.documents.loader import DocumentLoader

    settings = load_settings()
    loaded = DocumentLoader().load_file(path)
    document = MarkdownChunker(settings.chunking).chunk(
        loaded.text, base_url if base_url is not None else settings.ingestion.base_url,
    )

    console.print(f"\n[bold]{document.metadata.title}[/] ({document.metadata.full_url})")
    if document.is_empty:
        console.print("[yellow]No headings found; page produced no chunks.[/]")
        return

    table = Table(title=f"{len(document.chunks)} chunks")
    table.add_column("#", style="cyan")
    table.add_column("Type")
    table.add_column("Heading path")
    table.add_column("Words", justify="right")
    table.add_column("Link", style="dim")

    for row in analyze_chunking(document):
        table.add_row(
            str(row["index"]), row["type"], row["path"], str(row["words"]), row["link"],
        )

    console.print(table)


@app.command()
def ingest(
    paths: Annotated[list[Path], _DOC_PATHS],
    base_url: str | None = typer.Option(
        None, "--base-url", "-b", help="Site origin prefixed to page URLs",
    ),
    skip_existing: bool = typer.Option(
        False, "--skip-existing", help="Skip pages whose title is already stored",
    ),
) -> None:
    """Chunk, embed and store pages in the vector store."""
    from docsearch.config import load_settings
    from docsearch.embeddings.factory import provider_from_settings
    from docsearch.pipeline.ingest import IngestPipeline
    from docsearch.vectorstore.factory import store_from_settings

    settings = load_settings()
    emb = provider_from_settings(settings.embedding)
    store = store_from_settings(settings)
    pipeline = IngestPipeline(embedding_provider=emb, vector_store=store, settings=settings)

    results = []
    for path in paths:
        if path.is_dir():
            results.extend(
                pipeline.ingest_directory(path, base_url=base_url, skip_existing=skip_existing)
            )
        else:
            results.append(
                pipeline.ingest_file(path, base_url=base_url, skip_existing=skip_existing)
            )

    for result in results:
        console.print(f"\n[bold green]Ingested:[/] {result.document_metadata.title}")
        console.print(f"  Source: {result.source}")
        console.print(f"  Chunks: {result.chunks_processed}")
        console.print(f"  Stored: {result.chunks_stored}")
        console.print(f"  Tokens: {result.tokens_used}")
        if result.skipped:
            console.print(f"  [yellow]Skipped:[/] {result.skipped} existing chunks")
        for w in result.warnings:
            console.print(f"  [yellow]Warning:[/] {w}")

    # Local index lives only in memory until saved
    if settings.vectorstore.backend.lower() == "faiss":
        store.save(settings.vectorstore.path)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    limit: int | None = typer.Option(None, "--limit", "-k", help="Number of passages"),
    threshold: float | None = typer.Option(
        None, "--threshold", "-t", help="Minimum similarity",
    ),
    document: str | None = typer.Option(
        None, "--document", "-d", help="Restrict to one page title",
    ),
) -> None:
    """Search the documentation and print cited passages."""
    from docsearch.config import load_settings
    from docsearch.embeddings.factory import provider_from_settings
    from docsearch.pipeline.agent import AgentSearch
    from docsearch.pipeline.citations import format_citations
    from docsearch.retrieval.retriever import Retriever
    from docsearch.vectorstore.factory import store_from_settings

    settings = load_settings()
    retriever = Retriever(
        embedding_provider=provider_from_settings(settings.embedding),
        vector_store=store_from_settings(settings),
        settings=settings.search,
    )
    response = AgentSearch(retriever).search_for_agent(
        query, limit=limit, threshold=threshold, document_filter=document,
    )

    console.print(f"\n[bold]Q:[/] {response.query}")
    for r in response.results:
        console.print(f"\n[bold cyan][{r.index}][/] {r.citation.text} [dim]({r.similarity:.2f})[/]")
        console.print(r.original_content[:300])

    if response.results:
        console.print(format_citations(response.results))
    else:
        console.print(
            f"\n[yellow]No results.[/] Try --threshold {response.summary.suggested_threshold}",
        )

    console.print(
        f"\n[dim]Strategy: {response.strategy} "
        f"| Documents: {response.summary.documents_found}[/]",
    )


@app.command()
def cost(
    path: Annotated[Path, _DOC_PATH],
) -> None:
    """Estimate embedding tokens and cost for a page."""
    from docsearch.chunking.markdown_chunker import MarkdownChunker
    from docsearch.config import load_settings
    from docsearch.documents.loader import DocumentLoader
    from docsearch.embeddings.cost import estimate_embedding_cost

    settings = load_settings()
    loaded = DocumentLoader().load_file(path)
    document = MarkdownChunker(settings.chunking).chunk(loaded.text, settings.ingestion.base_url)
    estimate = estimate_embedding_cost([c.contextual_content for c in document.chunks])

    console.print(f"\n[bold]{document.metadata.title}[/]")
    console.print(f"  Chunks: {len(document.chunks)}")
    console.print(f"  Tokens: {estimate.estimated_tokens}")
    console.print(f"  Cost:   ${estimate.estimated_cost:.6f}")


@app.command()
def status() -> None:
    """Show system status (registered providers, stores, strategies)."""
    from docsearch.config import load_settings
    from docsearch.embeddings.factory import available_providers
    from docsearch.retrieval.strategies import available_strategies
    from docsearch.vectorstore.factory import available_stores

    settings = load_settings()
    console.print("\n[bold green]docsearch-rag[/] v0.1.0\n")

    table = Table(title="Available Components")
    table.add_column("Layer", style="cyan")
    table.add_column("Available")
    table.add_column("Configured")

    table.add_row("Embedding Providers", ", ".join(available_providers()), settings.embedding.provider)
    table.add_row("Vector Stores", ", ".join(available_stores()), settings.vectorstore.backend)
    table.add_row("Search Strategies", ", ".join(available_strategies()), settings.search.strategy)

    console.print(table)


if __name__ == "__main__":
    app()
