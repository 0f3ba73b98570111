"""Operator CLI for the VectorDocs document collection.

Runs the same ingestion and search services as the HTTP API, without the
web server or authentication.  Useful for bulk loading, smoke-testing a
deployment, and wiping the collection.

Usage::

    python -m src.cli ingest --file /path/to/report.pdf --chunk-size 200 --chunk-stride 150

    python -m src.cli search "quarterly revenue by region"

    python -m src.cli reset --yes

    python -m src.cli health
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Any

import httpx

from src.config.loader import load_settings
from src.config.settings import Settings
from src.models.document import IngestionSummary, QueryResult
from src.providers.embedding.ollama_embedding_provider import OllamaEmbeddingProvider
from src.providers.vector_store.chroma_http_provider import ChromaHTTPProvider
from src.services.collection_provisioner import CollectionProvisioner
from src.services.ingestion.ingestion_service import IngestionService
from src.services.search_service import SearchService
from src.utils.errors import VectorDocsError
from src.utils.logging import configure_logging

# Characters of each hit shown by ``search``.
_PREVIEW_CHARS = 200


def _build_components(app_settings: Settings, http_client: httpx.AsyncClient) -> dict[str, Any]:
    """Wire providers and services around a caller-owned HTTP client."""
    embedding_provider = OllamaEmbeddingProvider(settings=app_settings, http_client=http_client)
    vector_store = ChromaHTTPProvider(settings=app_settings, http_client=http_client)
    provisioner = CollectionProvisioner(
        vector_store=vector_store,
        embedding_model=app_settings.embedding_model,
    )
    return {
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "provisioner": provisioner,
        "ingestion_service": IngestionService(
            settings=app_settings,
            embedding_provider=embedding_provider,
            vector_store=vector_store,
            provisioner=provisioner,
        ),
        "search_service": SearchService(
            settings=app_settings,
            embedding_provider=embedding_provider,
            vector_store=vector_store,
            provisioner=provisioner,
        ),
    }


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_summary(summary: IngestionSummary) -> None:
    print("\nIngestion complete:")
    print(f"  File:           {summary.filename}")
    print(f"  Chunk size:     {summary.chunk_size} words (stride {summary.chunk_stride})")
    print(f"  Chunks:         {summary.total_chunks}")
    print(f"  Stored:         {summary.stored_chunks}")
    print(f"  Failed:         {summary.failed_chunks}")
    print(f"  Time:           {summary.ingestion_time:.2f}s")
    for outcome in summary.failures:
        print(f"    chunk {outcome.chunk_num}: {outcome.status.value} ({outcome.error})")


def _print_hits(result: QueryResult) -> None:
    if not result.hit_count:
        print("No matching chunks.")
        return

    ids = result.ids[0]
    documents = result.documents[0] if result.documents else [None] * len(ids)
    metadatas = result.metadatas[0] if result.metadatas else [None] * len(ids)
    distances = result.distances[0] if result.distances else [None] * len(ids)

    for rank, (doc, meta, dist) in enumerate(zip(documents, metadatas, distances), start=1):
        meta = meta or {}
        where = f"{meta.get('filename', '?')} #{meta.get('chunk_num', '?')}"
        score = f"{dist:.4f}" if dist is not None else "n/a"
        preview = (doc or "").replace("\n", " ")[:_PREVIEW_CHARS]
        print(f"{rank}. [{score}] {where}")
        print(f"   {preview}")


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_ingest(args: argparse.Namespace, service: IngestionService) -> int:
    """Ingest one local PDF file."""
    if not os.path.isfile(args.file):
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return 1

    print(f"Ingesting PDF: {args.file}")
    summary = await service.ingest(
        args.file,
        os.path.basename(args.file),
        chunk_size=args.chunk_size,
        chunk_stride=args.chunk_stride,
    )
    _print_summary(summary)
    return 0


async def _handle_search(args: argparse.Namespace, service: SearchService) -> int:
    query = " ".join(args.query).strip()
    if not query:
        print("Error: query must not be empty", file=sys.stderr)
        return 1

    result = await service.search(query, top_k=args.top_k)
    _print_hits(result)
    return 0


async def _handle_reset(
    args: argparse.Namespace,
    provisioner: CollectionProvisioner,
    collection_name: str,
) -> int:
    """Delete the whole collection.  Requires confirmation unless --yes."""
    if not args.yes:
        confirm = input(f"  Delete collection '{collection_name}'? [y/N] ").strip().lower()
        if confirm not in ("y", "yes"):
            print("  Aborted.")
            return 0

    existed = await provisioner.reset(collection_name)
    if existed:
        print(f"Collection '{collection_name}' deleted.")
    else:
        print(f"Collection '{collection_name}' did not exist. Nothing to reset.")
    return 0


async def _handle_health(components: dict[str, Any]) -> int:
    """Report whether Ollama and ChromaDB answer."""
    checks = {
        "ollama": components["embedding_provider"],
        "chromadb": components["vector_store"],
    }
    healthy = True
    for name, provider in checks.items():
        available = await provider.is_available()
        healthy = healthy and available
        print(f"  {name:<10} {'ok' if available else 'unreachable'}")
    return 0 if healthy else 1


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    """Open the shared HTTP client, dispatch the command, close the client."""
    async with httpx.AsyncClient(timeout=app_settings.get_http_timeout()) as http_client:
        components = _build_components(app_settings, http_client)
        try:
            if args.command == "ingest":
                return await _handle_ingest(args, components["ingestion_service"])
            if args.command == "search":
                return await _handle_search(args, components["search_service"])
            if args.command == "reset":
                return await _handle_reset(
                    args, components["provisioner"], app_settings.collection_name
                )
            if args.command == "health":
                return await _handle_health(components)
        except VectorDocsError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the document CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Ingest, search and reset the VectorDocs document collection.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Optional YAML config file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Document commands")

    # -- ingest --
    ingest_parser = subparsers.add_parser("ingest", help="Ingest a PDF file")
    ingest_parser.add_argument("--file", required=True, help="Path to the PDF file")
    ingest_parser.add_argument(
        "--chunk-size", dest="chunk_size", default=None, help="Words per chunk (default: 100)"
    )
    ingest_parser.add_argument(
        "--chunk-stride",
        dest="chunk_stride",
        default=None,
        help="Words between chunk starts (default: 80)",
    )

    # -- search --
    search_parser = subparsers.add_parser("search", help="Semantic search over stored chunks")
    search_parser.add_argument("query", nargs="+", help="Free-text query")
    search_parser.add_argument(
        "--top-k", dest="top_k", type=int, default=None, help="Number of hits (default: 5)"
    )

    # -- reset --
    reset_parser = subparsers.add_parser("reset", help="Delete the document collection")
    reset_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompt")

    # -- health --
    subparsers.add_parser("health", help="Check that Ollama and ChromaDB are reachable")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse arguments, load settings, dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        app_settings = load_settings(args.config)
    except VectorDocsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(log_level=app_settings.log_level, json_output=False)

    exit_code = asyncio.run(_run(args, app_settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
