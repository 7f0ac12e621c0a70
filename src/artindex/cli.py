"""CLI entry point for ArtIndex."""

import argparse
import logging
import sys
import time
from pathlib import Path

from artindex.chunkers import ProjectChunker, get_chunking_stats
from artindex.config import Settings
from artindex.embedders import SentenceTransformerEmbedder
from artindex.errors import ArtIndexError, CorpusError, EmbeddingModelError
from artindex.loaders import get_loader
from artindex.models import ProgressEvent
from artindex.pipeline import BuildMode, IndexBuilder
from artindex.search import IndexHandle, ProjectCatalog, SearchEngine
from artindex.search.formatters import FORMATTERS
from artindex.storage import VectorStore
from artindex.utils import format_duration, format_size

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)

# Log a progress line every N batches (and always on checkpoints and completion)
PROGRESS_EVERY = 10


def _log_progress(event: ProgressEvent, batch_size: int) -> None:
    batch_number = (event.processed + batch_size - 1) // batch_size
    if not (
        event.checkpointed
        or event.processed == event.total
        or batch_number % PROGRESS_EVERY == 0
    ):
        return
    eta = event.eta_seconds
    eta_text = format_duration(eta) if eta is not None else "--"
    logger.info(
        f"Embedding chunk {event.processed:,}/{event.total:,} "
        f"({event.fraction * 100:.1f}%) - elapsed {format_duration(event.elapsed_seconds)}"
        f" - ETA: {eta_text}"
    )


def generate(settings: Settings, force: bool = False, full: bool = False, limit: int | None = None) -> None:
    """Build or incrementally update the embedding index.

    Args:
        settings: Resolved paths and tuning knobs
        force: Regenerate every embedding even if nothing changed
        full: Ignore stored checksums and embed every document
        limit: Process only the first N documents
    """
    start = time.monotonic()

    loader = get_loader(settings.documents_path)
    if loader is None:
        logger.error(f"Cannot process: {settings.documents_path}")
        logger.error("Supported inputs: .json document corpus")
        sys.exit(1)

    logger.info(f"Loading documents from {settings.documents_path}...")
    try:
        documents = loader.load(settings.documents_path, limit=limit)
    except CorpusError as e:
        logger.error(str(e))
        logger.error(e.hint)
        sys.exit(1)

    logger.info(f"Loaded {len(documents):,} documents")
    if limit:
        logger.info(f"Limited to {len(documents)} documents (--limit {limit})")

    chunker = ProjectChunker()
    stats = get_chunking_stats(chunker.chunk_many(documents), len(documents))
    logger.info(f"  Total chunks: {stats.total_chunks:,}")
    logger.info(f"  Metadata chunks: {stats.metadata_chunks:,}")
    logger.info(f"  Tag chunks: {stats.tag_chunks:,}")
    logger.info(f"  Avg per project: {stats.avg_chunks_per_project:.2f}")
    logger.info("")

    if force:
        mode = BuildMode.FORCE
    elif full:
        mode = BuildMode.FULL
    else:
        mode = BuildMode.INCREMENTAL

    store = VectorStore(settings.index_dir)
    embedder = SentenceTransformerEmbedder(settings.model_name, settings.cache_dir)
    builder = IndexBuilder(
        store,
        embedder,
        chunker=chunker,
        batch_size=settings.batch_size,
        checkpoint_interval=settings.checkpoint_interval,
    )

    logger.info(f"  Batch size: {builder.batch_size}")
    logger.info(f"  Checkpoint every: {builder.checkpoint_interval} chunks")
    try:
        summary = builder.run(
            documents,
            mode=mode,
            complete_corpus=limit is None,
            on_progress=lambda event: _log_progress(event, builder.batch_size),
        )
    except EmbeddingModelError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("")
    if summary.nothing_to_do:
        logger.info(f"Index is up to date ({summary.total_vectors:,} vectors).")
        logger.info("Use --force to regenerate.")
        return

    logger.info("=" * 60)
    logger.info("Generation Complete")
    logger.info("=" * 60)
    logger.info(f"  Mode: {summary.mode.value}")
    logger.info(f"  Projects: {summary.documents:,} ({summary.changed:,} re-embedded)")
    logger.info(f"  Vectors: {summary.total_vectors:,} ({summary.embedded_chunks:,} new)")
    logger.info(f"  Dimensions: {embedder.dimension}")
    logger.info(f"  Model: {embedder.model_name}")
    logger.info(f"  Duration: {format_duration(time.monotonic() - start)}")
    logger.info(f"  File size: {format_size(store.vectors_path.stat().st_size)}")


def search(
    settings: Settings,
    query: str,
    top_k: int = 10,
    output_format: str = "table",
    platform: str | None = None,
    framework: str | None = None,
    artist: str | None = None,
    min_score: float | None = None,
    verbose: bool = False,
) -> None:
    """Search the index and print formatted results."""
    store = VectorStore(settings.index_dir)
    if not store.index_exists():
        logger.error("Error: Embeddings not found.")
        logger.error("Run `artindex generate` first to generate embeddings.")
        sys.exit(1)

    embedder = SentenceTransformerEmbedder(settings.model_name, settings.cache_dir)
    engine = SearchEngine(IndexHandle(store), embedder, min_score=settings.min_score)
    filters = {
        "platform": platform,
        "framework": framework,
        "artist": artist,
        "min_score": min_score,
    }

    started = time.perf_counter()
    try:
        if verbose:
            index_stats = engine.get_index_stats()
            logger.info(f"Query: {query!r}  Top K: {top_k}  Filters: {filters}")
            logger.info(
                f"Index: {index_stats['vectorCount']:,} vectors, "
                f"{index_stats['model']} ({index_stats['dimensions']} dims)"
            )
        results = engine.search(query, top_k=top_k, filters=filters)
    except ArtIndexError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    logger.debug(f"Search completed in {(time.perf_counter() - started) * 1000:.0f}ms")

    loader = get_loader(settings.documents_path)
    try:
        if loader is None:
            raise CorpusError(f"Unsupported corpus format: {settings.documents_path}")
        catalog = ProjectCatalog(loader.load(settings.documents_path))
    except CorpusError as e:
        logger.warning(f"Warning: could not load documents for enrichment: {e}")
        catalog = ProjectCatalog([])

    enriched = [catalog.enrich(r) for r in results]
    print(FORMATTERS[output_format](enriched))


def stats(settings: Settings) -> None:
    """Show information about the persisted index."""
    store = VectorStore(settings.index_dir)
    metadata = store.get_metadata()
    if metadata is None or not store.index_exists():
        logger.error(f"No index found in {settings.index_dir}")
        sys.exit(1)

    index = store.load_index()
    vector_count = len(index.vectors) if index else 0

    print(f"Index: {store.index_dir}")
    print(f"  Size: {format_size(store.vectors_path.stat().st_size)}")
    print("")
    print("Metadata:")
    for key, value in metadata.to_dict().items():
        print(f"  {key}: {value}")
    print("")
    print("Contents:")
    print(f"  Vectors: {vector_count:,}")
    print(f"  Checksums: {len(store.load_checksums()):,}")
    if index is not None and not store.is_consistent(index):
        print("  Warning: metadata chunk count does not match vector count")


def serve(settings: Settings, transport: str = "stdio") -> None:
    """Start the MCP tool server.

    Args:
        settings: Resolved paths and tuning knobs
        transport: Transport protocol (stdio or sse)
    """
    # Import here to avoid loading MCP unless needed
    from artindex.server import create_mcp_server

    from typing import cast, Literal

    logger.info(f"Serving {settings.index_dir} via {transport}")
    mcp = create_mcp_server(settings)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="artindex",
        description="ArtIndex - semantic search over generative art projects",
    )
    parser.add_argument("--documents", type=Path, help="Path to rag-documents.json")
    parser.add_argument("--index-dir", type=Path, help="Directory holding the index files")
    parser.add_argument("--model", help="sentence-transformers model name")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug information",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate or update embeddings for the document corpus",
    )
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Regenerate embeddings even if they exist",
    )
    generate_parser.add_argument(
        "--full",
        action="store_true",
        help="Ignore checksums and re-embed every document",
    )
    generate_parser.add_argument(
        "--limit",
        type=int,
        help="Process only the first N documents (for testing)",
    )

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search projects with a natural language query",
    )
    search_parser.add_argument("query", nargs="+", help="Query text")
    search_parser.add_argument("--top", "-n", type=int, default=10, help="Number of results (default: 10)")
    search_parser.add_argument(
        "--format",
        "-f",
        choices=sorted(FORMATTERS),
        default="table",
        help="Output format (default: table)",
    )
    search_parser.add_argument("--platform", help="Filter by platform: artblocks, fxhash")
    search_parser.add_argument("--framework", help="Filter by framework: p5js, threejs, js, regl, tone")
    search_parser.add_argument("--artist", help="Filter by artist name (partial match)")
    search_parser.add_argument("--min-score", type=float, help="Minimum similarity score")

    # stats command
    subparsers.add_parser(
        "stats",
        help="Show information about the index",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start MCP server exposing search tools",
    )
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = Settings.from_env().with_overrides(
            documents_path=args.documents,
            index_dir=args.index_dir,
            model_name=args.model,
        )
    except RuntimeError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.command == "generate":
        generate(settings, force=args.force, full=args.full, limit=args.limit)
    elif args.command == "search":
        search(
            settings,
            " ".join(args.query),
            top_k=args.top,
            output_format=args.format,
            platform=args.platform,
            framework=args.framework,
            artist=args.artist,
            min_score=args.min_score,
            verbose=args.verbose,
        )
    elif args.command == "stats":
        stats(settings)
    elif args.command == "serve":
        serve(settings, args.transport)


if __name__ == "__main__":
    main()
