"""``lawsphere-ingest`` — ingest a data directory into the vector store."""

from __future__ import annotations

import argparse
import logging
import sys

from lawsphere.config import settings
from lawsphere.errors import EndpointResolutionError, LoadError

logger = logging.getLogger("lawsphere.ingest")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chunk, embed and upsert a directory of documents")
    parser.add_argument("--data-dir", default=settings.data_dir, help="Directory containing source files")
    parser.add_argument("--glob", default=settings.document_glob, help="File-matching glob")
    parser.add_argument("--chunk-size", type=int, default=settings.chunk_size)
    parser.add_argument("--chunk-overlap", type=int, default=settings.chunk_overlap)
    parser.add_argument("--batch-size", type=int, default=settings.upsert_batch_size)
    parser.add_argument(
        "--transport",
        choices=["sdk", "rest", "auto"],
        default=settings.upsert_transport,
        help="Pinecone write transport",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    from lawsphere.ingestion.chunker import TextChunker
    from lawsphere.ingestion.embedder import EmbeddingService
    from lawsphere.ingestion.pipeline import IngestionOrchestrator
    from lawsphere.retrieval.factory import build_vector_store

    config = settings.model_copy(update={"upsert_transport": args.transport})
    orchestrator = IngestionOrchestrator(
        build_vector_store(config),
        EmbeddingService(config.embedding_model, dimension=config.embedding_dimension),
        TextChunker(args.chunk_size, args.chunk_overlap),
        batch_size=args.batch_size,
    )

    try:
        report = orchestrator.ingest_directory(args.data_dir, args.glob)
    except (EndpointResolutionError, LoadError) as exc:
        logger.error("Aborting ingestion: %s", exc)
        return 1

    for file_name, count in report.per_document.items():
        print(f"{file_name}: {count} chunks")
    print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
