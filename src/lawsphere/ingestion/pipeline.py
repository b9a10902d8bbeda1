"""Ingestion orchestrator: sanitise → chunk → embed → batch → upsert.

Failures are isolated per unit.  A document that is unreadable or too
short is skipped; a chunk that fails to embed is counted as lost; a batch
the store rejects is logged and dropped.  Only an unresolvable store
endpoint aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from lawsphere.config import settings
from lawsphere.errors import BatchWriteError, EmbeddingError, LoadError
from lawsphere.ingestion.chunker import TextChunker
from lawsphere.ingestion.ids import chunk_to_record
from lawsphere.ingestion.loader import load_directory, sanitize_text
from lawsphere.ingestion.models import Document, IngestionReport
from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import Record
from lawsphere.retrieval.retriever import Embedder

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """Drive documents into a vector store.

    Parameters
    ----------
    store:
        Target backend.
    embedder:
        Anything with ``embed(text) -> list[float]``.
    chunker:
        Defaults to a :class:`TextChunker` built from the global settings.
    batch_size:
        Records per upsert call.
    min_document_chars:
        Sanitised documents shorter than this are skipped (scanned PDFs,
        empty files).
    namespace:
        Overrides the store's default namespace.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: Embedder,
        chunker: TextChunker | None = None,
        *,
        batch_size: int = settings.upsert_batch_size,
        min_document_chars: int = settings.min_document_chars,
        namespace: str | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._store = store
        self._embedder = embedder
        self.chunker = chunker or TextChunker()
        self.batch_size = batch_size
        self.min_document_chars = min_document_chars
        self.namespace = namespace

    # -- public API -----------------------------------------------------------

    def ingest(self, documents: Iterable[Document]) -> IngestionReport:
        """Ingest *documents* and return per-document and total stored counts.

        Raises
        ------
        EndpointResolutionError
            If the store cannot be located.  Nothing is written.
        """
        self._store.connect()
        report = IngestionReport()
        for document in documents:
            try:
                stored = self._ingest_document(document, report)
            except LoadError as exc:
                logger.warning("Skipping %s: %s", document.file_name, exc)
                report.skipped_documents.append(document.file_name)
                continue
            report.per_document[document.file_name] = report.per_document.get(document.file_name, 0) + stored
            logger.info("%s: stored %d chunks", document.file_name, stored)

        logger.info(report.summary())
        return report

    def ingest_directory(self, path: str | Path, glob: str = settings.document_glob) -> IngestionReport:
        """Load every document under *path* and :meth:`ingest` them."""
        return self.ingest(load_directory(path, glob))

    # -- internals ------------------------------------------------------------

    def _ingest_document(self, document: Document, report: IngestionReport) -> int:
        text = sanitize_text(document.raw_text)
        if len(text) < self.min_document_chars:
            raise LoadError(
                "Too little text (scanned or empty document?)",
                file_name=document.file_name,
                details={"chars": len(text)},
            )

        chunks = self.chunker.chunk(Document(file_name=document.file_name, raw_text=text))
        logger.info("%s: %d characters, %d chunks", document.file_name, len(text), len(chunks))

        stored = 0
        batch: list[Record] = []
        for chunk in chunks:
            try:
                vector = self._embedder.embed(chunk.text)
            except EmbeddingError as exc:
                logger.warning("Lost chunk %d of %s: %s", chunk.index, document.file_name, exc)
                report.lost_chunks += 1
                continue
            batch.append(chunk_to_record(chunk, vector, self.chunker.params))
            if len(batch) >= self.batch_size:
                stored += self._flush(batch, report)
                batch = []

        if batch:
            stored += self._flush(batch, report)
        return stored

    def _flush(self, batch: list[Record], report: IngestionReport) -> int:
        try:
            return self._store.upsert(batch, namespace=self.namespace)
        except BatchWriteError as exc:
            logger.error("Dropped batch of %d records starting at %s: %s", len(batch), batch[0].id, exc)
            report.failed_batches += 1
            return 0
