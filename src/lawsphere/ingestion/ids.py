"""Deterministic record identity.

A record id is ``"<sanitizedFileName>-<chunkIndex>"``.  Because chunking
is deterministic, re-ingesting an unchanged document with the same
:class:`ChunkingParams` yields the same ids, so the store overwrites
instead of appending.  The parameters are stamped into the metadata so
records written under different parameters can be told apart.
"""

from __future__ import annotations

import re

from lawsphere.ingestion.models import Chunk, ChunkingParams
from lawsphere.retrieval.models import Record

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_file_name(file_name: str) -> str:
    """Reduce *file_name* to an ASCII-safe id prefix."""
    cleaned = _UNSAFE.sub("_", file_name).strip("_")
    return cleaned or "document"


def record_id(file_name: str, chunk_index: int) -> str:
    """Return the storage key for chunk *chunk_index* of *file_name*.

    The chunking parameters are not part of the key.  Ids are only stable
    across runs that use the same parameters, and :func:`chunk_to_record`
    stamps them into the metadata.
    """
    return f"{sanitize_file_name(file_name)}-{chunk_index}"


def chunk_to_record(chunk: Chunk, vector: list[float], params: ChunkingParams) -> Record:
    """Build the persisted :class:`Record` for an embedded chunk."""
    return Record(
        id=record_id(chunk.source_file, chunk.index),
        vector=vector,
        metadata={
            "text": chunk.text,
            "section": chunk.section_label,
            "source": chunk.source_file,
            "chunk_index": chunk.index,
            "chunk_size": params.chunk_size,
            "chunk_overlap": params.chunk_overlap,
        },
    )
