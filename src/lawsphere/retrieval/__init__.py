"""
Retrieval — vector stores, similarity search and context assembly.

This module wraps the vector store behind a clean interface so the
ingestion and answer layers never need to know which DB backs them.

Public surface
--------------
- :class:`RetrievalAssembler` — multi-query retrieval with dedup and attribution.
- :class:`VectorStoreBase` — abstract backend.
- :class:`PineconeVectorStore` — default backend (SDK + REST write transports).
- :class:`ChromaVectorStore` — local development backend.
- :class:`Record`, :class:`Match`, :class:`Context` — data models.
"""

from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import NO_RELEVANT_CONTENT, Context, Match, Record
from lawsphere.retrieval.retriever import RetrievalAssembler, merge_matches

__all__ = [
    "ChromaVectorStore",
    "Context",
    "Match",
    "NO_RELEVANT_CONTENT",
    "PineconeVectorStore",
    "Record",
    "RetrievalAssembler",
    "VectorStoreBase",
    "merge_matches",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends so their client libraries load only when used."""
    if name == "PineconeVectorStore":
        from lawsphere.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore
    if name == "ChromaVectorStore":
        from lawsphere.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
