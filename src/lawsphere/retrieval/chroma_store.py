"""Chroma implementation of the vector-store abstraction (local development)."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from lawsphere.config import settings
from lawsphere.errors import BatchWriteError, RetrievalError
from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import Match, Record

logger = logging.getLogger(__name__)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Each namespace maps to a Chroma collection using cosine distance.
    Chunk text is stored as the Chroma document and folded back into the
    match metadata as ``text`` on the way out.

    Parameters
    ----------
    namespace:
        Default namespace (collection name).
    host / port:
        Chroma server address.
    client:
        Pre-built Chroma client (e.g. ``chromadb.EphemeralClient()``).
    """

    def __init__(
        self,
        namespace: str = settings.pinecone_namespace,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        dimension: int | None = settings.embedding_dimension,
        client: Any = None,
    ) -> None:
        super().__init__(namespace, dimension)
        self._client = client or chromadb.HttpClient(host=host, port=port)
        self._collections: dict[str, Any] = {}

    def _collection(self, namespace: str | None) -> Any:
        name = self._ns(namespace)
        if name not in self._collections:
            self._collections[name] = self._client.get_or_create_collection(
                name=name, metadata={"hnsw:space": "cosine"}
            )
        return self._collections[name]

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, records: list[Record], *, namespace: str | None = None) -> int:
        if not records:
            return 0
        self.validate_records(records)

        metadatas: list[dict[str, Any]] = []
        for r in records:
            # Chroma metadata values must be flat str/int/float/bool
            metadatas.append(
                {k: v for k, v in r.metadata.items() if k != "text" and isinstance(v, (str, int, float, bool))}
            )
        try:
            self._collection(namespace).upsert(
                ids=[r.id for r in records],
                embeddings=[r.vector for r in records],
                documents=[str(r.metadata.get("text", "")) for r in records],
                metadatas=metadatas,
            )
        except Exception as exc:
            raise BatchWriteError(f"Chroma upsert failed: {exc}", record_ids=[r.id for r in records]) from exc
        return len(records)

    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 5,
        namespace: str | None = None,
        include_metadata: bool = True,
    ) -> list[Match]:
        try:
            results = self._collection(namespace).query(
                query_embeddings=[vector],
                n_results=top_k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise RetrievalError(f"Chroma query failed: {exc}") from exc

        ids = results.get("ids", [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        matches: list[Match] = []
        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            metadata: dict[str, Any] = {}
            if include_metadata:
                metadata = {**(meta or {}), "text": content or ""}
            # Cosine distance -> similarity.
            matches.append(Match(id=doc_id, score=1.0 - float(dist), metadata=metadata))
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str], *, namespace: str | None = None) -> None:
        self._collection(namespace).delete(ids=ids)
