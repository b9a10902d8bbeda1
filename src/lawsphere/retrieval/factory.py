"""Vector-store backend selection."""

from __future__ import annotations

from lawsphere.config import Settings, settings
from lawsphere.retrieval.base import VectorStoreBase


def build_vector_store(config: Settings = settings) -> VectorStoreBase:
    """Return the backend named by ``config.vector_backend``.

    Backends are imported lazily so only the selected client library loads.
    """
    if config.vector_backend == "pinecone":
        from lawsphere.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore(
            config.pinecone_index,
            namespace=config.pinecone_namespace,
            api_key=config.pinecone_api_key,
            transport=config.upsert_transport,
            dimension=config.embedding_dimension,
            timeout=config.request_timeout,
            api_version=config.pinecone_api_version,
            controller_url=config.pinecone_controller_url,
        )
    if config.vector_backend == "chroma":
        from lawsphere.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore(
            config.pinecone_namespace,
            host=config.chroma_host,
            port=config.chroma_port,
            dimension=config.embedding_dimension,
        )
    raise ValueError(
        f"Unsupported vector_backend={config.vector_backend!r}. Choose from: pinecone, chroma."
    )
