"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Vector store
    vector_backend: str = Field(default="pinecone", description="'pinecone' or 'chroma' (local development)")
    pinecone_api_key: str = ""
    pinecone_index: str = Field(default="lawsphere", description="Name of the Pinecone index")
    pinecone_namespace: str = "default"
    pinecone_api_version: str = "2025-01"
    pinecone_controller_url: str = Field(
        default="https://api.pinecone.io", description="Control plane used to look up index hosts"
    )
    upsert_transport: str = Field(
        default="auto",
        description=(
            "How batches are written. 'sdk' uses the Pinecone client, 'rest' posts "
            "JSON straight to the data-plane host, 'auto' tries the client first "
            "and falls back to REST when the client rejects a batch."
        ),
    )
    request_timeout: float = Field(default=30.0, description="Timeout in seconds for every network call")

    chroma_host: str = "localhost"
    chroma_port: int = 8000

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 200
    min_chunk_chars: int = 100
    min_document_chars: int = 100

    # Ingestion
    upsert_batch_size: int = 20
    data_dir: str = "data"
    document_glob: str = "**/*.*"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_dimension: int = 384

    # Retrieval
    retrieval_top_k: int = 5
    compare_top_k: int = 3
    min_context_chars: int = 50

    # LLM (any OpenAI-compatible endpoint; Groq by default)
    llm_api_key: str = ""
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model_name: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.1

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import `settings` wherever needed.
settings = Settings()
