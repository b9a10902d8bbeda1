"""KFP v2 component — Ingest a directory of legal texts into Pinecone.

Runs the full chunk → embed → upsert orchestration inside one container
and reports counts as KFP metrics.

Local testing
-------------
    from pipelines.components.ingest import ingest_corpus
    ingest_corpus.python_func(
        data_dir="/data/documents",
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

from kfp import dsl


@dsl.component(
    base_image="python:3.11-slim",
    packages_to_install=["lawsphere-rag"],
)
def ingest_corpus(
    data_dir: str,
    metrics: dsl.Output[dsl.Metrics],
    glob_pattern: str = "**/*.*",
    pinecone_index: str = "lawsphere",
    namespace: str = "default",
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2",
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    upsert_batch_size: int = 20,
    upsert_transport: str = "auto",
) -> str:
    """Load, chunk, embed, and store every document under *data_dir*.

    The Pinecone API key is read from the ``PINECONE_API_KEY``
    environment variable (mount it from a Kubernetes secret).

    Parameters
    ----------
    data_dir:
        Directory of source documents (PDF or text).
    metrics:
        Output Metrics artifact with ingestion counts.
    glob_pattern:
        File-matching glob.
    pinecone_index / namespace:
        Target index and namespace.
    embedding_model:
        HuggingFace model identifier for embedding.
    chunk_size / chunk_overlap:
        Chunking parameters.
    upsert_batch_size:
        Records per upsert call.
    upsert_transport:
        ``"sdk"`` | ``"rest"`` | ``"auto"``

    Returns
    -------
    str
        Summary, e.g. ``"Stored 412 chunks from 3 documents (...)"``.
    """
    import logging

    from lawsphere.config import settings
    from lawsphere.ingestion.chunker import TextChunker
    from lawsphere.ingestion.embedder import EmbeddingService
    from lawsphere.ingestion.pipeline import IngestionOrchestrator
    from lawsphere.retrieval.pinecone_store import PineconeVectorStore

    logging.basicConfig(level=logging.INFO)
    log = logging.getLogger("ingest_corpus")

    store = PineconeVectorStore(
        pinecone_index,
        namespace=namespace,
        api_key=settings.pinecone_api_key,
        transport=upsert_transport,
    )
    orchestrator = IngestionOrchestrator(
        store,
        EmbeddingService(embedding_model),
        TextChunker(chunk_size, chunk_overlap),
        batch_size=upsert_batch_size,
    )
    report = orchestrator.ingest_directory(data_dir, glob_pattern)

    # KFP Metrics
    metrics.log_metric("documents_ingested", len(report.per_document))
    metrics.log_metric("documents_skipped", len(report.skipped_documents))
    metrics.log_metric("chunks_stored", report.total)
    metrics.log_metric("chunks_lost", report.lost_chunks)
    metrics.log_metric("failed_batches", report.failed_batches)

    msg = report.summary()
    log.info(msg)
    return msg
