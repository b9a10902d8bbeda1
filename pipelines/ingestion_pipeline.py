"""KFP v2 pipeline — LawSphere corpus ingestion.

Compile
-------
    python -m pipelines.ingestion_pipeline --compile
"""

from kfp import compiler, dsl

from pipelines.components.ingest import ingest_corpus


@dsl.pipeline(
    name="lawsphere-ingestion-pipeline",
    description="Chunk, embed and upsert a directory of legal texts into Pinecone.",
)
def ingestion_pipeline(
    data_dir: str = "/data/documents",
    glob_pattern: str = "**/*.*",
    pinecone_index: str = "lawsphere",
    namespace: str = "default",
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2",
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    upsert_batch_size: int = 20,
    upsert_transport: str = "auto",
) -> None:
    """Single-step ingestion; see :func:`ingest_corpus` for parameters."""
    ingest_corpus(
        data_dir=data_dir,
        glob_pattern=glob_pattern,
        pinecone_index=pinecone_index,
        namespace=namespace,
        embedding_model=embedding_model,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        upsert_batch_size=upsert_batch_size,
        upsert_transport=upsert_transport,
    )


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="LawSphere ingestion pipeline")
    parser.add_argument("--compile", action="store_true", help="Compile pipeline to YAML")
    parser.add_argument(
        "--output",
        default="pipelines/compiled/ingestion_pipeline.yaml",
        help="Output path for compiled YAML",
    )
    args = parser.parse_args()

    if args.compile:
        compiler.Compiler().compile(ingestion_pipeline, args.output)
        print(f"Pipeline compiled → {args.output}")
