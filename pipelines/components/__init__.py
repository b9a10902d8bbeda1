"""KFP v2 components — each file exports one @dsl.component."""

from pipelines.components.ingest import ingest_corpus

__all__ = ["ingest_corpus"]
