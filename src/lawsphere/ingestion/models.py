"""Transient ingestion-side models: documents, chunks, run reports."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Document(BaseModel):
    """A source file's name and raw text, alive only during ingestion."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    raw_text: str


class ChunkingParams(BaseModel):
    """Parameters that, together with the text, fully determine chunk boundaries."""

    model_config = ConfigDict(frozen=True)

    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)

    @model_validator(mode="after")
    def _overlap_below_size(self) -> ChunkingParams:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


class Chunk(BaseModel):
    """A contiguous excerpt of a document.

    Attributes
    ----------
    source_file:
        File name of the parent document.
    index:
        Ordinal position of the chunk within the document.
    text:
        The excerpt itself.
    section_label:
        Best-effort ``"Section N"`` / ``"Article N"`` tag, ``"General"`` otherwise.
    start / end:
        Character offsets of the excerpt within the sanitised text.
    """

    model_config = ConfigDict(frozen=True)

    source_file: str
    index: int
    text: str
    section_label: str = "General"
    start: int = 0
    end: int = 0


class IngestionReport(BaseModel):
    """Counts aggregated over one ingestion run."""

    per_document: dict[str, int] = Field(default_factory=dict)
    skipped_documents: list[str] = Field(default_factory=list)
    lost_chunks: int = 0
    failed_batches: int = 0

    @property
    def total(self) -> int:
        return sum(self.per_document.values())

    def summary(self) -> str:
        return (
            f"Stored {self.total} chunks from {len(self.per_document)} documents "
            f"({len(self.skipped_documents)} skipped, {self.lost_chunks} chunks lost, "
            f"{self.failed_batches} batches failed)"
        )
