"""Domain models for stored records, query matches and assembled context."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

# Returned instead of a context when retrieval found too little to ground an answer.
NO_RELEVANT_CONTENT = "I could not find relevant content for this question in the indexed documents."

CONTEXT_SEPARATOR = "\n\n---\n\n"


class Record(BaseModel):
    """The persisted unit: one embedded chunk.

    Attributes
    ----------
    id:
        Deterministic key, see :func:`lawsphere.ingestion.ids.record_id`.
    vector:
        Unit-norm embedding of fixed dimension.
    metadata:
        ``text``, ``section`` and ``source`` for attribution at answer time.
    """

    id: str
    vector: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)

    def is_valid(self, dimension: int | None = None) -> bool:
        """``True`` when every component is finite and the dimension matches."""
        if dimension is not None and len(self.vector) != dimension:
            return False
        return bool(self.vector) and all(math.isfinite(v) for v in self.vector)

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the vector-store wire shape ``{id, values, metadata}``."""
        return {"id": self.id, "values": self.vector, "metadata": self.metadata}


class Match(BaseModel):
    """A record returned by a similarity query.  Higher score = more relevant."""

    id: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return str(self.metadata.get("text") or "")

    @property
    def source(self) -> str:
        return str(self.metadata.get("source") or "unknown")

    @property
    def section(self) -> str:
        return str(self.metadata.get("section") or "General")

    def attributed(self) -> str:
        """Render as ``[Source: <source>] <text>``."""
        return f"[Source: {self.source}] {self.text}"


class Context(BaseModel):
    """Deduplicated, attributed retrieval context for one request.

    When the assembled text is too short to ground an answer, ``text``
    holds :data:`NO_RELEVANT_CONTENT` and ``sufficient`` is ``False``.
    """

    matches: list[Match] = Field(default_factory=list)
    text: str = NO_RELEVANT_CONTENT
    sufficient: bool = False

    def __str__(self) -> str:  # noqa: D105
        return self.text
