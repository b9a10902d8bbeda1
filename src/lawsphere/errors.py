"""Exception hierarchy for the ingestion and retrieval pipeline.

Per-unit failures (``LoadError``, ``EmbeddingError``, ``BatchWriteError``)
are caught by the loops that produce them and the loop continues.
``EndpointResolutionError`` aborts an ingestion run.  ``RetrievalError``
is surfaced to the caller as a service failure, distinct from a
legitimate "no relevant content" answer.
"""

from __future__ import annotations

from typing import Any


class LawSphereError(Exception):
    """Base exception carrying an optional ``details`` dict for logs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class LoadError(LawSphereError):
    """A document could not be read or has too little usable text."""

    def __init__(self, message: str, file_name: str | None = None, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, details)


class EmbeddingError(LawSphereError):
    """Inference failed or produced a non-finite vector."""


class BatchWriteError(LawSphereError):
    """A transport rejected a batch of records."""

    def __init__(
        self,
        message: str,
        record_ids: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        self.record_ids = list(record_ids or [])
        if self.record_ids:
            details["batch_size"] = len(self.record_ids)
            details["first_id"] = self.record_ids[0]
        super().__init__(message, details)


class EndpointResolutionError(LawSphereError):
    """The named index does not exist or its host cannot be resolved."""

    def __init__(self, index_name: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["index_name"] = index_name
        self.index_name = index_name
        super().__init__(f"Could not resolve vector index: {index_name}", details)


class RetrievalError(LawSphereError):
    """A similarity query failed at the transport level."""
