"""Abstract base class for vector-store backends.

Adding a backend only requires subclassing :class:`VectorStoreBase` and
implementing :meth:`upsert`, :meth:`query` and :meth:`health_check`.
Ingestion and retrieval are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lawsphere.errors import BatchWriteError
from lawsphere.retrieval.models import Match, Record


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    namespace:
        Logical partition every read and write is scoped to by default.
    dimension:
        Expected vector dimension; ``None`` skips the check.
    """

    def __init__(self, namespace: str, dimension: int | None = None) -> None:
        self.namespace = namespace
        self.dimension = dimension

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(self, records: list[Record], *, namespace: str | None = None) -> int:
        """Write *records*, overwriting any with the same id.

        Returns the number of records the backend reports as written.

        Raises
        ------
        BatchWriteError
            When the batch is rejected; nothing from it should be assumed stored.
        """
        ...

    @abstractmethod
    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 5,
        namespace: str | None = None,
        include_metadata: bool = True,
    ) -> list[Match]:
        """Return up to *top_k* nearest records, ordered by descending score.

        Raises
        ------
        RetrievalError
            On transport failure.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def connect(self) -> None:
        """Resolve connection details up front.  No-op by default.

        Raises
        ------
        EndpointResolutionError
            If the backend cannot be located; callers treat this as fatal.
        """

    def delete(self, ids: list[str], *, namespace: str | None = None) -> None:
        """Delete records by id.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")

    # -- helpers --------------------------------------------------------------

    def _ns(self, namespace: str | None) -> str:
        return namespace if namespace is not None else self.namespace

    def validate_records(self, records: list[Record]) -> None:
        """Reject the batch if any record has a non-finite or mis-sized vector."""
        bad = [r.id for r in records if not r.is_valid(self.dimension)]
        if bad:
            raise BatchWriteError(
                f"Rejected batch: {len(bad)} record(s) with invalid vectors",
                record_ids=bad,
            )
