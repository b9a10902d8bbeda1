"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import math

import pytest

from lawsphere.errors import BatchWriteError, EmbeddingError, EndpointResolutionError
from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import Match, Record


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeEmbedder:
    """Deterministic character-histogram embedder.

    Raises ``EmbeddingError`` for any text containing *fail_on*.
    """

    def __init__(self, dimension: int = 8, fail_on: str | None = None) -> None:
        self.dimension = dimension
        self.fail_on = fail_on
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise EmbeddingError("simulated inference failure")
        raw = [float(sum(ord(c) for c in text[i :: self.dimension]) + 1) for i in range(self.dimension)]
        norm = math.sqrt(sum(v * v for v in raw))
        return [v / norm for v in raw]


class InMemoryVectorStore(VectorStoreBase):
    """Dict-backed store with cosine search and injectable failures."""

    def __init__(self, *, fail_calls: set[int] | None = None, connect_error: bool = False) -> None:
        super().__init__("default")
        self.data: dict[str, dict[str, Record]] = {}
        self.upsert_calls: list[list[str]] = []
        self.fail_calls = fail_calls or set()
        self.connect_error = connect_error
        self.connected = False

    def connect(self) -> None:
        if self.connect_error:
            raise EndpointResolutionError("missing-index")
        self.connected = True

    def upsert(self, records: list[Record], *, namespace: str | None = None) -> int:
        call_no = len(self.upsert_calls)
        self.upsert_calls.append([r.id for r in records])
        if call_no in self.fail_calls:
            raise BatchWriteError("simulated rejection", record_ids=[r.id for r in records])
        self.validate_records(records)
        bucket = self.data.setdefault(self._ns(namespace), {})
        for r in records:
            bucket[r.id] = r
        return len(records)

    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 5,
        namespace: str | None = None,
        include_metadata: bool = True,
    ) -> list[Match]:
        bucket = self.data.get(self._ns(namespace), {})
        scored = [
            Match(
                id=r.id,
                score=sum(a * b for a, b in zip(vector, r.vector)),
                metadata=dict(r.metadata) if include_metadata else {},
            )
            for r in bucket.values()
        ]
        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:top_k]

    def health_check(self) -> bool:
        return True

    @property
    def records(self) -> dict[str, Record]:
        return self.data.get(self.namespace, {})


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def memory_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()
