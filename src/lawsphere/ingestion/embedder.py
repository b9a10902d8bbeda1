"""Embedding service — sentence-transformer vectors, loaded once per process."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from lawsphere.config import settings
from lawsphere.errors import EmbeddingError

logger = logging.getLogger(__name__)


def _huggingface_factory(model_name: str) -> Any:
    # Imported lazily: pulling in torch is slow and tests never need it.
    from langchain_huggingface import HuggingFaceEmbeddings

    return HuggingFaceEmbeddings(
        model_name=model_name,
        encode_kwargs={"normalize_embeddings": True},
    )


class EmbeddingService:
    """Turn text into a fixed-dimension, L2-normalised vector.

    The underlying model (mean-pooled sentence transformer) is created on
    first use.  Concurrent first calls are serialised by a lock, so the
    model is loaded exactly once per instance.

    Parameters
    ----------
    model_name:
        HuggingFace model id.
    dimension:
        Expected vector dimension; ``None`` skips the check.
    model_factory:
        Callable building the model from *model_name*.  The model must
        expose ``embed_query(text) -> list[float]``.
    """

    def __init__(
        self,
        model_name: str = settings.embedding_model,
        *,
        dimension: int | None = settings.embedding_dimension,
        model_factory: Callable[[str], Any] = _huggingface_factory,
    ) -> None:
        self.model_name = model_name
        self.dimension = dimension
        self._factory = model_factory
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._model is not None

    def _get_model(self) -> Any:
        if self._model is None:
            with self._lock:
                if self._model is None:
                    logger.info("Loading embedding model %s", self.model_name)
                    try:
                        self._model = self._factory(self.model_name)
                    except Exception as exc:
                        raise EmbeddingError(
                            f"Could not load embedding model {self.model_name}",
                            {"model": self.model_name},
                        ) from exc
                    logger.info("Embedding model loaded")
        return self._model

    def embed(self, text: str) -> list[float]:
        """Return the unit-norm embedding of *text*.

        Raises
        ------
        EmbeddingError
            On inference failure, wrong dimension, a zero vector or any
            non-finite component.
        """
        model = self._get_model()
        try:
            raw = model.embed_query(text)
        except Exception as exc:
            raise EmbeddingError("Embedding inference failed", {"chars": len(text)}) from exc
        return self._normalise(list(raw))

    def _normalise(self, vector: list[float]) -> list[float]:
        if self.dimension is not None and len(vector) != self.dimension:
            raise EmbeddingError(
                "Embedding has unexpected dimension",
                {"expected": self.dimension, "actual": len(vector)},
            )
        if not vector or not all(math.isfinite(v) for v in vector):
            raise EmbeddingError("Embedding contains non-finite values")
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0.0:
            raise EmbeddingError("Embedding is the zero vector")
        return [v / norm for v in vector]


@lru_cache(maxsize=1)
def default_embedding_service() -> EmbeddingService:
    """Process-wide service built from the global settings."""
    return EmbeddingService()
