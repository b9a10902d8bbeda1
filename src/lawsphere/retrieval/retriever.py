"""Retrieval assembler — multi-query search, merging and context formatting.

This module is the **primary public interface** for retrieval.  One
query text issues one similarity search; several query texts (e.g. the
two sides of a comparison) are embedded and searched concurrently, then
merged in first-seen order with duplicate passages removed.

Usage::

    assembler = RetrievalAssembler(store, embedder)
    context = asyncio.run(assembler.retrieve(["Section 103 punishment"]))
    if context.sufficient:
        print(context.text)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from lawsphere.config import settings
from lawsphere.errors import RetrievalError
from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import CONTEXT_SEPARATOR, NO_RELEVANT_CONTENT, Context, Match

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


def merge_matches(*match_lists: Sequence[Match]) -> list[Match]:
    """Concatenate *match_lists* in order, keeping the first of each passage.

    Passages are identified by ``(text, source)``, not by id, so the same
    text retrieved under two queries appears once.  Matches without text
    are dropped.
    """
    seen: set[tuple[str, str]] = set()
    merged: list[Match] = []
    for matches in match_lists:
        for match in matches:
            if not match.text:
                continue
            key = (match.text, match.source)
            if key in seen:
                continue
            seen.add(key)
            merged.append(match)
    return merged


def format_context(matches: Sequence[Match], separator: str = CONTEXT_SEPARATOR) -> str:
    """Join matches as ``[Source: <source>] <text>`` blocks."""
    return separator.join(m.attributed() for m in matches)


def build_context(matches: Sequence[Match], *, min_chars: int = settings.min_context_chars) -> Context:
    """Format *matches*, falling back to the sentinel when under *min_chars*.

    The threshold applies to the joined passage text alone; attribution
    tags do not count towards it.
    """
    raw = CONTEXT_SEPARATOR.join(m.text for m in matches)
    if len(raw) < min_chars:
        return Context(matches=list(matches), text=NO_RELEVANT_CONTENT, sufficient=False)
    return Context(matches=list(matches), text=format_context(matches), sufficient=True)


class RetrievalAssembler:
    """Turn one or more query texts into a deduplicated :class:`Context`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    embedder:
        Anything with ``embed(text) -> list[float]``, normally
        :class:`~lawsphere.ingestion.embedder.EmbeddingService`.
    default_k:
        Matches requested per query text when not given.
    min_context_chars:
        Contexts shorter than this resolve to the sentinel.
    timeout:
        Bound in seconds on each store query.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: Embedder,
        *,
        default_k: int = settings.retrieval_top_k,
        min_context_chars: int = settings.min_context_chars,
        timeout: float = settings.request_timeout,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.default_k = default_k
        self.min_context_chars = min_context_chars
        self.timeout = timeout

    # -- public API -----------------------------------------------------------

    async def retrieve(self, query_texts: Sequence[str], top_k_per_query: int | None = None) -> Context:
        """Search every text concurrently and assemble the merged context.

        Raises
        ------
        EmbeddingError
            If any query text cannot be embedded.
        RetrievalError
            If any store query fails or times out.
        """
        if not query_texts:
            raise ValueError("retrieve() needs at least one query text")
        k = top_k_per_query or self.default_k

        if len(query_texts) == 1:
            results = [await self.search(query_texts[0], k)]
        else:
            results = await asyncio.gather(*(self.search(text, k) for text in query_texts))

        merged = merge_matches(*results)
        logger.info(
            "Retrieved %s matches for %d queries, %d after dedup",
            "+".join(str(len(r)) for r in results),
            len(query_texts),
            len(merged),
        )
        return build_context(merged, min_chars=self.min_context_chars)

    async def search(self, text: str, k: int) -> list[Match]:
        """Embed *text* and run one similarity query off the event loop."""
        vector = await asyncio.to_thread(self._embedder.embed, text)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._store.query, vector, top_k=k, include_metadata=True),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise RetrievalError(
                f"Vector query timed out after {self.timeout}s", {"query_chars": len(text)}
            ) from exc
