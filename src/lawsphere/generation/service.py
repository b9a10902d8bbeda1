"""Answer service — retrieval followed by grounded generation."""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.messages import BaseMessage
from pydantic import BaseModel, Field

from lawsphere.config import settings
from lawsphere.generation.prompts import build_answer_prompt, build_compare_prompt
from lawsphere.retrieval.models import Context, Match
from lawsphere.retrieval.retriever import RetrievalAssembler

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 200


class SourceSnippet(BaseModel):
    """Short attribution for one retrieved passage."""

    source_number: int
    source: str
    section: str
    snippet: str

    @classmethod
    def from_match(cls, number: int, match: Match) -> SourceSnippet:
        return cls(
            source_number=number,
            source=match.source,
            section=match.section,
            snippet=match.text[:SNIPPET_CHARS] + "...",
        )


class Answer(BaseModel):
    """Response returned to the HTTP layer."""

    formatted_answer: str
    reasoning: str = ""
    semantic_tags: list[str] = Field(default_factory=list)
    retrieved_sources: list[SourceSnippet] = Field(default_factory=list)


class AnswerService:
    """Answer questions and compare provisions over the indexed corpus.

    Generation is skipped entirely when retrieval comes back with too
    little context; the answer is then the "no relevant content"
    sentinel.

    Parameters
    ----------
    assembler:
        Retrieval assembler bound to a store and embedder.
    llm:
        Chat model with ``ainvoke(messages)``.  Built with
        :func:`~lawsphere.generation.llm.get_llm` on first use when omitted.
    """

    def __init__(
        self,
        assembler: RetrievalAssembler,
        llm: Any = None,
        *,
        top_k: int = settings.retrieval_top_k,
        compare_top_k: int = settings.compare_top_k,
    ) -> None:
        self._assembler = assembler
        self._llm = llm
        self.top_k = top_k
        self.compare_top_k = compare_top_k

    def _get_llm(self) -> Any:
        if self._llm is None:
            from lawsphere.generation.llm import get_llm

            self._llm = get_llm()
        return self._llm

    async def _generate(self, messages: list[BaseMessage], fallback: str) -> str:
        reply = await self._get_llm().ainvoke(messages)
        return getattr(reply, "content", None) or fallback

    async def ask(self, question: str, language: str | None = None) -> Answer:
        """Answer *question* from the top matches for it."""
        context = await self._assembler.retrieve([question], self.top_k)
        sources = _sources(context)
        if not context.sufficient:
            return Answer(formatted_answer=context.text, reasoning="Vector Search", retrieved_sources=sources)

        text = await self._generate(build_answer_prompt(question, context.text, language), "No answer generated.")
        return Answer(
            formatted_answer=text,
            reasoning="Vector Search",
            semantic_tags=["BNS", "Legal"],
            retrieved_sources=sources,
        )

    async def compare(self, first: str, second: str) -> Answer:
        """Compare two provisions using a merged context for both."""
        context = await self._assembler.retrieve([first, second], self.compare_top_k)
        if not context.sufficient:
            logger.info("No context for comparison of %r and %r", first, second)
            return Answer(formatted_answer=context.text, reasoning="RAG Comparison")

        text = await self._generate(build_compare_prompt(first, second, context.text), "Comparison failed.")
        return Answer(
            formatted_answer=text,
            reasoning="RAG Comparison",
            semantic_tags=["Compare"],
            retrieved_sources=_sources(context),
        )


def _sources(context: Context) -> list[SourceSnippet]:
    return [SourceSnippet.from_match(i, m) for i, m in enumerate(context.matches, 1)]
