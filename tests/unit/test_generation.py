"""Unit tests for prompts and the answer service."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from conftest import FakeEmbedder, InMemoryVectorStore
from langchain_core.messages import HumanMessage, SystemMessage

from lawsphere.generation.prompts import (
    ENGLISH_INSTRUCTION,
    HINDI_INSTRUCTION,
    build_answer_prompt,
    build_compare_prompt,
    language_instruction,
)
from lawsphere.generation.service import AnswerService
from lawsphere.retrieval.models import NO_RELEVANT_CONTENT, Record
from lawsphere.retrieval.retriever import RetrievalAssembler

MURDER = "Section 103. Whoever commits murder shall be punished with death or imprisonment for life."
THEFT = "Section 303. Whoever commits theft shall be punished with imprisonment up to three years."


class FakeLLM:
    """Async chat model stub recording the messages it receives."""

    def __init__(self, reply: str = "**Answer** per Section 103.") -> None:
        self.reply = reply
        self.calls: list[list] = []

    async def ainvoke(self, messages: list) -> SimpleNamespace:
        self.calls.append(messages)
        return SimpleNamespace(content=self.reply)


@pytest.fixture()
def seeded_assembler(fake_embedder: FakeEmbedder) -> RetrievalAssembler:
    store = InMemoryVectorStore()
    store.upsert(
        [
            Record(
                id=f"bns.pdf-{i}",
                vector=fake_embedder.embed(text),
                metadata={"text": text, "source": "bns.pdf", "section": text.split(".")[0]},
            )
            for i, text in enumerate([MURDER, THEFT])
        ]
    )
    return RetrievalAssembler(store, fake_embedder)


class TestPrompts:
    @pytest.mark.parametrize(("language", "rule"), [("hindi", HINDI_INSTRUCTION), ("Hindi ", HINDI_INSTRUCTION), ("english", ENGLISH_INSTRUCTION), (None, ENGLISH_INSTRUCTION)])
    def test_language_instruction(self, language: str | None, rule: str) -> None:
        assert language_instruction(language) == rule

    def test_answer_prompt(self) -> None:
        messages = build_answer_prompt("What is murder?", "[Source: bns.pdf] text", "hindi")
        assert isinstance(messages[0], SystemMessage)
        assert HINDI_INSTRUCTION in messages[0].content
        assert isinstance(messages[1], HumanMessage)
        assert "[Source: bns.pdf] text" in messages[1].content
        assert "What is murder?" in messages[1].content

    def test_compare_prompt(self) -> None:
        messages = build_compare_prompt("Section 103", "Section 303", "ctx")
        assert "Markdown table" in messages[0].content
        assert 'Compare "Section 103" and "Section 303"' in messages[1].content


class TestAnswerService:
    def test_ask_invokes_llm_with_context(self, seeded_assembler: RetrievalAssembler) -> None:
        llm = FakeLLM()
        answer = asyncio.run(AnswerService(seeded_assembler, llm, top_k=1).ask(MURDER, "english"))

        assert answer.formatted_answer == "**Answer** per Section 103."
        assert answer.reasoning == "Vector Search"
        assert f"[Source: bns.pdf] {MURDER}" in llm.calls[0][1].content
        source = answer.retrieved_sources[0]
        assert source.source_number == 1
        assert source.section == "Section 103"
        assert source.snippet.endswith("...")

    def test_insufficient_context_skips_llm(self, fake_embedder: FakeEmbedder) -> None:
        llm = FakeLLM()
        service = AnswerService(RetrievalAssembler(InMemoryVectorStore(), fake_embedder), llm)
        answer = asyncio.run(service.ask("Anything?"))
        assert answer.formatted_answer == NO_RELEVANT_CONTENT
        assert llm.calls == []

    def test_compare_merges_both_sides(self, seeded_assembler: RetrievalAssembler) -> None:
        llm = FakeLLM(reply="| | 103 | 303 |")
        answer = asyncio.run(AnswerService(seeded_assembler, llm, compare_top_k=2).compare(MURDER, THEFT))

        prompt = llm.calls[0][1].content
        assert prompt.count(MURDER) == 2  # once in the context, once in the task line
        assert answer.semantic_tags == ["Compare"]
        assert len(answer.retrieved_sources) == 2

    def test_empty_reply_falls_back(self, seeded_assembler: RetrievalAssembler) -> None:
        answer = asyncio.run(AnswerService(seeded_assembler, FakeLLM(reply="")).ask(MURDER))
        assert answer.formatted_answer == "No answer generated."
