"""Prompt templates for answering and comparing legal provisions.

Every LLM call uses a dedicated prompt from this module.  The retrieved
context is always passed in already formatted with ``[Source: …]`` tags.
"""

from __future__ import annotations

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

# ── Language ──────────────────────────────────────────────────────────

HINDI_INSTRUCTION = "CRITICAL RULE: Answer in HINDI (Devanagari script). Use simple legal Hindi."
ENGLISH_INSTRUCTION = "Answer in English."


def language_instruction(language: str | None) -> str:
    """Return the answer-language rule for *language* (English unless Hindi)."""
    if (language or "").strip().lower() == "hindi":
        return HINDI_INSTRUCTION
    return ENGLISH_INSTRUCTION


# ── 1. Question answering ─────────────────────────────────────────────

ANSWER_SYSTEM = """\
You are LawSphere, an expert legal assistant for the Bharatiya Nyaya Sanhita (BNS).
{language_rule}

STRICT RULES:
1. Answer ONLY using the provided context.
2. Cite relevant Section numbers.
3. Format in Markdown.
"""


def build_answer_prompt(question: str, context: str, language: str | None = None) -> list[BaseMessage]:
    """Build the messages for a grounded answer to *question*."""
    return [
        SystemMessage(content=ANSWER_SYSTEM.format(language_rule=language_instruction(language))),
        HumanMessage(content=f"Context:\n{context}\n\nQuestion:\n{question}"),
    ]


# ── 2. Comparison ─────────────────────────────────────────────────────

COMPARE_SYSTEM = """\
You are a strict legal expert for the BNS (India). Use ONLY the context.
Output a Markdown table comparing the two provisions.
"""


def build_compare_prompt(first: str, second: str, context: str) -> list[BaseMessage]:
    """Build the messages for comparing *first* and *second*."""
    return [
        SystemMessage(content=COMPARE_SYSTEM),
        HumanMessage(content=f'CONTEXT: {context}\nTASK: Compare "{first}" and "{second}".'),
    ]
