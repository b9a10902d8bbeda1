"""LLM initialisation — single place to swap providers.

The answer model is reached through any OpenAI-compatible
``/v1/chat/completions`` endpoint.  By default that is Groq; point
``LLM_BASE_URL`` elsewhere (OpenAI, vLLM, …) and ``ChatOpenAI`` works
unchanged.
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI

from lawsphere.config import settings

logger = logging.getLogger(__name__)


def get_llm(temperature: float | None = None) -> ChatOpenAI:
    """Return the configured chat model."""
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": settings.llm_temperature if temperature is None else temperature,
        "timeout": settings.request_timeout,
        # Self-hosted endpoints don't need a key; LangChain requires a non-empty value.
        "api_key": settings.llm_api_key or "EMPTY",
    }
    if settings.llm_base_url:
        logger.info("Using LLM endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url

    return ChatOpenAI(**kwargs)
