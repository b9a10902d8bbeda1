"""FastAPI application exposing question answering and comparison."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from lawsphere.errors import EmbeddingError, EndpointResolutionError, RetrievalError
from lawsphere.generation.service import Answer, AnswerService

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LawSphere API",
    version="0.1.0",
    description="Retrieval-augmented answers over indexed legal texts.",
)


# ── Request schemas ───────────────────────────────────────────────────
class AskRequest(BaseModel):
    """Question from the user."""

    query: str = Field(min_length=1)
    language: str = "english"


class CompareRequest(BaseModel):
    """Two provisions to compare."""

    section1: str = Field(min_length=1)
    section2: str = Field(min_length=1)


# ── Dependencies ──────────────────────────────────────────────────────
@lru_cache(maxsize=1)
def get_answer_service() -> AnswerService:
    """Build the process-wide answer service from the global settings."""
    from lawsphere.ingestion.embedder import default_embedding_service
    from lawsphere.retrieval.factory import build_vector_store
    from lawsphere.retrieval.retriever import RetrievalAssembler

    assembler = RetrievalAssembler(build_vector_store(), default_embedding_service())
    return AnswerService(assembler)


async def _run(coro) -> Answer:  # noqa: ANN001
    try:
        return await coro
    except (RetrievalError, EndpointResolutionError) as exc:
        logger.error("Retrieval failed: %s", exc)
        raise HTTPException(status_code=503, detail=f"Retrieval service unavailable: {exc.message}") from exc
    except EmbeddingError as exc:
        logger.error("Query embedding failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Could not embed query: {exc.message}") from exc


# ── Routes ────────────────────────────────────────────────────────────
router = APIRouter(prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.post("/ask", response_model=Answer)
async def ask(request: AskRequest, service: AnswerService = Depends(get_answer_service)) -> Answer:
    """Answer a question from the indexed corpus."""
    logger.info("Query: %s | Lang: %s", request.query, request.language)
    return await _run(service.ask(request.query, request.language))


@router.post("/compare", response_model=Answer)
async def compare(request: CompareRequest, service: AnswerService = Depends(get_answer_service)) -> Answer:
    """Compare two provisions side by side."""
    logger.info("Comparing: %s vs %s", request.section1, request.section2)
    return await _run(service.compare(request.section1, request.section2))


app.include_router(router)
