"""Retrieval-augmented chat test endpoints (no auth)."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from nooklet.dependencies import RagServiceDep
from nooklet.logging import get_logger
from nooklet.models import EmbedTextRequest, EmbedTextResult, RagChatRequest, RagChatResult

logger = get_logger('routers.rag')

router = APIRouter()


def _failure(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@router.post("/embed-text", response_model=EmbedTextResult)
async def embed_text(body: EmbedTextRequest, service: RagServiceDep):
    try:
        return await service.embed_text(body)
    except Exception as exc:
        logger.error(f"embed-text failed: {exc}")
        return _failure(exc)


@router.post("/chat", response_model=RagChatResult)
async def chat(body: RagChatRequest, service: RagServiceDep):
    try:
        return await service.chat(body)
    except Exception as exc:
        logger.error(f"chat failed: {exc}")
        return _failure(exc)
