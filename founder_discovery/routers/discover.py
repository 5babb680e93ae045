import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core import Settings, get_settings, limiter
from founder_discovery.dependencies import (
    get_app_settings,
    get_chat,
    get_db,
    get_embedder,
    get_session_factory,
)
from founder_discovery.providers import ChatProvider, EmbeddingProvider
from founder_discovery.schemas import DiscoverRequest, DiscoverResponse, ErrorResponse
from founder_discovery.services.discover import InvalidDiscoverRequest, run_discover

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discover"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/discover",
    response_model=DiscoverResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(lambda: get_settings().discover_rate_limit)
async def discover(
    request: Request,
    body: DiscoverRequest,
    case_session_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    session_factory: Callable[[], Any] = Depends(get_session_factory),
    chat: ChatProvider = Depends(get_chat),
    embedder: EmbeddingProvider = Depends(get_embedder),
    settings: Settings = Depends(get_app_settings),
):
    """Search founders in a case session: parse → match by role → rank by criteria → top matches with evidence."""
    try:
        data = await run_discover(
            db=db,
            session_factory=session_factory,
            chat=chat,
            embedder=embedder,
            settings=settings,
            body=body,
            case_session_id=case_session_id,
        )
    except InvalidDiscoverRequest as e:
        return _error(400, e.message)
    except Exception as e:
        logger.exception("Discover search failed: %s", e)
        return _error(500, str(e) or "Failed to search founders")
    return DiscoverResponse(data=data)
