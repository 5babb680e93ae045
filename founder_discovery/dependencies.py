from collections.abc import Callable
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core import Settings, get_settings
from founder_discovery.db.session import async_session
from founder_discovery.providers import (
    ChatProvider,
    EmbeddingProvider,
    get_chat_provider,
    get_embedding_provider,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> Callable[[], Any]:
    """Factory for extra sessions used by concurrent per-founder lookups."""
    return async_session


def get_app_settings() -> Settings:
    return get_settings()


def get_chat() -> ChatProvider:
    return get_chat_provider()


def get_embedder() -> EmbeddingProvider:
    return get_embedding_provider()
