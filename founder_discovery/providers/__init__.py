from .chat import ChatProvider, ChatServiceError, ChatRateLimitError, get_chat_provider
from .embedding import EmbeddingProvider, EmbeddingServiceError, get_embedding_provider

__all__ = [
    "ChatProvider",
    "ChatServiceError",
    "ChatRateLimitError",
    "get_chat_provider",
    "EmbeddingProvider",
    "EmbeddingServiceError",
    "get_embedding_provider",
]
