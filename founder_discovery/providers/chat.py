import json
import logging
from abc import ABC, abstractmethod

import httpx

from founder_discovery.core import get_settings
from founder_discovery.prompts.discover_query import (
    DISCOVER_QUERY_SYSTEM_PROMPT,
    get_discover_query_prompt,
)
from founder_discovery.utils import strip_json_from_response

logger = logging.getLogger(__name__)


class ChatServiceError(Exception):
    """Raised when the chat/LLM API is unavailable or returns invalid or unexpected output."""


class ChatRateLimitError(ChatServiceError):
    """Raised when the chat/LLM API rate limits the request."""


class ChatProvider(ABC):
    @abstractmethod
    async def chat_json(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> dict:
        """Send messages and parse the reply as a JSON object."""
        pass

    async def parse_discover_query(self, query: str) -> dict:
        """Structured extraction of subject / variations / criteria for a founder search query."""
        messages = [
            {"role": "system", "content": DISCOVER_QUERY_SYSTEM_PROMPT},
            {"role": "user", "content": get_discover_query_prompt(query)},
        ]
        return await self.chat_json(messages, max_tokens=800, temperature=0.3)


class OpenAICompatibleChatProvider(ChatProvider):
    """OpenAI-compatible endpoint (vLLM, etc.)."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    async def _chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 1024,
        temperature: float | None = None,
        response_format: dict | None = None,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature if temperature is not None else 0.2,
        }
        if response_format is not None:
            payload["response_format"] = response_format
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                r.raise_for_status()
                data = r.json()
                choices = data.get("choices") or []
                if not choices:
                    raise ChatServiceError(
                        "Chat API returned no choices (e.g. content filter)."
                    )
                msg = choices[0].get("message") or {}
                content = msg.get("content")
                if content is None or not isinstance(content, str):
                    raise ChatServiceError(
                        "Chat API returned missing or non-string content."
                    )
                stripped = content.strip()
                if not stripped:
                    raise ChatServiceError(
                        "Chat API returned empty content (LLM may have failed or been rate-limited)."
                    )
                return stripped
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise ChatRateLimitError(
                    "Chat API rate limited the request. Please retry later."
                ) from e
            body = getattr(e.response, "text", None) or ""
            if body:
                logger.warning(
                    "Chat API error %s: %s",
                    e.response.status_code,
                    body[:500],
                )
            raise ChatServiceError(
                f"Chat API returned {e.response.status_code}. Please try again later."
            ) from e
        except httpx.RequestError as e:
            raise ChatServiceError(
                "Chat service unavailable (timeout or connection error). Please try again later."
            ) from e
        except (KeyError, TypeError, IndexError, ValueError, AttributeError) as e:
            raise ChatServiceError("Chat API returned unexpected response format.") from e

    async def chat_json(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> dict:
        text = await self._chat(
            messages,
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"},
        )
        raw = strip_json_from_response(text)
        try:
            data = json.loads(raw)
        except (ValueError, json.JSONDecodeError) as e:
            raise ChatServiceError("Chat returned invalid JSON.") from e
        if not isinstance(data, dict):
            raise ChatServiceError("Chat returned JSON that is not an object.")
        return data


class OpenAIChatProvider(OpenAICompatibleChatProvider):
    """Official OpenAI API."""

    def __init__(self):
        s = get_settings()
        super().__init__(
            base_url="https://api.openai.com/v1",
            api_key=s.openai_api_key,
            model=s.chat_model or _OPENAI_DEFAULT_MODEL,
        )


# Default model for OpenAI official API when CHAT_MODEL is not set
_OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
# Default model for OpenAI-compatible (vLLM, etc.) when CHAT_MODEL is not set
_OPENAI_COMPATIBLE_DEFAULT_MODEL = "Qwen/Qwen2.5-7B-Instruct"


def get_chat_provider() -> ChatProvider:
    s = get_settings()
    if s.openai_api_key and not s.chat_api_base_url:
        return OpenAIChatProvider()
    if s.chat_api_base_url:
        return OpenAICompatibleChatProvider(
            base_url=s.chat_api_base_url,
            api_key=s.chat_api_key,
            model=s.chat_model or _OPENAI_COMPATIBLE_DEFAULT_MODEL,
        )
    raise RuntimeError(
        "Chat LLM not configured. Set OPENAI_API_KEY or CHAT_API_BASE_URL (and CHAT_MODEL)."
    )
