"""LLM prompt templates. Placeholders use {{DOUBLE_BRACE}} and are replaced before sending."""

from .discover_query import (
    DISCOVER_QUERY_SYSTEM_PROMPT,
    PROMPT_DISCOVER_QUERY,
    get_discover_query_prompt,
)

__all__ = [
    "DISCOVER_QUERY_SYSTEM_PROMPT",
    "PROMPT_DISCOVER_QUERY",
    "get_discover_query_prompt",
]
