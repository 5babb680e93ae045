"""Pydantic request/response schemas."""

from founder_discovery.schemas.discover import (
    ParsedQuery,
    DiscoverRequest,
    MatchingEntity,
    DatapointSummary,
    RankedFounder,
    DiscoverData,
    DiscoverResponse,
    ErrorResponse,
)

__all__ = [
    "ParsedQuery",
    "DiscoverRequest",
    "MatchingEntity",
    "DatapointSummary",
    "RankedFounder",
    "DiscoverData",
    "DiscoverResponse",
    "ErrorResponse",
]
