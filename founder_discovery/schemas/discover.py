from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from founder_discovery.domain import CriteriaType
from founder_discovery.utils import dedupe_terms


# ---------------------------------------------------------------------------
# Parsed query (LLM extraction output, never persisted)
# ---------------------------------------------------------------------------

class ParsedQuery(BaseModel):
    subject: str
    subject_variations: list[str] = []
    criteria: list[str] = []
    criteria_type: CriteriaType = "mixed"
    reasoning: str = ""

    @field_validator("subject")
    @classmethod
    def _subject_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("subject must be non-empty")
        return v

    @field_validator("subject_variations", "criteria")
    @classmethod
    def _clean_terms(cls, v: list[str]) -> list[str]:
        return dedupe_terms(v)

    @classmethod
    def from_llm_dict(cls, data: dict[str, Any]) -> "ParsedQuery":
        """Validate LLM output; missing lists default to [], anything else malformed raises ValueError."""
        if not isinstance(data, dict):
            raise ValueError("parsed query must be a JSON object")
        variations = data.get("subject_variations")
        criteria = data.get("criteria")
        for key, value in (("subject_variations", variations), ("criteria", criteria)):
            if value is not None and not isinstance(value, list):
                raise ValueError(f"{key} must be a list")
        return cls(
            subject=data.get("subject") or "",
            subject_variations=[v for v in (variations or []) if isinstance(v, str)],
            criteria=[c for c in (criteria or []) if isinstance(c, str)],
            criteria_type=data.get("criteria_type") or "mixed",
            reasoning=str(data.get("reasoning") or ""),
        )

    @property
    def subject_terms(self) -> list[str]:
        """Subject plus its variations, deduplicated."""
        return dedupe_terms([self.subject, *self.subject_variations])


# ---------------------------------------------------------------------------
# POST /discover
# ---------------------------------------------------------------------------

class DiscoverRequest(BaseModel):
    # Optional at the schema level so a missing query returns 400 (not 422)
    query: Optional[str] = None
    organization_id: Optional[str] = None
    num_results: Optional[int] = Field(default=None, ge=1)


class MatchingEntity(BaseModel):
    entity_value: str
    entity_type: str
    similarity: float


class DatapointSummary(BaseModel):
    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    snippet: Optional[str] = None


class RankedFounder(BaseModel):
    person_id: str
    name: str
    linkedin_url: Optional[str] = None
    profile_picture_url: Optional[str] = None
    matched_occupation: str = "unknown"
    occupation_score: float = 0.0  # subject_score / 5, 0-1 for display
    criteria_score: float = 0.0  # criteria_score / 5, 0-1 for display
    combined_score: float = 0.0  # unnormalized subject + criteria, used for ranking
    matching_entities: list[MatchingEntity] = []
    subject_datapoints: list[DatapointSummary] = []
    criteria_datapoints: list[DatapointSummary] = []


class DiscoverData(BaseModel):
    query: str
    parsed_query: ParsedQuery
    founders_found: int
    top_founders: list[RankedFounder]
    message: Optional[str] = None
    elapsed_time_ms: int
    elapsed_time_seconds: int


class DiscoverResponse(BaseModel):
    success: bool = True
    data: DiscoverData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
