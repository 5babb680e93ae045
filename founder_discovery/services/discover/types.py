"""Transient pipeline types (built per request, discarded after the response)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CandidateEntity:
    """One canonical entity returned by nearest-neighbor search."""
    id: str
    name: str
    type: str
    similarity: float  # 1 - cosine_distance


@dataclass(frozen=True)
class EvidenceRecord:
    """One datapoint_entity_index row for a person."""
    person_id: str
    entity_type: str
    entity_value: str
    canonical_name: str | None
    canonical_entity_id: str | None
    confidence: float
    datapoint_id: str | None = None


@dataclass(frozen=True)
class EntityMatch:
    entity_value: str
    entity_type: str
    similarity: float
    datapoint_id: str | None = None


@dataclass
class PersonScore:
    person_id: str
    subject_score: float
    criteria_score: float
    combined_score: float
    subject_matches: list[EntityMatch] = field(default_factory=list)
    criteria_matches: list[EntityMatch] = field(default_factory=list)
    matched_occupation: str = "unknown"
    # Max possible partial score (matches kept per category x similarity <= 1.0)
    score_scale: float = 5.0

    @property
    def normalized_subject_score(self) -> float:
        return self.subject_score / self.score_scale if self.score_scale else 0.0

    @property
    def normalized_criteria_score(self) -> float:
        return self.criteria_score / self.score_scale if self.score_scale else 0.0
