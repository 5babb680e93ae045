"""Person scoring: join candidate entities back to evidence, split subject vs criteria, sum top-K similarities."""

import logging
from collections import defaultdict
from dataclasses import dataclass

from founder_discovery.core import Settings
from .types import CandidateEntity, EntityMatch, EvidenceRecord, PersonScore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreThresholds:
    """All comparisons are strict (>)."""
    evidence_confidence_min: float = 0.35
    subject_similarity_min: float = 0.3
    criteria_similarity_min: float = 0.4
    matches_per_person: int = 5

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoreThresholds":
        return cls(
            evidence_confidence_min=settings.discover_evidence_confidence_min,
            subject_similarity_min=settings.discover_subject_similarity_min,
            criteria_similarity_min=settings.discover_criteria_similarity_min,
            matches_per_person=settings.discover_matches_per_person,
        )


def _top_matches(matches: list[EntityMatch], k: int) -> list[EntityMatch]:
    return sorted(matches, key=lambda m: -m.similarity)[:k]


def _group_evidence_by_person(
    evidence: list[EvidenceRecord],
    candidate_ids: set[str],
    min_confidence: float,
) -> dict[str, list[EvidenceRecord]]:
    by_person: dict[str, list[EvidenceRecord]] = defaultdict(list)
    for record in evidence:
        if not record.canonical_entity_id or record.canonical_entity_id not in candidate_ids:
            continue
        if record.confidence is None or record.confidence <= min_confidence:
            continue
        by_person[record.person_id].append(record)
    return by_person


def score_people(
    evidence: list[EvidenceRecord],
    subject_candidates: list[CandidateEntity],
    criteria_candidates: list[CandidateEntity],
    thresholds: ScoreThresholds = ScoreThresholds(),
) -> dict[str, PersonScore]:
    """Score each person with at least one subject or criteria match. Keys keep first-seen evidence order."""
    subject_similarity = {c.id: c.similarity for c in subject_candidates}
    criteria_similarity = {c.id: c.similarity for c in criteria_candidates}
    candidate_ids = set(subject_similarity) | set(criteria_similarity)

    by_person = _group_evidence_by_person(evidence, candidate_ids, thresholds.evidence_confidence_min)
    k = thresholds.matches_per_person

    scores: dict[str, PersonScore] = {}
    for person_id, records in by_person.items():
        subject_matches: list[EntityMatch] = []
        criteria_matches: list[EntityMatch] = []
        for record in records:
            canonical_id = record.canonical_entity_id
            subject_sim = subject_similarity.get(canonical_id)
            if subject_sim is not None and subject_sim > thresholds.subject_similarity_min:
                subject_matches.append(
                    EntityMatch(
                        entity_value=record.entity_value,
                        entity_type=record.entity_type,
                        similarity=subject_sim,
                        datapoint_id=record.datapoint_id,
                    )
                )
            criteria_sim = criteria_similarity.get(canonical_id)
            if criteria_sim is not None and criteria_sim > thresholds.criteria_similarity_min:
                criteria_matches.append(
                    EntityMatch(
                        entity_value=record.canonical_name or record.entity_value,
                        entity_type=record.entity_type,
                        similarity=criteria_sim,
                        datapoint_id=record.datapoint_id,
                    )
                )

        if not subject_matches and not criteria_matches:
            continue

        top_subject = _top_matches(subject_matches, k)
        top_criteria = _top_matches(criteria_matches, k)
        subject_score = sum(m.similarity for m in top_subject)
        criteria_score = sum(m.similarity for m in top_criteria)
        best_subject = top_subject[0] if top_subject else None

        scores[person_id] = PersonScore(
            person_id=person_id,
            subject_score=subject_score,
            criteria_score=criteria_score,
            combined_score=subject_score + criteria_score,
            subject_matches=top_subject,
            criteria_matches=top_criteria,
            matched_occupation=best_subject.entity_value if best_subject else "unknown",
            score_scale=float(k),
        )

    logger.debug(
        "Scored people: with_matches=%s total_people=%s with_subject=%s with_criteria=%s",
        len(scores),
        len(by_person),
        sum(1 for s in scores.values() if s.subject_matches),
        sum(1 for s in scores.values() if s.criteria_matches),
    )
    return scores


def rank_people(scores: dict[str, PersonScore], limit: int) -> list[PersonScore]:
    """Top `limit` by combined_score descending; ties keep input order."""
    ranked = sorted(scores.values(), key=lambda s: -s.combined_score)
    return ranked[: max(0, limit)]
