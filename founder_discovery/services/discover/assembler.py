"""Result assembly: enrich scored people with display metadata.

Each founder is enriched by an independent task with its own DB session. A task's
outcome is captured as Ok/Err so one failing lookup turns into a placeholder row
instead of failing the batch.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core import Deadline
from founder_discovery.core.constants import MATCHING_ENTITIES_LIMIT
from founder_discovery.db.models import Person, PersonDatapoint
from founder_discovery.domain import PROFILE_PICTURE_PRIORITY, matches_platform, parse_social_profile
from founder_discovery.schemas import DatapointSummary, MatchingEntity, RankedFounder
from .store import load_datapoints, load_linkedin_url, load_person, load_profile_datapoints
from .types import EntityMatch, PersonScore

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_NAME = "Unknown"
DATAPOINTS_PER_CATEGORY = 5
DEFAULT_ENRICHMENT_CONCURRENCY = 8


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception


EnrichmentResult = Union[Ok[RankedFounder], Err]


# -----------------------------------------------------------------------------
# Pure helpers
# -----------------------------------------------------------------------------
def format_person_name(person: Person | None) -> str:
    if person is None:
        return UNKNOWN_NAME
    parts = [(p or "").strip() for p in (person.first_name, person.middle_name, person.last_name)]
    name = " ".join(p for p in parts if p)
    return name or UNKNOWN_NAME


def pick_profile_picture(profile_rows: list[tuple[str | None, Any]]) -> str | None:
    """Walk platforms in priority order; the first datapoint of a platform decides, the first picture found wins."""
    for platform in PROFILE_PICTURE_PRIORITY:
        data = next(
            (data for dp_type, data in profile_rows if matches_platform(dp_type, data, platform)),
            None,
        )
        profile = parse_social_profile(platform, data)
        url = profile.picture_url() if profile else None
        if url:
            return url
    return None


def unique_datapoint_ids(matches: list[EntityMatch], limit: int = DATAPOINTS_PER_CATEGORY) -> list[str]:
    """First-seen order, no duplicates, at most `limit`."""
    ids: list[str] = []
    seen: set[str] = set()
    for match in matches:
        if len(ids) >= limit:
            break
        if not match.datapoint_id or match.datapoint_id in seen:
            continue
        seen.add(match.datapoint_id)
        ids.append(match.datapoint_id)
    return ids


def _datapoint_summaries(ids: list[str], by_id: dict[str, PersonDatapoint]) -> list[DatapointSummary]:
    out: list[DatapointSummary] = []
    for dp_id in ids:
        dp = by_id.get(dp_id)
        if dp is None:
            continue
        out.append(DatapointSummary(id=str(dp.id), url=dp.url, title=dp.title, snippet=dp.snippet))
    return out


def build_matching_entities(score: PersonScore, limit: int = MATCHING_ENTITIES_LIMIT) -> list[MatchingEntity]:
    merged = sorted(
        [*score.subject_matches, *score.criteria_matches],
        key=lambda m: -m.similarity,
    )
    return [
        MatchingEntity(entity_value=m.entity_value, entity_type=m.entity_type, similarity=m.similarity)
        for m in merged[:limit]
    ]


def placeholder_founder(score: PersonScore) -> RankedFounder:
    """Row for a founder whose enrichment failed: scores and matches only."""
    return RankedFounder(
        person_id=score.person_id,
        name=UNKNOWN_NAME,
        matched_occupation=score.matched_occupation,
        occupation_score=score.normalized_subject_score,
        criteria_score=score.normalized_criteria_score,
        combined_score=score.combined_score,
        matching_entities=build_matching_entities(score),
    )


# -----------------------------------------------------------------------------
# Enrichment
# -----------------------------------------------------------------------------
async def enrich_founder(
    db: AsyncSession,
    score: PersonScore,
    linkedin_source_name: str,
    deadline: Deadline,
) -> RankedFounder:
    pid = score.person_id
    person = await deadline.bound("person lookup", load_person(db, pid))
    profile_rows = await deadline.bound("profile datapoints lookup", load_profile_datapoints(db, pid))
    linkedin_url = await deadline.bound(
        "linkedin url lookup", load_linkedin_url(db, pid, linkedin_source_name)
    )

    subject_ids = unique_datapoint_ids(score.subject_matches)
    criteria_ids = unique_datapoint_ids(score.criteria_matches)
    datapoints_by_id = await deadline.bound(
        "datapoints lookup",
        load_datapoints(db, list(dict.fromkeys(subject_ids + criteria_ids))),
    )

    if person is None:
        logger.warning("Scored person %s has no person row; returning placeholder name", pid)

    return RankedFounder(
        person_id=pid,
        name=format_person_name(person),
        linkedin_url=linkedin_url,
        profile_picture_url=pick_profile_picture(profile_rows),
        matched_occupation=score.matched_occupation,
        occupation_score=score.normalized_subject_score,
        criteria_score=score.normalized_criteria_score,
        combined_score=score.combined_score,
        matching_entities=build_matching_entities(score),
        subject_datapoints=_datapoint_summaries(subject_ids, datapoints_by_id),
        criteria_datapoints=_datapoint_summaries(criteria_ids, datapoints_by_id),
    )


async def _enrich_isolated(
    session_factory: Callable[[], Any],
    score: PersonScore,
    linkedin_source_name: str,
    deadline: Deadline,
    semaphore: asyncio.Semaphore,
) -> EnrichmentResult:
    try:
        async with semaphore:
            async with session_factory() as db:
                return Ok(await enrich_founder(db, score, linkedin_source_name, deadline))
    except Exception as exc:
        return Err(exc)


async def assemble_founders(
    session_factory: Callable[[], Any],
    scores: list[PersonScore],
    linkedin_source_name: str,
    deadline: Deadline,
    concurrency: int = DEFAULT_ENRICHMENT_CONCURRENCY,
) -> list[RankedFounder]:
    """One RankedFounder per score, same order. Failed enrichments become placeholders."""
    if not scores:
        return []
    semaphore = asyncio.Semaphore(max(1, concurrency))
    results = await asyncio.gather(
        *(
            _enrich_isolated(session_factory, score, linkedin_source_name, deadline, semaphore)
            for score in scores
        )
    )

    founders: list[RankedFounder] = []
    for score, result in zip(scores, results):
        if isinstance(result, Ok):
            founders.append(result.value)
        else:
            logger.warning(
                "Enrichment failed for person %s, using placeholder: %s",
                score.person_id,
                result.error,
            )
            founders.append(placeholder_founder(score))
    return founders
