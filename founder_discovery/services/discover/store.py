"""Read-only queries over canonical_entities, datapoint_entity_index, person, and person_datapoints."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core.constants import PROFILE_DATA_CATEGORY, REJECTED_DATAPOINT_STATUS
from founder_discovery.db.models import (
    CanonicalEntity,
    DatapointEntityIndex,
    Person,
    PersonDatapoint,
)
from .types import CandidateEntity, EvidenceRecord


async def search_canonical_entities(
    db: AsyncSession,
    query_vector: list[float],
    types: Iterable[str],
    limit: int,
) -> list[CandidateEntity]:
    """Nearest canonical entities of the given types by cosine distance; rows without an embedding are skipped."""
    dist_expr = CanonicalEntity.embedding.cosine_distance(query_vector)
    stmt = (
        select(
            CanonicalEntity.id,
            CanonicalEntity.name,
            CanonicalEntity.type,
            (1 - dist_expr).label("similarity"),
        )
        .where(CanonicalEntity.embedding.isnot(None))
        .where(CanonicalEntity.type.in_(sorted(types)))
        .order_by(dist_expr)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [
        CandidateEntity(
            id=str(row.id),
            name=row.name,
            type=row.type,
            similarity=float(row.similarity) if row.similarity is not None else 0.0,
        )
        for row in result.all()
    ]


async def load_person_evidence(
    db: AsyncSession,
    canonical_ids: list[str],
    case_session_id: str,
    min_confidence: float,
) -> list[EvidenceRecord]:
    """Evidence rows linking people in this case session to any of the canonical ids."""
    if not canonical_ids:
        return []
    stmt = (
        select(
            DatapointEntityIndex.person_id,
            DatapointEntityIndex.entity_type,
            DatapointEntityIndex.entity_value,
            DatapointEntityIndex.canonical_name,
            DatapointEntityIndex.canonical_entity_id,
            DatapointEntityIndex.confidence,
            DatapointEntityIndex.datapoint_id,
        )
        .join(Person, Person.id == DatapointEntityIndex.person_id)
        .where(DatapointEntityIndex.canonical_entity_id.in_(canonical_ids))
        .where(DatapointEntityIndex.confidence > min_confidence)
        .where(Person.case_session_id == case_session_id)
    )
    result = await db.execute(stmt)
    return [
        EvidenceRecord(
            person_id=str(row.person_id),
            entity_type=row.entity_type,
            entity_value=row.entity_value,
            canonical_name=row.canonical_name,
            canonical_entity_id=str(row.canonical_entity_id) if row.canonical_entity_id else None,
            confidence=float(row.confidence or 0.0),
            datapoint_id=str(row.datapoint_id) if row.datapoint_id else None,
        )
        for row in result.all()
    ]


async def load_person(db: AsyncSession, person_id: str) -> Person | None:
    result = await db.execute(select(Person).where(Person.id == person_id))
    return result.scalar_one_or_none()


async def load_profile_datapoints(db: AsyncSession, person_id: str) -> list[tuple[str | None, dict | None]]:
    """(type, structured_data) of non-rejected profile datapoints, most confident first."""
    result = await db.execute(
        select(PersonDatapoint.type, PersonDatapoint.structured_data)
        .where(PersonDatapoint.person_id == person_id)
        .where(PersonDatapoint.data_category == PROFILE_DATA_CATEGORY)
        # SQL inequality: rows with a NULL status are excluded as well
        .where(PersonDatapoint.status != REJECTED_DATAPOINT_STATUS)
        .order_by(PersonDatapoint.confidence.desc().nulls_last())
    )
    return [(row.type, row.structured_data) for row in result.all()]


async def load_linkedin_url(db: AsyncSession, person_id: str, source_name: str) -> str | None:
    result = await db.execute(
        select(DatapointEntityIndex.source_url)
        .where(DatapointEntityIndex.person_id == person_id)
        .where(DatapointEntityIndex.source_name == source_name)
        .where(DatapointEntityIndex.source_url.isnot(None))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def load_datapoints(db: AsyncSession, datapoint_ids: list[str]) -> dict[str, PersonDatapoint]:
    if not datapoint_ids:
        return {}
    result = await db.execute(
        select(PersonDatapoint).where(PersonDatapoint.id.in_(datapoint_ids))
    )
    return {str(dp.id): dp for dp in result.scalars().all()}
