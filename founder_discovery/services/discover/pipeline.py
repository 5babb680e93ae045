"""Founder discovery pipeline.

Pipeline: parse query (LLM, deterministic fallback) -> embed subject terms and criteria terms ->
nearest canonical entities per term (subject: occupation; criteria: location/company/school/interest)
-> join evidence for this case session -> per-person subject/criteria scoring -> rank top 2x
-> enrich (isolated per founder) -> final sort and truncate.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core import Deadline, Settings
from founder_discovery.domain import CRITERIA_ENTITY_TYPES, SUBJECT_ENTITY_TYPES
from founder_discovery.providers import ChatProvider, EmbeddingProvider
from founder_discovery.schemas import DiscoverData, DiscoverRequest, ParsedQuery
from .assembler import assemble_founders
from .errors import InvalidDiscoverRequest
from .query_parser import parse_discover_query
from .retriever import retrieve_candidates
from .scorer import ScoreThresholds, rank_people, score_people
from .store import load_person_evidence

logger = logging.getLogger(__name__)

# Founders enriched per requested result (headroom for rows dropped during assembly)
ENRICHMENT_HEADROOM = 2
NO_FOUNDERS_MESSAGE = "No founders found"


def resolve_num_results(requested: int | None, settings: Settings) -> int:
    """Request value or configured default, clamped to [1, discover_max_num_results]."""
    n = requested if requested is not None else settings.discover_default_num_results
    return max(1, min(settings.discover_max_num_results, int(n)))


def validate_discover_request(body: DiscoverRequest, case_session_id: str | None) -> str:
    """Return the query text or raise InvalidDiscoverRequest (400)."""
    query = (body.query or "").strip()
    if not query:
        raise InvalidDiscoverRequest("query is required")
    if not (case_session_id or "").strip():
        raise InvalidDiscoverRequest("case_session_id is required as query parameter")
    return query


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _build_data(
    query: str,
    parsed: ParsedQuery,
    founders: list,
    started: float,
    message: str | None = None,
) -> DiscoverData:
    elapsed_ms = _elapsed_ms(started)
    return DiscoverData(
        query=query,
        parsed_query=parsed,
        founders_found=len(founders),
        top_founders=founders,
        message=message,
        elapsed_time_ms=elapsed_ms,
        elapsed_time_seconds=round(elapsed_ms / 1000),
    )


async def run_discover(
    db: AsyncSession,
    session_factory: Callable[[], Any],
    chat: ChatProvider,
    embedder: EmbeddingProvider,
    settings: Settings,
    body: DiscoverRequest,
    case_session_id: str | None,
) -> DiscoverData:
    """Run one discover search. Raises InvalidDiscoverRequest for client errors; other errors propagate."""
    query = validate_discover_request(body, case_session_id)
    # Reported in logs only; evidence is scoped by case session
    organization_id = body.organization_id or settings.default_organization_id
    num_results = resolve_num_results(body.num_results, settings)
    started = time.monotonic()
    deadline = Deadline(settings.discover_timeout_seconds)

    logger.info(
        "Starting discover search",
        extra={"query": query, "organization_id": organization_id, "num_results": num_results},
    )

    # Step 1: parse (never raises for extraction failures)
    parsed = await parse_discover_query(chat, query, deadline)

    # Step 2-3: candidate canonical entities for subject and criteria
    limit = settings.discover_candidate_limit
    subject_candidates = await retrieve_candidates(
        db, embedder, parsed.subject_terms, SUBJECT_ENTITY_TYPES, deadline, limit
    )
    criteria_candidates = await retrieve_candidates(
        db, embedder, parsed.criteria, CRITERIA_ENTITY_TYPES, deadline, limit
    )

    # Step 4: evidence for people in this case session linked to any candidate
    thresholds = ScoreThresholds.from_settings(settings)
    canonical_ids = list(dict.fromkeys([c.id for c in subject_candidates] + [c.id for c in criteria_candidates]))
    evidence = await deadline.bound(
        "evidence lookup",
        load_person_evidence(
            db,
            canonical_ids,
            case_session_id=case_session_id,
            min_confidence=thresholds.evidence_confidence_min,
        ),
    )
    logger.debug("Found %s evidence rows across people", len(evidence))

    # Step 5: score and take headroom for enrichment
    scores = score_people(evidence, subject_candidates, criteria_candidates, thresholds)
    candidates = rank_people(scores, num_results * ENRICHMENT_HEADROOM)
    logger.debug(
        "Top combined scores: %s",
        [(c.person_id, round(c.subject_score, 3), round(c.criteria_score, 3)) for c in candidates[:3]],
    )
    if not candidates:
        logger.info("Discover search completed with no founders", extra={"elapsed_ms": _elapsed_ms(started)})
        return _build_data(query, parsed, [], started, message=NO_FOUNDERS_MESSAGE)

    # Step 6: enrich, then final sort (stable) and truncate
    founders = await assemble_founders(
        session_factory,
        candidates,
        settings.linkedin_source_name,
        deadline,
        concurrency=settings.discover_enrichment_concurrency,
    )
    top_founders = sorted(founders, key=lambda f: -f.combined_score)[:num_results]

    logger.info(
        "Discover search completed",
        extra={"founders_found": len(top_founders), "elapsed_ms": _elapsed_ms(started)},
    )
    return _build_data(query, parsed, top_founders, started)
