"""Candidate retrieval: query terms → embeddings → nearest canonical entities, merged by best similarity."""

import asyncio
import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from founder_discovery.core import Deadline, DeadlineExceeded
from founder_discovery.providers import EmbeddingProvider, EmbeddingServiceError
from founder_discovery.utils import dedupe_terms, normalize_embedding
from .errors import CandidateRetrievalError
from .store import search_canonical_entities
from .types import CandidateEntity

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_LIMIT = 100

def merge_candidates(
    candidate_lists: Iterable[list[CandidateEntity]],
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[CandidateEntity]:
    """Dedupe by entity id keeping the max similarity, sort descending, keep the top `limit`."""
    best: dict[str, CandidateEntity] = {}
    for candidates in candidate_lists:
        for candidate in candidates:
            existing = best.get(candidate.id)
            if existing is None or candidate.similarity > existing.similarity:
                best[candidate.id] = candidate
    merged = sorted(best.values(), key=lambda c: -c.similarity)
    return merged[:limit]


async def _embed_term(embedder: EmbeddingProvider, term: str, deadline: Deadline) -> list[float]:
    vectors = await deadline.bound("term embedding", embedder.embed([term]))
    if not vectors:
        raise EmbeddingServiceError("Embedding API returned no vector.")
    return normalize_embedding(vectors[0], embedder.dimension)


async def embed_terms(
    embedder: EmbeddingProvider,
    terms: list[str],
    deadline: Deadline,
) -> dict[str, list[float]]:
    """Embed each term independently; failed terms are logged and left out."""
    results = await asyncio.gather(
        *(_embed_term(embedder, term, deadline) for term in terms),
        return_exceptions=True,
    )
    vectors: dict[str, list[float]] = {}
    for term, result in zip(terms, results):
        if isinstance(result, DeadlineExceeded):
            raise result
        if isinstance(result, EmbeddingServiceError):
            logger.warning("Embedding failed for term %r, skipping: %s", term, result)
            continue
        if isinstance(result, BaseException):
            raise result
        vectors[term] = result
    return vectors


async def retrieve_candidates(
    db: AsyncSession,
    embedder: EmbeddingProvider,
    terms: list[str],
    allowed_types: Iterable[str],
    deadline: Deadline,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[CandidateEntity]:
    """One nearest-neighbor search per embedded term over canonical entities of `allowed_types`."""
    terms = dedupe_terms(terms)
    if not terms:
        return []
    allowed = frozenset(allowed_types)

    vectors = await embed_terms(embedder, terms, deadline)
    if not vectors:
        raise CandidateRetrievalError(
            f"Embedding failed for all {len(terms)} query terms; nothing to rank against."
        )

    # Searches share the request session, so they run one after another
    candidate_lists: list[list[CandidateEntity]] = []
    for term, vector in vectors.items():
        candidate_lists.append(
            await deadline.bound(
                "canonical entity search",
                search_canonical_entities(db, vector, allowed, limit),
            )
        )

    merged = merge_candidates(candidate_lists, limit)
    logger.debug(
        "Retrieved %s canonical entities for %s terms (types=%s); top: %s",
        len(merged),
        len(vectors),
        sorted(allowed),
        [(c.name, c.type, round(c.similarity, 3)) for c in merged[:5]],
    )
    return merged
