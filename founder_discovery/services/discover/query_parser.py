"""Free-text founder query → ParsedQuery, with a deterministic fallback on any extraction failure."""

import logging

from founder_discovery.core import Deadline
from founder_discovery.providers import ChatProvider
from founder_discovery.schemas import ParsedQuery

logger = logging.getLogger(__name__)

FALLBACK_SUBJECT = "founder"
FALLBACK_SUBJECT_VARIATIONS = ("co-founder", "startup founder")
FALLBACK_REASONING = "Fallback parsing due to LLM error"


def fallback_parsed_query(query: str) -> ParsedQuery:
    """Criteria-only parse of the raw query. Built without validation so criteria keep the query verbatim."""
    return ParsedQuery.model_construct(
        subject=FALLBACK_SUBJECT,
        subject_variations=list(FALLBACK_SUBJECT_VARIATIONS),
        criteria=[query],
        criteria_type="mixed",
        reasoning=FALLBACK_REASONING,
    )


async def parse_discover_query(
    chat: ChatProvider,
    query: str,
    deadline: Deadline | None = None,
) -> ParsedQuery:
    """Never raises for extraction problems; the caller must reject empty queries first."""
    try:
        if deadline is not None:
            raw = await deadline.bound("query parse", chat.parse_discover_query(query))
        else:
            raw = await chat.parse_discover_query(query)
        parsed = ParsedQuery.from_llm_dict(raw)
    except Exception as exc:
        # Any extraction failure (provider, deadline, malformed output) degrades to the fallback
        logger.warning("Discover query parse failed, using fallback: %s", exc)
        return fallback_parsed_query(query)

    logger.debug(
        "Discover query parsed: subject=%s variations=%s criteria=%s criteria_type=%s",
        parsed.subject,
        parsed.subject_variations,
        parsed.criteria,
        parsed.criteria_type,
    )
    return parsed
