"""Tests for discover query parsing and its fallback."""

import asyncio

import pytest

from founder_discovery.core import Deadline
from founder_discovery.providers import ChatRateLimitError, ChatServiceError
from founder_discovery.schemas import ParsedQuery
from founder_discovery.services.discover.query_parser import (
    fallback_parsed_query,
    parse_discover_query,
)


@pytest.mark.asyncio
async def test_parse_uses_llm_output(mock_chat):
    parsed = await parse_discover_query(mock_chat, "founders who went to Stanford")

    assert parsed.subject == "founder"
    assert parsed.subject_variations == ["co-founder", "CEO"]
    assert parsed.criteria == ["Stanford"]
    assert parsed.criteria_type == "education"
    mock_chat.parse_discover_query.assert_awaited_once_with("founders who went to Stanford")


@pytest.mark.asyncio
async def test_parse_cleans_terms(mock_chat):
    mock_chat.parse_discover_query.return_value = {
        "subject": "  founder ",
        "subject_variations": ["co-founder", "Co-Founder", "  ", "founder"],
        "criteria": ["Stanford", "stanford", "NYC"],
        "criteria_type": "mixed",
    }

    parsed = await parse_discover_query(mock_chat, "q")

    assert parsed.subject == "founder"
    assert parsed.subject_variations == ["co-founder", "founder"]
    assert parsed.criteria == ["Stanford", "NYC"]
    # subject terms drop the variation that repeats the subject
    assert parsed.subject_terms == ["founder", "co-founder"]


@pytest.mark.asyncio
async def test_missing_lists_default_to_empty(mock_chat):
    mock_chat.parse_discover_query.return_value = {"subject": "CTO", "criteria_type": "company"}

    parsed = await parse_discover_query(mock_chat, "CTOs")

    assert parsed.subject == "CTO"
    assert parsed.subject_variations == []
    assert parsed.criteria == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ChatServiceError("boom"), ChatRateLimitError("429")],
)
async def test_chat_failure_falls_back(mock_chat, error):
    mock_chat.parse_discover_query.side_effect = error

    parsed = await parse_discover_query(mock_chat, "founders in Berlin")

    assert parsed.subject == "founder"
    assert parsed.subject_variations == ["co-founder", "startup founder"]
    assert parsed.criteria == ["founders in Berlin"]
    assert parsed.criteria_type == "mixed"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"subject": "", "criteria": ["x"]},
        {"subject": "founder", "criteria": "Stanford"},
        {"subject": "founder", "subject_variations": "CEO"},
        {"subject": "founder", "criteria_type": "astrology"},
    ],
)
async def test_malformed_output_falls_back(mock_chat, payload):
    mock_chat.parse_discover_query.return_value = payload

    parsed = await parse_discover_query(mock_chat, "some query")

    assert parsed.criteria == ["some query"]
    assert parsed.subject == "founder"


@pytest.mark.asyncio
async def test_expired_deadline_falls_back_without_calling_chat(mock_chat):
    deadline = Deadline(0)

    parsed = await parse_discover_query(mock_chat, "founders", deadline)

    assert parsed.criteria == ["founders"]


@pytest.mark.asyncio
async def test_slow_chat_hits_deadline_and_falls_back(mock_chat):
    async def slow(_query):
        await asyncio.sleep(1)
        return {"subject": "founder"}

    mock_chat.parse_discover_query.side_effect = slow

    parsed = await parse_discover_query(mock_chat, "slow query", Deadline(0.01))

    assert parsed.criteria == ["slow query"]


def test_fallback_keeps_query_verbatim():
    parsed = fallback_parsed_query("  Founders, NYC  ")

    assert isinstance(parsed, ParsedQuery)
    assert parsed.criteria == ["  Founders, NYC  "]
    assert parsed.subject_terms == ["founder", "co-founder", "startup founder"]
