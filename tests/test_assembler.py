"""Tests for founder enrichment and assembly."""

from unittest.mock import AsyncMock, patch

import pytest

from founder_discovery.core import Deadline
from founder_discovery.db.models import Person, PersonDatapoint
from founder_discovery.services.discover.assembler import (
    assemble_founders,
    format_person_name,
    pick_profile_picture,
    unique_datapoint_ids,
)
from founder_discovery.services.discover.types import EntityMatch, PersonScore

MODULE = "founder_discovery.services.discover.assembler"


def _score(person_id: str, combined: float = 1.0) -> PersonScore:
    return PersonScore(
        person_id=person_id,
        subject_score=combined,
        criteria_score=0.0,
        combined_score=combined,
        subject_matches=[
            EntityMatch("Founder", "occupation", 0.9, datapoint_id="dp-1"),
            EntityMatch("CEO", "occupation", 0.7, datapoint_id="dp-1"),
        ],
        matched_occupation="Founder",
    )


@pytest.fixture
def store_mocks():
    with (
        patch(f"{MODULE}.load_person", new=AsyncMock()) as load_person,
        patch(f"{MODULE}.load_profile_datapoints", new=AsyncMock(return_value=[])) as load_profiles,
        patch(f"{MODULE}.load_linkedin_url", new=AsyncMock(return_value=None)) as load_linkedin,
        patch(f"{MODULE}.load_datapoints", new=AsyncMock(return_value={})) as load_datapoints,
    ):
        yield {
            "person": load_person,
            "profiles": load_profiles,
            "linkedin": load_linkedin,
            "datapoints": load_datapoints,
        }


def test_format_person_name():
    assert format_person_name(Person(first_name="Ada", middle_name=None, last_name="Lovelace")) == "Ada Lovelace"
    assert format_person_name(Person(first_name=" ", middle_name="", last_name=None)) == "Unknown"
    assert format_person_name(None) == "Unknown"


def test_profile_picture_priority():
    rows = [
        ("twitter", {"profile": {"profile_image_url": "https://tw/pic"}}),
        ("facebook", {"profile": {"profile_picture_url": "https://fb/pic"}}),
        ("linkedin", {"profile": {}}),
        ("instagram", {"profile": {"profile_picture_url": "https://ig/pic"}}),
    ]

    # LinkedIn has no picture, so Instagram wins over Facebook and Twitter
    assert pick_profile_picture(rows) == "https://ig/pic"


def test_profile_picture_platform_from_payload_and_malformed_rows():
    rows = [
        ("other", {"platform": "linkedin", "profile": {"profile_image_url": "https://li/pic"}}),
        ("facebook", {"profile": "not-an-object"}),
        ("myspace", {"profile": {"profile_picture_url": "https://ms/pic"}}),
    ]

    assert pick_profile_picture(rows) == "https://li/pic"
    assert pick_profile_picture([("facebook", None)]) is None


def test_profile_picture_datapoint_type_matches_even_with_other_payload_platform():
    rows = [("linkedin", {"platform": "facebook", "profile": {"profile_image_url": "https://li/pic"}})]

    # Matched to LinkedIn by its type, so the LinkedIn picture field is read
    assert pick_profile_picture(rows) == "https://li/pic"


def test_profile_picture_first_datapoint_of_platform_decides():
    rows = [
        ("instagram", {"profile": {}}),
        ("instagram", {"profile": {"profile_picture_url": "https://ig/second"}}),
        ("twitter", {"profile": {"profile_image_url": "https://tw/pic"}}),
    ]

    assert pick_profile_picture(rows) == "https://tw/pic"


def test_unique_datapoint_ids():
    matches = [EntityMatch("a", "occupation", 0.9, datapoint_id=f"dp-{i % 7}") for i in range(10)]
    matches.insert(0, EntityMatch("none", "occupation", 0.9))

    assert unique_datapoint_ids(matches) == ["dp-0", "dp-1", "dp-2", "dp-3", "dp-4"]


@pytest.mark.asyncio
async def test_enriched_founder(store_mocks, session_factory):
    store_mocks["person"].return_value = Person(first_name="Grace", middle_name="B", last_name="Hopper")
    store_mocks["linkedin"].return_value = "https://linkedin.com/in/grace"
    store_mocks["profiles"].return_value = [
        ("linkedin", {"profile": {"profile_image_url": "https://li/grace.jpg"}})
    ]
    store_mocks["datapoints"].return_value = {
        "dp-1": PersonDatapoint(id="dp-1", url="https://example.com", title="Bio", snippet="Founder of X")
    }

    [founder] = await assemble_founders(session_factory, [_score("p1", 2.5)], "linkedin_enrichment", Deadline(5))

    assert founder.name == "Grace B Hopper"
    assert founder.linkedin_url == "https://linkedin.com/in/grace"
    assert founder.profile_picture_url == "https://li/grace.jpg"
    assert founder.occupation_score == pytest.approx(0.5)
    assert founder.combined_score == pytest.approx(2.5)
    assert [d.id for d in founder.subject_datapoints] == ["dp-1"]
    assert founder.criteria_datapoints == []
    assert [m.entity_value for m in founder.matching_entities] == ["Founder", "CEO"]
    store_mocks["datapoints"].assert_awaited_once()
    assert store_mocks["datapoints"].await_args.args[1] == ["dp-1"]


@pytest.mark.asyncio
async def test_missing_person_row_gets_unknown_name(store_mocks, session_factory):
    store_mocks["person"].return_value = None
    store_mocks["linkedin"].return_value = "https://linkedin.com/in/x"

    [founder] = await assemble_founders(session_factory, [_score("p1")], "linkedin_enrichment", Deadline(5))

    assert founder.name == "Unknown"
    assert founder.linkedin_url == "https://linkedin.com/in/x"


@pytest.mark.asyncio
async def test_failure_is_isolated_per_founder(store_mocks, session_factory):
    async def load_person(_db, person_id):
        if person_id == "p2":
            raise RuntimeError("connection reset")
        return Person(first_name="Ok", last_name=person_id)

    store_mocks["person"].side_effect = load_person

    founders = await assemble_founders(
        session_factory,
        [_score("p1", 3.0), _score("p2", 2.0), _score("p3", 1.0)],
        "linkedin_enrichment",
        Deadline(5),
    )

    assert [f.person_id for f in founders] == ["p1", "p2", "p3"]
    assert founders[0].name == "Ok p1"
    assert founders[1].name == "Unknown"
    assert founders[1].combined_score == pytest.approx(2.0)
    assert founders[1].matched_occupation == "Founder"
    assert founders[1].linkedin_url is None
    assert founders[2].name == "Ok p3"
    assert session_factory.opened == 3


@pytest.mark.asyncio
async def test_expired_deadline_yields_placeholders(store_mocks, session_factory):
    founders = await assemble_founders(session_factory, [_score("p1")], "linkedin_enrichment", Deadline(0))

    assert founders[0].name == "Unknown"
    store_mocks["person"].assert_not_awaited()


@pytest.mark.asyncio
async def test_no_scores(session_factory):
    assert await assemble_founders(session_factory, [], "linkedin_enrichment", Deadline(5)) == []
    assert session_factory.opened == 0
