"""Tests for domain types, utilities, and the request deadline."""

import asyncio

import pytest

from founder_discovery.core import Deadline, DeadlineExceeded
from founder_discovery.domain import (
    FacebookProfile,
    LinkedInProfile,
    TwitterProfile,
    matches_platform,
    parse_social_profile,
)
from founder_discovery.db.session import to_async_url
from founder_discovery.utils import dedupe_terms, normalize_embedding, strip_json_from_response


class TestSocialProfile:
    def test_reads_payload_as_requested_platform(self):
        profile = parse_social_profile("twitter", {"profile": {"profile_image_url": "https://tw/a.png"}})

        assert isinstance(profile, TwitterProfile)
        assert profile.picture_url() == "https://tw/a.png"

    def test_requested_platform_overrides_payload_platform(self):
        profile = parse_social_profile("linkedin", {"platform": "facebook", "profile": {}})

        assert isinstance(profile, LinkedInProfile)
        assert profile.picture_url() is None

    def test_facebook_uses_picture_field(self):
        profile = parse_social_profile(
            "facebook",
            {"profile": {"profile_picture_url": "https://fb/p.jpg", "profile_image_url": "ignored"}},
        )

        assert isinstance(profile, FacebookProfile)
        assert profile.picture_url() == "https://fb/p.jpg"

    @pytest.mark.parametrize(
        "platform,payload",
        [
            ("github", {"profile": {}}),
            (None, {"profile": {}}),
            ("linkedin", "not a dict"),
            ("linkedin", None),
            ("linkedin", {"profile": ["bad"]}),
        ],
    )
    def test_unknown_or_malformed(self, platform, payload):
        assert parse_social_profile(platform, payload) is None

    def test_matches_platform_by_type_or_payload(self):
        assert matches_platform("linkedin", {"platform": "facebook"}, "linkedin")
        assert matches_platform("linkedin", {"platform": "facebook"}, "facebook")
        assert matches_platform("other", {"platform": "twitter"}, "twitter")
        assert not matches_platform("other", {"platform": "twitter"}, "linkedin")
        assert not matches_platform("other", None, "linkedin")


class TestUtils:
    def test_dedupe_terms(self):
        assert dedupe_terms([" CEO ", "ceo", "", None, "CTO"]) == ["CEO", "CTO"]
        assert dedupe_terms(None) == []

    def test_normalize_embedding(self):
        assert normalize_embedding([1.0, 2.0], 4) == [1.0, 2.0, 0.0, 0.0]
        assert normalize_embedding([1.0, 2.0, 3.0], 2) == [1.0, 2.0]

    def test_strip_json_from_response(self):
        assert strip_json_from_response('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_json_from_response('{"a": 1}') == '{"a": 1}'

    def test_to_async_url(self):
        assert to_async_url("postgres://u@h/db") == "postgresql+asyncpg://u@h/db"
        assert to_async_url("postgresql://u@h/db") == "postgresql+asyncpg://u@h/db"
        assert to_async_url("postgresql+asyncpg://u@h/db") == "postgresql+asyncpg://u@h/db"


class TestDeadline:
    def test_remaining_with_fake_clock(self):
        now = [100.0]
        deadline = Deadline(10, clock=lambda: now[0])

        assert deadline.remaining() == 10
        now[0] = 107.5
        assert deadline.remaining() == pytest.approx(2.5)
        assert not deadline.expired
        now[0] = 110.0
        assert deadline.expired
        assert deadline.remaining() == 0.0

    @pytest.mark.asyncio
    async def test_bound_returns_result(self):
        async def work():
            return 42

        assert await Deadline(5).bound("work", work()) == 42

    @pytest.mark.asyncio
    async def test_bound_times_out(self):
        with pytest.raises(DeadlineExceeded, match="slow call"):
            await Deadline(0.01).bound("slow call", asyncio.sleep(1))

    @pytest.mark.asyncio
    async def test_expired_bound_does_not_start_call(self):
        started = []

        async def work():
            started.append(True)

        with pytest.raises(DeadlineExceeded):
            await Deadline(0).bound("work", work())
        assert started == []
