"""
Domain types for founder discovery.
Single source of truth for entity types, criteria types, and social profile payloads.
"""

import logging
from typing import Annotated, Any, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# 1. Enums
# -----------------------------------------------------------------------------

EntityType = Literal[
    "occupation", "company", "university", "high_school",
    "location", "interest_subcategory",
]

CriteriaType = Literal["interest", "education", "location", "company", "mixed"]

ENTITY_TYPES: tuple[str, ...] = get_args(EntityType)
CRITERIA_TYPES: tuple[str, ...] = get_args(CriteriaType)

# Subject terms are matched against roles only; criteria against everything else
SUBJECT_ENTITY_TYPES: frozenset[str] = frozenset({"occupation"})
CRITERIA_ENTITY_TYPES: frozenset[str] = frozenset(ENTITY_TYPES) - SUBJECT_ENTITY_TYPES

# -----------------------------------------------------------------------------
# 2. Social profile payloads (person_datapoints.structured_data, data_category=profile)
# -----------------------------------------------------------------------------

SocialPlatform = Literal["linkedin", "instagram", "facebook", "twitter"]

# Profile picture lookup order; first platform with a picture wins
PROFILE_PICTURE_PRIORITY: tuple[str, ...] = get_args(SocialPlatform)


class _ImageUrlProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    profile_image_url: Optional[str] = None


class _PictureUrlProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    profile_picture_url: Optional[str] = None


class LinkedInProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    platform: Literal["linkedin"] = "linkedin"
    profile: Optional[_ImageUrlProfile] = None

    def picture_url(self) -> str | None:
        return self.profile.profile_image_url if self.profile else None


class InstagramProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    platform: Literal["instagram"] = "instagram"
    profile: Optional[_PictureUrlProfile] = None

    def picture_url(self) -> str | None:
        return self.profile.profile_picture_url if self.profile else None


class FacebookProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    platform: Literal["facebook"] = "facebook"
    profile: Optional[_PictureUrlProfile] = None

    def picture_url(self) -> str | None:
        return self.profile.profile_picture_url if self.profile else None


class TwitterProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")
    platform: Literal["twitter"] = "twitter"
    profile: Optional[_ImageUrlProfile] = None

    def picture_url(self) -> str | None:
        return self.profile.profile_image_url if self.profile else None


SocialProfile = Annotated[
    Union[LinkedInProfile, InstagramProfile, FacebookProfile, TwitterProfile],
    Field(discriminator="platform"),
]

_social_profile_adapter = TypeAdapter(SocialProfile)


def matches_platform(datapoint_type: str | None, structured_data: Any, platform: str) -> bool:
    """A profile datapoint belongs to a platform by its type or by the payload's own platform field."""
    payload_platform = structured_data.get("platform") if isinstance(structured_data, dict) else None
    return datapoint_type == platform or payload_platform == platform


def parse_social_profile(platform: str, structured_data: Any) -> SocialProfile | None:
    """Read a profile payload as the given platform's variant.

    Returns None for unknown platforms and malformed payloads.
    """
    if platform not in PROFILE_PICTURE_PRIORITY or not isinstance(structured_data, dict):
        return None
    try:
        return _social_profile_adapter.validate_python({**structured_data, "platform": platform})
    except ValidationError as e:
        logger.debug("Skipping malformed %s profile payload: %s", platform, e)
        return None
