"""Post-related Pydantic schemas.

Each post type has its own creation schema with its own content-length
rules; the ``type`` field selects which one applies and defaults to general.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Field, Tag, field_validator

from energy_pros.schemas.common import CamelModel
from energy_pros.schemas.user import UserPublic


def normalize_hashtag(value: str) -> str:
    """Return the tag with exactly one leading '#'."""
    tag = value.strip().lstrip("#").strip()
    if not tag:
        raise ValueError("hashtag must not be empty")
    return f"#{tag}"


class JobDetails(CamelModel):
    job_title: str = Field(..., min_length=3)
    company: str = Field(..., min_length=2)
    location: str = Field(..., min_length=2)
    job_type: str
    experience: str
    salary: str | None = None
    description: str = Field(..., min_length=20, max_length=1000)


class EventDetails(CamelModel):
    event_name: str = Field(..., min_length=3)
    event_type: str
    date: str
    time: str
    location: str = Field(..., min_length=2)
    capacity: str | None = None
    ticket_price: str | None = None
    description: str = Field(..., min_length=20, max_length=1000)


class _PostCreateBase(CamelModel):
    hashtag: str = Field(..., min_length=1, max_length=100)
    is_anonymous: bool = False

    @field_validator("hashtag")
    @classmethod
    def _normalize_hashtag(cls, value: str) -> str:
        return normalize_hashtag(value)


class GeneralPostCreate(_PostCreateBase):
    type: Literal["general"] = "general"
    content: str = Field(..., min_length=5, max_length=500)
    structured_data: None = None


class JobPostCreate(_PostCreateBase):
    type: Literal["job"]
    content: str = Field(..., min_length=5, max_length=2000)
    structured_data: JobDetails


class EventPostCreate(_PostCreateBase):
    type: Literal["event"]
    content: str = Field(..., min_length=5, max_length=2000)
    structured_data: EventDetails


def _post_type_of(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("type") or "general"
    return getattr(value, "type", "general")


PostCreate = Annotated[
    Union[
        Annotated[GeneralPostCreate, Tag("general")],
        Annotated[JobPostCreate, Tag("job")],
        Annotated[EventPostCreate, Tag("event")],
    ],
    Discriminator(_post_type_of),
]


class PostUpdate(CamelModel):
    """Only the content of a post can change after creation."""

    content: str = Field(..., min_length=1, max_length=2000)


class ReactionStats(CamelModel):
    """Reaction histogram plus the legacy positive/negative stand-ins."""

    reactions: dict[str, int] = Field(default_factory=dict)
    reaction_count: int = 0
    like_count: int = 0
    angry_count: int = 0
    current_user_reaction: str | None = None


class PostResponse(ReactionStats):
    """Schema for post information returned by the API."""

    id: int
    content: str
    hashtag: str
    user_id: int | None
    is_anonymous: bool
    type: str
    structured_data: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
    user: UserPublic | None = None
    comment_count: int = 0
