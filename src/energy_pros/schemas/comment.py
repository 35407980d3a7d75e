"""Comment schemas."""

from datetime import datetime

from pydantic import Field

from energy_pros.schemas.common import CamelModel
from energy_pros.schemas.user import UserPublic


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(CamelModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserPublic | None = None
