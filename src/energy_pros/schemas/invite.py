"""Invite code schemas."""

from pydantic import Field

from energy_pros.schemas.common import CamelModel


class InviteCodeRequest(CamelModel):
    code: str = Field(..., min_length=1, max_length=64)


class InviteValidationResponse(CamelModel):
    message: str
    invited_by_user_id: int
