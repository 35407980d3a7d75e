# src/energy_pros/api/v1/endpoints/invites.py
"""Invite code endpoints for the two-step registration flow."""

import logging

from fastapi import APIRouter

from energy_pros.api.v1.dependencies import CurrentUserDep
from energy_pros.repositories import StorageDep
from energy_pros.schemas.common import MessageResponse
from energy_pros.schemas.invite import InviteCodeRequest, InviteValidationResponse
from energy_pros.services.errors import DomainError
from energy_pros.services.invites import InviteGate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invite", tags=["invites"])


@router.post("/validate", response_model=InviteValidationResponse)
async def validate_invite(request: InviteCodeRequest, storage: StorageDep) -> InviteValidationResponse:
    """Check that a code exists and is unused without consuming it."""
    invite = InviteGate(storage).validate(request.code)
    return InviteValidationResponse(
        message="Valid code", invited_by_user_id=invite.invited_by_user_id
    )


@router.post("/mark-used", response_model=MessageResponse)
async def mark_invite_used(
    request: InviteCodeRequest,
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Consume a code on behalf of the signed-in member."""
    try:
        InviteGate(storage).consume(request.code, current_user.id)
    except DomainError as err:
        logger.warning(
            "Could not mark invite %s used for user %s: %s",
            request.code,
            current_user.id,
            err.message,
        )
        raise
    storage.commit()
    return MessageResponse(message="Invite code marked as used")
