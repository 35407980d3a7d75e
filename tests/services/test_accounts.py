"""Tests for registration and credential checks."""

from unittest.mock import patch

import pytest

from energy_pros.schemas.user import RegisterRequest
from energy_pros.services.accounts import authenticate, register_user
from energy_pros.services.errors import (
    AuthenticationRequired,
    Conflict,
    InviteInvalid,
    ValidationFailed,
)
from energy_pros.services.invites import InviteGate


@pytest.fixture()
def inviter(storage):
    user = storage.create_user(
        username="alice", email="alice@example.com", password="hashed", full_name="Alice"
    )
    storage.create_invite(code="WELCOME2024", invited_by_user_id=user.id)
    storage.commit()
    return user


def _request(**overrides):
    data = {
        "username": "newbie",
        "email": "Newbie@Example.com",
        "password": "wind-and-solar",
        "fullName": "New Member",
        "inviteCode": "WELCOME2024",
    }
    data.update(overrides)
    return RegisterRequest(**data)


def test_register_consumes_invite_and_links_inviter(storage, inviter) -> None:
    user = register_user(storage, _request(), invite_required=True)

    assert user.email == "newbie@example.com"
    assert user.invited_by_user_id == inviter.id
    assert user.password != "wind-and-solar"
    invite = storage.get_invite("WELCOME2024")
    assert invite.used_by_user_id == user.id
    assert invite.used_at is not None


def test_second_registration_with_same_code_fails(storage, inviter) -> None:
    register_user(storage, _request(), invite_required=True)

    with pytest.raises(InviteInvalid):
        register_user(
            storage,
            _request(username="second", email="second@example.com"),
            invite_required=True,
        )
    assert storage.get_user_by_username("second") is None


def test_duplicate_email_and_username_are_conflicts(storage, inviter) -> None:
    with pytest.raises(Conflict, match="User with this email already exists"):
        register_user(storage, _request(email="alice@example.com"), invite_required=True)
    with pytest.raises(Conflict, match="Username already taken"):
        register_user(storage, _request(username="alice"), invite_required=True)
    assert storage.get_invite("WELCOME2024").used_at is None


def test_missing_invite_when_required(storage, inviter) -> None:
    with pytest.raises(ValidationFailed, match="Invite code is required"):
        register_user(storage, _request(inviteCode=None), invite_required=True)


def test_invite_optional_when_not_required(storage) -> None:
    user = register_user(storage, _request(inviteCode=None), invite_required=False)
    assert user.invited_by_user_id is None


def test_failed_invite_consumption_rolls_back_registration(storage, inviter) -> None:
    """If marking the invite used fails, the new account is not kept."""
    with patch.object(InviteGate, "consume", side_effect=RuntimeError("store unavailable")):
        with pytest.raises(RuntimeError):
            register_user(storage, _request(), invite_required=True)

    assert storage.get_user_by_username("newbie") is None
    assert storage.get_invite("WELCOME2024").used_at is None


def test_authenticate(storage, inviter) -> None:
    register_user(storage, _request(), invite_required=True)

    assert authenticate(storage, "newbie@example.com", "wind-and-solar").username == "newbie"
    with pytest.raises(AuthenticationRequired, match="Invalid credentials"):
        authenticate(storage, "newbie@example.com", "wrong")
    with pytest.raises(AuthenticationRequired):
        authenticate(storage, "ghost@example.com", "wind-and-solar")
