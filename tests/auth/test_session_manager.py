"""Tests for JWT session handling."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from userpanel.auth import SessionManager
from userpanel.common import Permission

SECRET = "x" * 64


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager(secret_key=SECRET)


def test_round_trip_keeps_actor(session_manager: SessionManager, make_actor) -> None:
    actor = make_actor("7", "admin", Permission.MANAGE_ROLE, Permission.DELETE_USER)

    token = session_manager.create_access_token(actor)
    verified = session_manager.verify_token(token)

    assert verified == actor


def test_short_secret_is_replaced() -> None:
    manager = SessionManager(secret_key="short")  # noqa: S106

    assert manager.secret_key != "short"  # noqa: S105
    assert len(manager.secret_key) >= SessionManager.MINIMUM_JWT_SECRET_KEY_LENGTH


def test_invalid_token(session_manager: SessionManager) -> None:
    assert session_manager.verify_token("not-a-token") is None


def test_token_signed_with_other_key(session_manager: SessionManager, make_actor) -> None:
    other = SessionManager(secret_key="y" * 64)
    token = other.create_access_token(make_actor())

    assert session_manager.verify_token(token) is None


def test_expired_token(session_manager: SessionManager) -> None:
    payload = {
        "sub": "1",
        "email": "a@x",
        "type": "access_token",
        "exp": datetime.now(UTC) - timedelta(minutes=1),
    }
    token = jwt.encode(payload, SECRET, algorithm=session_manager.algorithm)

    assert session_manager.verify_token(token) is None


def test_wrong_token_type(session_manager: SessionManager) -> None:
    payload = {"sub": "1", "email": "a@x", "type": "refresh_token"}
    token = jwt.encode(payload, SECRET, algorithm=session_manager.algorithm)

    assert session_manager.verify_token(token) is None


def test_unknown_permissions_are_dropped(session_manager: SessionManager) -> None:
    payload = {
        "sub": "1",
        "email": "a@x",
        "role": None,
        "permissions": ["DELETE_USER", "TIME_TRAVEL"],
        "type": "access_token",
    }
    token = jwt.encode(payload, SECRET, algorithm=session_manager.algorithm)

    actor = session_manager.verify_token(token)

    assert actor is not None
    assert actor.user.role is None
    assert actor.permissions.granted == frozenset({Permission.DELETE_USER})
