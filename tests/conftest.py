"""Pytest configuration and shared fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add the project root to Python path so tests can import userpanel uninstalled
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from userpanel.auth import Actor, PermissionEvaluator  # noqa: E402
from userpanel.common import Permission, Role, RoleHierarchy, User  # noqa: E402
from userpanel.localization import Localizer  # noqa: E402
from userpanel.notifications import NotificationCenter  # noqa: E402

ActorFactory = Callable[..., Actor]


@pytest.fixture
def roles() -> list[Role]:
    """Roles as fetched from the remote service, with explicit ranks."""
    return [
        Role(name="owner", rank=0),
        Role(name="admin", rank=1),
        Role(name="member", rank=2),
    ]


@pytest.fixture
def hierarchy(roles: list[Role]) -> RoleHierarchy:
    return RoleHierarchy.from_roles(roles)


@pytest.fixture
def users() -> list[User]:
    """Two users, one without a role."""
    return [
        User(id="1", email="a@x"),
        User(id="2", email="b@x", role=Role(name="member")),
    ]


@pytest.fixture
def make_actor() -> ActorFactory:
    """Build an actor with a role and a set of permissions."""

    def factory(
        user_id: str = "0",
        role: str | None = "admin",
        *permissions: Permission,
    ) -> Actor:
        user = User(
            id=user_id,
            email=f"actor{user_id}@x",
            role=Role(name=role) if role else None,
        )
        return Actor(user=user, permissions=PermissionEvaluator(frozenset(permissions)))

    return factory


@pytest.fixture
def service(users: list[User], roles: list[Role]) -> AsyncMock:
    """A user service that succeeds unless told otherwise."""
    mock_service = AsyncMock()
    mock_service.fetch_users.return_value = list(users)
    mock_service.fetch_roles.return_value = list(roles)
    mock_service.bind_role.return_value = None
    mock_service.delete_user.return_value = None
    return mock_service


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def localizer() -> Localizer:
    return Localizer()
