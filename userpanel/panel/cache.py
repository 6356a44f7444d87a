"""Client-held cache of the tenant's users and roles.

Successful mutations are folded into the cached collection instead of
refetching it. Folds are pure reducers ``(users, ...) -> users`` keyed by user
id, so applying the same result twice changes nothing and folds for different
users never touch each other's entries.
"""

import logging
from collections.abc import Callable, Iterable

from userpanel.common import Role, User

LOGGER = logging.getLogger(__name__)


class DuplicateUserError(ValueError):
    """Raised when a user collection holds the same id more than once."""


def fold_role_binding(users: list[User], user_id: str, role_name: str) -> list[User]:
    """Bind ``role_name`` to the user with ``user_id``.

    :param users: The cached collection, left untouched
    :param user_id: Id of the rebound user
    :param role_name: The newly bound role
    :return: A new list where only the matching entry is replaced
    """
    return [
        user.with_role(role_name) if user.id == user_id else user for user in users
    ]


def fold_deletion(users: list[User], user_id: str) -> list[User]:
    """Remove the user with ``user_id``, keeping the order of the others."""
    return [user for user in users if user.id != user_id]


def ensure_unique_ids(users: Iterable[User]) -> None:
    """Raise DuplicateUserError if two users share an id."""
    seen = set()
    for user in users:
        if user.id in seen:
            msg = f"Duplicate user id in collection: {user.id}"
            raise DuplicateUserError(msg)
        seen.add(user.id)


class UserCache:
    """Holds the users and roles collections shown by one panel.

    The users list is only ever replaced wholesale, either by ``load`` or by
    ``apply``; the list object itself is never mutated.
    """

    def __init__(self) -> None:
        self._users: list[User] = []
        self._roles: list[Role] = []

    @property
    def users(self) -> list[User]:
        return self._users

    @property
    def roles(self) -> list[Role]:
        return self._roles

    def load(self, users: list[User], roles: list[Role]) -> None:
        """Replace both collections with freshly fetched ones.

        :raises DuplicateUserError: If ``users`` repeats an id
        """
        ensure_unique_ids(users)
        self._users = list(users)
        self._roles = list(roles)
        LOGGER.debug("Cache loaded with %s users, %s roles", len(users), len(roles))

    def clear(self) -> None:
        self._users = []
        self._roles = []

    def find(self, user_id: str) -> User | None:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def has_role(self, role_name: str) -> bool:
        return any(role.name == role_name for role in self._roles)

    def apply(
        self,
        reducer: Callable[..., list[User]],
        *args: object,
    ) -> list[User]:
        """Fold a mutation result into the users collection.

        :param reducer: Pure function receiving the current users and ``args``
        :return: The new users collection
        """
        self._users = reducer(self._users, *args)
        return self._users
