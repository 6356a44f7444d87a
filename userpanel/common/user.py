"""Fundamental user, role and permission data model for the panel."""

from collections.abc import Iterable, Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict

OWNER_ROLE_NAME = "owner"
OWNER_RANK = 0


class Permission(Enum):
    """Capabilities an actor may be granted by the tenant's auth service."""

    DELETE_USER = "DELETE_USER"
    MANAGE_ROLE = "MANAGE_ROLE"
    MANAGE_ALL = "MANAGE_ALL"

    @classmethod
    def parse(cls, value: str) -> "Permission | None":
        """Return the matching permission, or None for unknown names.

        :param value: Permission name as sent by the auth service
        :return: The Permission member, or None
        """
        try:
            return cls(value)
        except ValueError:
            return None


class Role(BaseModel):
    """A tenant role.

    :param name: Unique role name, also its identifier
    :param rank: Explicit ordinal, lower is more privileged. None when unranked.
    """

    name: str
    rank: int | None = None


class Profile(BaseModel):
    """Optional presentation details of a user."""

    nickname: str | None = None
    avatar_url: str | None = None


class User(BaseModel):
    """A tenant user as held in the panel's cache.

    :param id: Opaque unique identifier
    :param email: Unique email address
    :param profile: Optional profile, may be missing entirely
    :param role: Bound role, None for users without a role
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    email: str
    profile: Profile | None = None
    role: Role | None = None

    def display_name(self, use_nickname: bool) -> str:
        """Name shown in the list, falling back to the email."""
        if use_nickname and self.profile and self.profile.nickname:
            return self.profile.nickname
        return self.email

    def with_role(self, role_name: str) -> "User":
        """Copy of this user bound to ``role_name``, all other fields preserved."""
        return self.model_copy(update={"role": Role(name=role_name)})


class RoleHierarchy:
    """Explicit rank table used for every role comparison.

    Roles are compared by their rank in this table and never by name or by
    the order in which they were fetched. A role missing from the table is
    unranked and sits below every ranked role.
    """

    def __init__(
        self,
        ranks: Mapping[str, int] | None = None,
        owner_role_name: str = OWNER_ROLE_NAME,
    ) -> None:
        self.owner_role_name = owner_role_name
        self._ranks: dict[str, int] = dict(ranks or {})
        self._ranks[owner_role_name] = OWNER_RANK

    @classmethod
    def from_roles(
        cls,
        roles: Iterable[Role],
        ranks: Mapping[str, int] | None = None,
        owner_role_name: str = OWNER_ROLE_NAME,
    ) -> "RoleHierarchy":
        """Build a hierarchy from configured ranks and ranks carried by roles.

        Ranks carried by fetched roles take precedence over configured ones.

        :param roles: Roles as returned by the remote service
        :param ranks: Configured fallback rank table
        :param owner_role_name: Name of the reserved owner role
        :return: The merged hierarchy
        """
        merged = dict(ranks or {})
        for role in roles:
            if role.rank is not None:
                merged[role.name] = role.rank
        return cls(merged, owner_role_name)

    @property
    def ranks(self) -> dict[str, int]:
        return dict(self._ranks)

    def rank_of(self, role: Role | str | None) -> int | None:
        """Return the rank of a role or role name, None when unranked."""
        if role is None:
            return None
        name = role if isinstance(role, str) else role.name
        return self._ranks.get(name)

    def is_owner(self, role: Role | str | None) -> bool:
        if role is None:
            return False
        name = role if isinstance(role, str) else role.name
        return name == self.owner_role_name

    def outranks_or_ties(self, role: Role | None, other: Role | None) -> bool:
        """Check whether ``role`` is at least as privileged as ``other``.

        Unranked roles (and missing roles) tie with each other at the bottom.

        :param role: The role being compared
        :param other: The role compared against
        :return: True if ``role`` outranks or ties ``other``
        """
        rank = self.rank_of(role)
        other_rank = self.rank_of(other)
        if other_rank is None:
            return True
        if rank is None:
            return False
        return rank <= other_rank
