"""Actor snapshot and capability checks."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from userpanel.common import Permission, User


@dataclass(frozen=True)
class PermissionEvaluator:
    """Answers whether a capability is held by an actor.

    :param granted: The capabilities granted to the actor
    """

    granted: frozenset[Permission] = field(default_factory=frozenset)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "PermissionEvaluator":
        """Build an evaluator from raw permission names, ignoring unknown ones."""
        parsed = (Permission.parse(name) for name in names)
        return cls(frozenset(p for p in parsed if p is not None))

    def has_permission(self, capability: Permission | str) -> bool:
        """Check whether ``capability`` is in the granted set.

        :param capability: A Permission member or its name
        :return: True if held, False otherwise (including unknown names)
        """
        if isinstance(capability, str):
            parsed = Permission.parse(capability)
            if parsed is None:
                return False
            capability = parsed
        return capability in self.granted


@dataclass(frozen=True)
class Actor:
    """The currently authenticated user and what they may do."""

    user: User
    permissions: PermissionEvaluator = field(default_factory=PermissionEvaluator)

    @property
    def id(self) -> str:
        return self.user.id

    def has_permission(self, capability: Permission | str) -> bool:
        return self.permissions.has_permission(capability)
