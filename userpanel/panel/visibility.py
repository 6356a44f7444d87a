"""Which actions the panel offers an actor for a given target user.

These checks only decide what the UI exposes. The remote service is
expected to validate every mutation on its own.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from userpanel.auth import Actor
from userpanel.common import Permission, Role, RoleHierarchy, User


@dataclass(frozen=True)
class ActionMenu:
    """Actions available on one row of the panel.

    :param role_options: Role names the target may be bound to, in display order
    :param can_delete: Whether the delete action is offered
    """

    role_options: list[str] = field(default_factory=list)
    can_delete: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.role_options and not self.can_delete


def is_action_menu_visible(
    actor: Actor | None,
    target: User | None,
    hierarchy: RoleHierarchy,
) -> bool:
    """Decide whether any action on ``target`` should be exposed to ``actor``.

    :param actor: The current actor, None while the session is loading
    :param target: The user of the row, None while loading
    :param hierarchy: Rank table used to compare roles
    :return: True if the action menu should be shown
    """
    if actor is None or target is None:
        return False

    if target.id == actor.id:
        return False

    if hierarchy.outranks_or_ties(target.role, actor.user.role):
        return False

    return actor.has_permission(Permission.DELETE_USER) or actor.has_permission(
        Permission.MANAGE_ROLE,
    )


def offerable_role_targets(
    actor: Actor,
    target: User,
    roles: Iterable[Role],
    hierarchy: RoleHierarchy,
) -> list[str]:
    """List the role names ``target`` may be bound to by ``actor``.

    The owner role comes first and only for actors holding MANAGE_ALL. Other
    roles follow for actors holding MANAGE_ROLE. The target's current role is
    never offered.

    :param actor: The current actor
    :param target: The user to rebind
    :param roles: Every known role, in fetched order
    :param hierarchy: Provides the owner role name
    :return: Role names in display order
    """
    current = target.role.name if target.role else None
    owner = hierarchy.owner_role_name
    options = []

    if actor.has_permission(Permission.MANAGE_ALL) and current != owner:
        options.append(owner)

    if actor.has_permission(Permission.MANAGE_ROLE):
        options.extend(
            role.name
            for role in roles
            if role.name != owner and role.name != current
        )

    return options


def build_action_menu(
    actor: Actor | None,
    target: User,
    roles: Iterable[Role],
    hierarchy: RoleHierarchy,
) -> ActionMenu:
    """Build the action menu of one row, empty when it should not be shown."""
    if not is_action_menu_visible(actor, target, hierarchy):
        return ActionMenu()

    return ActionMenu(
        role_options=offerable_role_targets(actor, target, roles, hierarchy),
        can_delete=actor.has_permission(Permission.DELETE_USER),
    )
