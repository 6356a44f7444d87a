"""The user administration panel of one actor.

Ties together the cache, the visibility rules, the mutation coordinator and
the delete confirmation flow, and projects them into render-ready views.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from userpanel.common import OWNER_ROLE_NAME, RoleHierarchy
from userpanel.localization import Localizer
from userpanel.services import RemoteServiceError

from .cache import DuplicateUserError, UserCache
from .confirmation import DeletionFlow
from .coordinator import InvalidMutationError, MutationCoordinator, MutationResult
from .models import (
    ActionMenuView,
    ConfirmationView,
    PanelStatus,
    PanelView,
    RoleOptionView,
    UserRowView,
)
from .visibility import ActionMenu, build_action_menu

if TYPE_CHECKING:
    from userpanel.auth import Actor
    from userpanel.common import User
    from userpanel.notifications import Notifier
    from userpanel.services import UserService

LOGGER = logging.getLogger(__name__)


class LoadError(Exception):
    """The users or roles could not be fetched. No partial data is kept."""


class PanelNotReadyError(RuntimeError):
    """Raised when an action is requested before the panel has loaded."""


class UserPanel:
    """Lists tenant users and lets the actor rebind roles or delete users.

    :param actor: The current actor snapshot
    :param service: Remote user service
    :param notifier: Receives mutation notifications
    :param localizer: String lookup, English catalog by default
    :param ranks: Configured rank table, merged with ranks of fetched roles
    :param owner_role_name: Name of the reserved owner role
    :param use_nickname: Show nicknames instead of emails when available
    """

    def __init__(
        self,
        actor: "Actor",
        service: "UserService",
        notifier: "Notifier",
        localizer: Localizer | None = None,
        ranks: Mapping[str, int] | None = None,
        owner_role_name: str = OWNER_ROLE_NAME,
        *,
        use_nickname: bool = False,
    ) -> None:
        self.actor = actor
        self.service = service
        self.localizer = localizer or Localizer()
        self.use_nickname = use_nickname
        self._ranks = dict(ranks or {})
        self._owner_role_name = owner_role_name

        self.cache = UserCache()
        self.hierarchy = RoleHierarchy(self._ranks, owner_role_name)
        self.coordinator = MutationCoordinator(
            service,
            self.cache,
            self.hierarchy,
            notifier,
            self.localizer,
        )
        self.deletion = DeletionFlow(self.coordinator)

        self.status = PanelStatus.LOADING
        self.error: LoadError | None = None
        self._load_lock = asyncio.Lock()

    async def load(self) -> None:
        """Fetch users and roles, replacing whatever the panel held.

        Failures put the panel into the error state; they are not notified.
        If either fetch fails the other one is cancelled.
        """
        async with self._load_lock:
            await self._load()

    async def ensure_loaded(self) -> None:
        """Load the panel unless it has loaded before.

        Waits for a load already in progress instead of starting another.
        """
        async with self._load_lock:
            if self.status is PanelStatus.LOADING:
                await self._load()

    def _fail(self, error: Exception) -> None:
        LOGGER.warning("Loading panel for %s failed: %s", self.actor.id, error)
        self.cache.clear()
        self.deletion.cancel()
        self.error = LoadError(str(error))
        self.status = PanelStatus.ERROR

    async def _load(self) -> None:
        self.status = PanelStatus.LOADING
        self.error = None

        failure: RemoteServiceError | None = None
        try:
            async with asyncio.TaskGroup() as tg:
                users_task = tg.create_task(self.service.fetch_users())
                roles_task = tg.create_task(self.service.fetch_roles())
        except* RemoteServiceError as eg:
            failure = eg.exceptions[0]
        if failure is not None:
            self._fail(failure)
            return

        users, roles = users_task.result(), roles_task.result()
        try:
            self.cache.load(users, roles)
        except DuplicateUserError as e:
            self._fail(e)
            return

        self.hierarchy = RoleHierarchy.from_roles(
            roles,
            self._ranks,
            self._owner_role_name,
        )
        self.coordinator.hierarchy = self.hierarchy

        staged = self.deletion.staged
        if staged is not None and self.cache.find(staged.id) is None:
            self.deletion.cancel()

        self.status = PanelStatus.READY
        LOGGER.info("Panel loaded for %s with %s users", self.actor.id, len(users))

    @property
    def ready(self) -> bool:
        return self.status is PanelStatus.READY

    def _require_ready(self) -> None:
        if not self.ready:
            msg = f"Panel is {self.status.value}"
            raise PanelNotReadyError(msg)

    def _require_user(self, user_id: str) -> "User":
        user = self.cache.find(user_id)
        if user is None:
            msg = f"User {user_id} is not in the panel"
            raise InvalidMutationError(msg)
        return user

    def action_menu(self, user: "User") -> ActionMenu:
        return build_action_menu(self.actor, user, self.cache.roles, self.hierarchy)

    async def request_role_binding(self, role_name: str, user_id: str) -> MutationResult:
        """Bind ``role_name`` to ``user_id`` if the row's menu offers it.

        :raises PanelNotReadyError: If the panel has not loaded
        :raises InvalidMutationError: If the user is unknown or the role not offered
        """
        self._require_ready()
        user = self._require_user(user_id)
        if role_name not in self.action_menu(user).role_options:
            msg = f"Role {role_name} is not offered for user {user_id}"
            raise InvalidMutationError(msg)
        return await self.coordinator.bind_role(role_name, user_id)

    def request_delete(self, user_id: str) -> ConfirmationView:
        """Stage ``user_id`` for deletion if the row's menu offers it.

        :raises PanelNotReadyError: If the panel has not loaded
        :raises InvalidMutationError: If the user is unknown or deletion not offered
        """
        self._require_ready()
        user = self._require_user(user_id)
        if not self.action_menu(user).can_delete:
            msg = f"Deleting user {user_id} is not offered"
            raise InvalidMutationError(msg)
        self.deletion.request_delete(user)
        return self.confirmation_view()

    async def confirm_delete(self) -> MutationResult:
        self._require_ready()
        return await self.deletion.confirm()

    def cancel_delete(self) -> ConfirmationView:
        self.deletion.cancel()
        return self.confirmation_view()

    def confirmation_view(self) -> ConfirmationView:
        staged = self.deletion.staged
        if staged is None:
            return ConfirmationView()

        t = self.localizer.translate
        return ConfirmationView(
            open=True,
            user_id=staged.id,
            title=t("confirm.delete.member"),
            body=staged.email,
            cancel_label=t("action.cancel"),
            confirm_label=t("action.delete"),
        )

    def _row_view(self, user: "User") -> UserRowView:
        t = self.localizer.translate
        is_me = user.id == self.actor.id
        menu = self.action_menu(user)

        menu_view = None
        if not menu.is_empty:
            menu_view = ActionMenuView(
                role_options=[
                    RoleOptionView(
                        role=role,
                        label=t("action.user.role.binding", role=role),
                    )
                    for role in menu.role_options
                ],
                delete_label=t("action.member.delete") if menu.can_delete else None,
            )

        return UserRowView(
            id=user.id,
            email=user.email,
            display_name=user.display_name(self.use_nickname),
            avatar_url=user.profile.avatar_url if user.profile else None,
            role=user.role.name if user.role else None,
            is_me=is_me,
            me_label=t("tag.me") if is_me else None,
            menu=menu_view,
        )

    def view(self) -> PanelView:
        """Project the current state for rendering."""
        if self.status is PanelStatus.ERROR:
            return PanelView(status=self.status, error=str(self.error))
        if self.status is PanelStatus.LOADING:
            return PanelView(status=self.status)

        return PanelView(
            status=self.status,
            users=[self._row_view(user) for user in self.cache.users],
            confirmation=self.confirmation_view(),
        )
