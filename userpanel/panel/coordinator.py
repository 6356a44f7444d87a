"""Runs role-binding and delete mutations and folds their results into the cache.

A failed remote call leaves the cache as it was and produces exactly one
failure notification. Nothing is retried here.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from userpanel.notifications import NotificationKind
from userpanel.services import RemoteServiceError

from .cache import fold_deletion, fold_role_binding

if TYPE_CHECKING:
    from userpanel.common import RoleHierarchy
    from userpanel.localization import Localizer
    from userpanel.notifications import Notifier
    from userpanel.services import UserService

    from .cache import UserCache

LOGGER = logging.getLogger(__name__)


class InvalidMutationError(ValueError):
    """Raised before any remote call when a mutation references unknown data."""


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a mutation.

    :param user_id: The targeted user
    :param error: The remote error message, None on success
    """

    user_id: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MutationCoordinator:
    """Executes mutations against the remote service for one cache.

    :param service: Remote user service
    :param cache: The cache results are folded into
    :param hierarchy: Provides the owner role name
    :param notifier: Receives one notification per settled mutation
    :param localizer: Builds notification messages
    """

    def __init__(
        self,
        service: "UserService",
        cache: "UserCache",
        hierarchy: "RoleHierarchy",
        notifier: "Notifier",
        localizer: "Localizer",
    ) -> None:
        self.service = service
        self.cache = cache
        self.hierarchy = hierarchy
        self.notifier = notifier
        self.localizer = localizer

    def _require_user(self, user_id: str) -> None:
        if self.cache.find(user_id) is None:
            msg = f"User {user_id} is not in the panel"
            raise InvalidMutationError(msg)

    def _fail(self, user_id: str, error: RemoteServiceError) -> MutationResult:
        self.notifier.notify(NotificationKind.FAILURE, str(error))
        return MutationResult(user_id, error=str(error))

    async def bind_role(self, role_name: str, user_id: str) -> MutationResult:
        """Bind ``role_name`` to ``user_id`` remotely, then in the cache.

        :param role_name: A known role or the owner role
        :param user_id: A user currently in the cache
        :return: The outcome, carrying the remote message on failure
        :raises InvalidMutationError: If the user or role is unknown
        """
        self._require_user(user_id)
        if not (
            self.hierarchy.is_owner(role_name) or self.cache.has_role(role_name)
        ):
            msg = f"Unknown role: {role_name}"
            raise InvalidMutationError(msg)

        LOGGER.debug("Binding role %s to user %s", role_name, user_id)
        try:
            await self.service.bind_role(role_name, user_id)
        except RemoteServiceError as e:
            LOGGER.info("Role binding for %s failed: %s", user_id, e)
            return self._fail(user_id, e)

        self.cache.apply(fold_role_binding, user_id, role_name)
        self.notifier.notify(
            NotificationKind.SUCCESS,
            self.localizer.translate("notify.role.binding.success"),
        )
        return MutationResult(user_id)

    async def delete_user(self, user_id: str) -> MutationResult:
        """Delete ``user_id`` remotely, then drop it from the cache.

        :param user_id: A user currently in the cache
        :return: The outcome, carrying the remote message on failure
        :raises InvalidMutationError: If the user is unknown
        """
        self._require_user(user_id)

        LOGGER.debug("Deleting user %s", user_id)
        try:
            await self.service.delete_user(user_id)
        except RemoteServiceError as e:
            LOGGER.info("Deleting %s failed: %s", user_id, e)
            return self._fail(user_id, e)

        self.cache.apply(fold_deletion, user_id)
        self.notifier.notify(
            NotificationKind.SUCCESS,
            self.localizer.translate("notify.user.delete.success"),
        )
        return MutationResult(user_id)
