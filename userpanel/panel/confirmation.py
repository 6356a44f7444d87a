"""Two-step confirmation in front of the irreversible delete mutation.

States are ``IDLE`` (nothing staged) and ``STAGED`` (one user awaiting the
actor's decision). There is a single staging slot: staging a user while
another one is staged replaces it.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .coordinator import MutationResult

if TYPE_CHECKING:
    from userpanel.common import User

    from .coordinator import MutationCoordinator

LOGGER = logging.getLogger(__name__)


class FlowState(Enum):
    IDLE = "idle"
    STAGED = "staged"


class NothingStagedError(RuntimeError):
    """Raised when confirming while no user is staged."""


class DeletionFlow:
    """Stages a user for deletion and deletes it once confirmed.

    :param coordinator: Runs the delete mutation on confirmation
    """

    def __init__(self, coordinator: "MutationCoordinator") -> None:
        self.coordinator = coordinator
        self._staged: User | None = None

    @property
    def state(self) -> FlowState:
        return FlowState.IDLE if self._staged is None else FlowState.STAGED

    @property
    def staged(self) -> "User | None":
        return self._staged

    def request_delete(self, user: "User") -> None:
        """Stage ``user``, replacing any user staged before."""
        if self._staged is not None and self._staged.id != user.id:
            LOGGER.debug("Replacing staged user %s with %s", self._staged.id, user.id)
        self._staged = user

    def cancel(self) -> None:
        """Discard the staged user without contacting the remote service."""
        self._staged = None

    async def confirm(self) -> MutationResult:
        """Delete the staged user.

        On success the flow returns to idle, unless another user was staged
        while the call was in flight. On failure the user stays staged so the
        actor may retry or cancel.

        :return: The outcome of the delete mutation
        :raises NothingStagedError: If no user is staged
        """
        user = self._staged
        if user is None:
            msg = "No user is staged for deletion"
            raise NothingStagedError(msg)

        result = await self.coordinator.delete_user(user.id)

        if result.ok and self._staged is not None and self._staged.id == user.id:
            self._staged = None

        return result
