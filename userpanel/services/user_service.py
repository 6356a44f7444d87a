"""Contract of the remote service that owns tenant users and roles."""

from typing import Protocol

from userpanel.common import Role, User


class RemoteServiceError(Exception):
    """Raised by a user service when a remote call fails.

    :param message: Human-readable reason, shown to the actor as is
    :param status_code: HTTP status of the failed response, if any
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class UserService(Protocol):
    """Remote collaborator fetching and mutating users and roles.

    Every method raises RemoteServiceError on failure.
    """

    async def fetch_users(self) -> list[User]: ...

    async def fetch_roles(self) -> list[Role]: ...

    async def bind_role(self, role_name: str, user_id: str) -> None: ...

    async def delete_user(self, user_id: str) -> None: ...
