"""HTTP implementation of the user service on top of httpx.

The remote API is expected to expose:

- ``GET /users`` returning a JSON list of users
- ``GET /roles`` returning a JSON list of roles
- ``PUT /users/{id}/role`` with body ``{"roleName": ...}``
- ``DELETE /users/{id}``
"""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from userpanel.common import Role, User

from .user_service import RemoteServiceError

LOGGER = logging.getLogger(__name__)

_USERS = TypeAdapter(list[User])
_ROLES = TypeAdapter(list[Role])


def _error_message(response: httpx.Response) -> str:
    """Extract the most useful message from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if isinstance(body.get(key), str):
                return body[key]

    text = response.text.strip()
    return text or f"Request failed with status {response.status_code}"


class HttpUserService:
    """User service calling the tenant API with the actor's credentials.

    The underlying client is shared between actors and owned by the caller;
    retries, if any, are configured on its transport.

    :param client: Client with ``base_url`` pointing at the tenant API
    :param token: Bearer token forwarded on every request
    """

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self.client = client
        self.token = token

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(
        self,
        method: str,
        url: str,
        json: dict | None = None,
    ) -> httpx.Response:
        try:
            response = await self.client.request(
                method,
                url,
                json=json,
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            LOGGER.warning("%s %s failed: %s", method, url, e)
            raise RemoteServiceError(f"Could not reach user service: {e}") from e

        if response.is_error:
            message = _error_message(response)
            LOGGER.info(
                "%s %s returned %s: %s",
                method,
                url,
                response.status_code,
                message,
            )
            raise RemoteServiceError(message, status_code=response.status_code)

        return response

    async def fetch_users(self) -> list[User]:
        response = await self._request("GET", "/users")
        try:
            return _USERS.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteServiceError(f"Malformed user list: {e}") from e

    async def fetch_roles(self) -> list[Role]:
        response = await self._request("GET", "/roles")
        try:
            return _ROLES.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteServiceError(f"Malformed role list: {e}") from e

    async def bind_role(self, role_name: str, user_id: str) -> None:
        await self._request("PUT", f"/users/{user_id}/role", json={"roleName": role_name})

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")
