"""FastAPI dependency validators for authentication."""

import logging
from dataclasses import dataclass

from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .permissions import Actor
from .session_manager import SessionManager


bearer_scheme = HTTPBearer(auto_error=True)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """A verified actor together with the token it was verified from.

    The token is forwarded to the remote user service.
    """

    actor: Actor
    token: str


class Validate:
    """Holds validator dependencies for FastAPI authentication."""

    def __init__(self, session_manager: SessionManager) -> None:
        """Create a new validator instance.

        :param session_manager: JWT session manager
        """
        self.session_manager = session_manager

    def session(
        self,
        credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),  # noqa: B008
    ) -> Session:
        """Validate the bearer token using the injected SessionManager."""
        token = credentials.credentials
        actor = self.session_manager.verify_token(token)

        if not actor:
            LOGGER.debug("Session validation failed")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        LOGGER.debug("Session validated for user: %s", actor.id)
        return Session(actor=actor, token=token)
