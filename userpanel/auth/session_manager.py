"""JWT session handling.

Turns the bearer token issued by the tenant's auth service into an Actor.
"""

import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from userpanel.common import Permission, Profile, Role, User

from .permissions import Actor, PermissionEvaluator

LOGGER = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access_token"  # noqa: S105


@dataclass
class SessionManager:
    """Issue and verify session tokens.

    :param str secret_key: Secret key for JWT signing (generated if not provided)
    :param str algorithm: JWT signing algorithm
    :param int expire_minutes: Token expiration time in minutes
    """

    DEFAULT_JWT_ALGORITHM = "HS512"
    DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24
    MINIMUM_JWT_SECRET_KEY_LENGTH = 32

    secret_key: str | None = None
    algorithm: str = DEFAULT_JWT_ALGORITHM
    expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES

    def __post_init__(self) -> None:
        """Generate secret key if not provided."""
        if (
            self.secret_key is None
            or len(self.secret_key) < self.MINIMUM_JWT_SECRET_KEY_LENGTH
        ):
            LOGGER.warning("No usable SECRET_KEY given, generating a random one")
            self.secret_key = os.urandom(64).hex()

    def create_access_token(self, actor: Actor) -> str:
        """Create a new JWT access token carrying the actor's snapshot.

        :param actor: The actor for whom to create the token
        :return: A JWT access token as a string
        """
        now = datetime.now(UTC)
        user = actor.user
        payload = {
            "sub": user.id,
            "email": user.email,
            "role": user.role.name if user.role else None,
            "nickname": user.profile.nickname if user.profile else None,
            "permissions": sorted(p.value for p in actor.permissions.granted),
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iat": now,
            "type": ACCESS_TOKEN_TYPE,
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Actor | None:
        """Verify and decode a JWT token, returning the actor.

        :param token: The JWT token string to verify
        :return: The Actor if the token is valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except jwt.ExpiredSignatureError:
            LOGGER.debug("Rejected expired token")
            return None
        except jwt.InvalidTokenError:
            LOGGER.debug("Rejected invalid token")
            return None

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if user_id is None or email is None:
            return None

        role_name = payload.get("role")
        nickname = payload.get("nickname")
        user = User(
            id=str(user_id),
            email=email,
            profile=Profile(nickname=nickname) if nickname else None,
            role=Role(name=role_name) if role_name else None,
        )

        names = payload.get("permissions") or []
        unknown = [name for name in names if Permission.parse(name) is None]
        if unknown:
            LOGGER.debug("Dropping unknown permissions %s for %s", unknown, user_id)

        return Actor(user=user, permissions=PermissionEvaluator.from_names(names))
