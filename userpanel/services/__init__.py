"""Remote collaborators for users and roles."""

from .http_service import HttpUserService
from .user_service import RemoteServiceError, UserService

__all__ = ["HttpUserService", "RemoteServiceError", "UserService"]
