"""Common data models and utilities for the application."""

from .user import (
    OWNER_ROLE_NAME,
    Permission,
    Profile,
    Role,
    RoleHierarchy,
    User,
)

__all__ = [
    "OWNER_ROLE_NAME",
    "Permission",
    "Profile",
    "Role",
    "RoleHierarchy",
    "User",
]
