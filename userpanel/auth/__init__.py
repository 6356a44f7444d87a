"""Actor identity, capability checks and session validation."""

from .permissions import Actor, PermissionEvaluator
from .session_manager import SessionManager
from .validation import Session, Validate

__all__ = [
    "Actor",
    "PermissionEvaluator",
    "Session",
    "SessionManager",
    "Validate",
]
