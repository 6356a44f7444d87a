"""User administration panel package."""

from .app import configure_fastapi_app, create_app
from .config import AppConfig, load_config_from_env
from .panel import UserPanel

__all__ = [
    "AppConfig",
    "UserPanel",
    "configure_fastapi_app",
    "create_app",
    "load_config_from_env",
]
