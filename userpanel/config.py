"""Configuration management for the user panel application.

This module provides utilities for loading and validating configuration
from environment variables.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from jwt.algorithms import get_default_algorithms

from userpanel.auth import SessionManager
from userpanel.common import OWNER_ROLE_NAME

LOGGER = logging.getLogger(__name__)

_MINUTES_IN_DAY = 60 * 24
_DEFAULT_API_TIMEOUT_SECONDS = 10
_DEFAULT_ROLE_RANKS = "owner:0,admin:1,member:2"


@dataclass
class AppConfig:
    """Holds application configuration loaded from environment variables."""

    api_base_url: str
    api_timeout: int
    logging_level: str | None
    root_path: str

    use_nickname: bool
    owner_role_name: str
    role_ranks: dict[str, int]

    secret_key: str
    algorithm: str
    access_token_expire_minutes: int

    def __post_init__(self) -> None:
        """Initialize derived configuration attributes."""
        self.session_manager = SessionManager(
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            expire_minutes=self.access_token_expire_minutes,
        )


def configure_logging(app_config: AppConfig) -> None:
    """Configure logging based on the application configuration.

    :param app_config: The application configuration instance
    """
    if not app_config.logging_level:
        logging.basicConfig(level=logging.INFO)
        return

    numeric_level = getattr(logging, app_config.logging_level.upper(), None)
    if not isinstance(numeric_level, int):
        LOGGER.warning("Invalid log level: %s, using INFO", app_config.logging_level)
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level)


def parse_role_ranks(value: str) -> dict[str, int]:
    """Parse a rank table such as ``owner:0,admin:1,member:2``.

    :param value: Comma separated ``name:rank`` pairs
    :return: Mapping of role name to rank
    :raises ValueError: If a pair is malformed or a rank is not a number
    """
    ranks: dict[str, int] = {}
    for pair in value.split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, rank = pair.rpartition(":")
        name = name.strip()
        rank = rank.strip()
        if not sep or not name or not rank.isnumeric():
            msg = f"Invalid role rank entry: {pair}"
            raise ValueError(msg)
        ranks[name] = int(rank)
    return ranks


def get_env_str(
    var_name: str,
    default: str | None,
    value_checker: Callable[[str], bool] | None = None,
) -> str:
    """Get an environment variable as a string with optional constraints.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :param value_checker: Optional function to validate the value
    :return: The environment variable value
    :raises ValueError: If the value does not meet the constraints
    """
    value = os.getenv(var_name, default)
    if value is None:
        msg = f"Environment variable {var_name} is required"
        raise ValueError(msg)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_int(
    var_name: str,
    default: int,
    value_checker: Callable[[int], bool] | None = None,
) -> int:
    """Get an environment variable as an integer with optional constraints.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :param value_checker: Optional function to validate the value
    :return: The environment variable value as an integer
    :raises ValueError: If the value does not meet the constraints or is not an integer
    """
    value_str = os.getenv(var_name)
    if value_str is None or value_str == "":
        return default

    if not value_str.isnumeric():
        msg = f"Environment variable {var_name} must be an integer, got: {value_str}"
        raise ValueError(msg)

    value = int(value_str)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_bool(var_name: str, *, default: bool) -> bool:
    """Get an environment variable as a flag, ``1``/``true``/``yes`` meaning True.

    :param var_name: Name of the environment variable
    :param default: Value used when the variable is unset or empty
    :return: The flag value
    """
    value_str = os.getenv(var_name)
    if value_str is None or value_str == "":
        return default
    return value_str.strip().lower() in {"1", "true", "yes"}


def load_config_from_env(env_file: str | Path | None) -> AppConfig:
    """Load application configuration from environment variables.

    :param env_file: Optional .env file loaded before reading the environment
    :return: An AppConfig instance populated with environment variable values
    """
    if env_file:
        load_dotenv(dotenv_path=env_file)

    return AppConfig(
        api_base_url=get_env_str(
            "API_BASE_URL",
            None,
            lambda url: url.startswith(("http://", "https://")),
        ),
        api_timeout=get_env_int(
            "API_TIMEOUT",
            _DEFAULT_API_TIMEOUT_SECONDS,
            lambda timeout: timeout > 0,
        ),
        logging_level=get_env_str("LOGGING_LEVEL", "INFO"),
        root_path=get_env_str("ROOT_PATH", ""),
        use_nickname=get_env_bool("USE_NICKNAME", default=False),
        owner_role_name=get_env_str(
            "OWNER_ROLE_NAME",
            OWNER_ROLE_NAME,
            lambda name: bool(name.strip()),
        ),
        role_ranks=parse_role_ranks(get_env_str("ROLE_RANKS", _DEFAULT_ROLE_RANKS)),
        secret_key=get_env_str("SECRET_KEY", os.urandom(32).hex()),
        algorithm=get_env_str(
            "ALGORITHM",
            SessionManager.DEFAULT_JWT_ALGORITHM,
            lambda algorithm: algorithm in get_default_algorithms(),
        ),
        access_token_expire_minutes=get_env_int(
            "ACCESS_TOKEN_EXPIRE_MINUTES",
            _MINUTES_IN_DAY,
            lambda minutes: minutes > 0,
        ),
    )
