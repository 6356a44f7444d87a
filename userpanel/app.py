"""FastAPI application factory for the user administration panel."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from userpanel.auth import Session, Validate
from userpanel.localization import Localizer
from userpanel.notifications import NotificationCenter
from userpanel.panel import (
    PanelEntry,
    PanelRegistry,
    UserPanel,
    configure_panel_router,
)
from userpanel.services import HttpUserService

from .config import configure_logging, load_config_from_env

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from .config import AppConfig

LOGGER = logging.getLogger(__name__)


def configure_fastapi_app(
    config: AppConfig,
    client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Configure and return the FastAPI application.

    :param config: Application configuration
    :param client: Client for the tenant API, created from the config if omitted
    :return: Configured FastAPI application
    """
    localizer = Localizer()
    validate = Validate(config.session_manager)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[Any, Any]:
        """Application lifespan manager.

        Owns the HTTP client shared by every actor's panel.
        """
        LOGGER.info("User panel API is starting")

        async with client or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.api_timeout,
        ) as api_client:

            def create_panel(session: Session) -> PanelEntry:
                notifications = NotificationCenter()
                service = HttpUserService(api_client, session.token)
                panel = UserPanel(
                    session.actor,
                    service,
                    notifications,
                    localizer,
                    config.role_ranks,
                    config.owner_role_name,
                    use_nickname=config.use_nickname,
                )
                return PanelEntry(panel, notifications, service)

            panel_router = configure_panel_router(
                APIRouter(),
                PanelRegistry(create_panel),
                validate,
            )
            app.include_router(panel_router, prefix="/panel", tags=["panel"])

            yield

            LOGGER.info("User panel API is shutting down")

    app = FastAPI(
        title="User Panel API",
        version="0.0.1",
        lifespan=lifespan,
        root_path=config.root_path,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root() -> str:
        return "User Panel API"

    return app


def create_app(env_file: str | None = os.environ.get("ENV_FILE", ".env")) -> FastAPI:
    """Create and configure the FastAPI application.

    The default here is for uvicorn command line usage, in which case the user
    should set ENV_FILE environment variable if they want a different file.

    :param env_file: Optional path to the environment configuration file
    :return: Configured FastAPI application
    """
    config = load_config_from_env(env_file)
    configure_logging(config)
    return configure_fastapi_app(config)
