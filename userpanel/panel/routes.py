"""Panel routes for the FastAPI application.

Exposes the panel projection and the role-binding and delete callbacks to the
surrounding UI.
"""

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, status

from userpanel.auth import Session

from .confirmation import NothingStagedError
from .coordinator import InvalidMutationError, MutationResult
from .models import (
    ConfirmationView,
    MutationResponse,
    NotificationView,
    PanelView,
)
from .panel import PanelNotReadyError

if TYPE_CHECKING:
    from userpanel.auth import Validate

    from .panel import UserPanel
    from .registry import PanelRegistry

LOGGER = logging.getLogger(__name__)


def _to_response(result: MutationResult) -> MutationResponse:
    return MutationResponse(
        success=result.ok,
        user_id=result.user_id,
        message=result.error,
    )


async def _ready_panel(panel: "UserPanel") -> "UserPanel":
    """Load a panel that has never been loaded, reject one in error."""
    await panel.ensure_loaded()
    if not panel.ready:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(panel.error) if panel.error else "Panel is not ready",
        )
    return panel


async def _bind_role(
    panel: "UserPanel",
    user_id: str,
    role_name: str,
) -> MutationResponse:
    await _ready_panel(panel)
    try:
        result = await panel.request_role_binding(role_name, user_id)
    except InvalidMutationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(result)


async def _request_delete(panel: "UserPanel", user_id: str) -> ConfirmationView:
    await _ready_panel(panel)
    try:
        return panel.request_delete(user_id)
    except InvalidMutationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def _confirm_delete(panel: "UserPanel") -> MutationResponse:
    await _ready_panel(panel)
    try:
        result = await panel.confirm_delete()
    except NothingStagedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (InvalidMutationError, PanelNotReadyError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(result)


def configure_panel_router(
    router: APIRouter,
    registry: "PanelRegistry",
    validate: "Validate",
) -> APIRouter:
    """Configure the panel router.

    :param router: The APIRouter to configure
    :param registry: Holds the panel of each actor
    :param validate: Session validator dependencies
    :return: The configured APIRouter
    """

    @router.get("", response_model=PanelView)
    async def get_panel(
        session: Annotated[Session, Depends(validate.session)],
        reload: bool = False,  # noqa: FBT001, FBT002
    ) -> PanelView:
        panel = registry.get(session).panel
        if reload:
            await panel.load()
        else:
            await panel.ensure_loaded()
        return panel.view()

    @router.put("/users/{user_id}/role", response_model=MutationResponse)
    async def bind_role_route(
        user_id: str,
        role_name: Annotated[str, Form()],
        session: Annotated[Session, Depends(validate.session)],
    ) -> MutationResponse:
        return await _bind_role(registry.get(session).panel, user_id, role_name)

    @router.post("/users/{user_id}/delete", response_model=ConfirmationView)
    async def request_delete_route(
        user_id: str,
        session: Annotated[Session, Depends(validate.session)],
    ) -> ConfirmationView:
        return await _request_delete(registry.get(session).panel, user_id)

    @router.post("/delete/confirm", response_model=MutationResponse)
    async def confirm_delete_route(
        session: Annotated[Session, Depends(validate.session)],
    ) -> MutationResponse:
        return await _confirm_delete(registry.get(session).panel)

    @router.post("/delete/cancel", response_model=ConfirmationView)
    def cancel_delete_route(
        session: Annotated[Session, Depends(validate.session)],
    ) -> ConfirmationView:
        return registry.get(session).panel.cancel_delete()

    @router.get("/notifications", response_model=list[NotificationView])
    def notifications_route(
        session: Annotated[Session, Depends(validate.session)],
    ) -> list[NotificationView]:
        notifications = registry.get(session).notifications.drain()
        return [
            NotificationView(kind=n.kind.value, message=n.message, icon=n.icon)
            for n in notifications
        ]

    return router
