"""Render-ready views of the panel state."""

from enum import Enum

from pydantic import BaseModel


class PanelStatus(Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


class RoleOptionView(BaseModel):
    """One role-binding entry of an action menu.

    :param role: Role name to bind
    :param label: Localized label
    """

    role: str
    label: str


class ActionMenuView(BaseModel):
    role_options: list[RoleOptionView] = []
    delete_label: str | None = None


class UserRowView(BaseModel):
    """One user of the list as the UI renders it."""

    id: str
    email: str
    display_name: str
    avatar_url: str | None = None
    role: str | None = None
    is_me: bool = False
    me_label: str | None = None
    menu: ActionMenuView | None = None


class ConfirmationView(BaseModel):
    """State of the delete confirmation modal.

    Texts are only set while a user is staged.
    """

    open: bool = False
    user_id: str | None = None
    title: str | None = None
    body: str | None = None
    cancel_label: str | None = None
    confirm_label: str | None = None


class PanelView(BaseModel):
    status: PanelStatus
    error: str | None = None
    users: list[UserRowView] = []
    confirmation: ConfirmationView = ConfirmationView()


class MutationResponse(BaseModel):
    """Result of a mutation request.

    A failure has already been delivered as a notification.
    """

    success: bool
    user_id: str
    message: str | None = None


class NotificationView(BaseModel):
    kind: str
    message: str
    icon: str
