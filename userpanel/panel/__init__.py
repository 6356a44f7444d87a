"""User administration panel: cache, visibility, mutations and confirmation."""

from .cache import (
    DuplicateUserError,
    UserCache,
    fold_deletion,
    fold_role_binding,
)
from .confirmation import DeletionFlow, FlowState, NothingStagedError
from .coordinator import InvalidMutationError, MutationCoordinator, MutationResult
from .models import PanelStatus, PanelView
from .panel import LoadError, PanelNotReadyError, UserPanel
from .registry import PanelEntry, PanelRegistry
from .routes import configure_panel_router
from .visibility import (
    ActionMenu,
    build_action_menu,
    is_action_menu_visible,
    offerable_role_targets,
)

__all__ = [
    "ActionMenu",
    "DeletionFlow",
    "DuplicateUserError",
    "FlowState",
    "InvalidMutationError",
    "LoadError",
    "MutationCoordinator",
    "MutationResult",
    "NothingStagedError",
    "PanelEntry",
    "PanelNotReadyError",
    "PanelRegistry",
    "PanelStatus",
    "PanelView",
    "UserCache",
    "UserPanel",
    "build_action_menu",
    "configure_panel_router",
    "fold_deletion",
    "fold_role_binding",
    "is_action_menu_visible",
    "offerable_role_targets",
]
