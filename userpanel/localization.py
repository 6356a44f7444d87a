"""Deterministic string lookup for panel labels and messages."""

import logging
from collections.abc import Mapping

LOGGER = logging.getLogger(__name__)

DEFAULT_CATALOG: dict[str, str] = {
    "action.user.role.binding": "Bind role {role}",
    "action.member.delete": "Delete member",
    "action.cancel": "Cancel",
    "action.delete": "Delete",
    "confirm.delete.member": "Are you sure you want to delete this member?",
    "notify.role.binding.success": "Success role binding",
    "notify.user.delete.success": "Success delete user",
    "tag.me": "me",
}


class Localizer:
    """Looks up message templates and interpolates ``{param}`` placeholders.

    Unknown keys resolve to the key itself so missing translations stay visible.

    :param catalog: Overrides merged on top of the built-in English catalog
    """

    def __init__(self, catalog: Mapping[str, str] | None = None) -> None:
        self.catalog = {**DEFAULT_CATALOG, **(catalog or {})}

    def translate(self, key: str, **params: object) -> str:
        template = self.catalog.get(key)
        if template is None:
            LOGGER.debug("Missing translation for key: %s", key)
            return key
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            LOGGER.debug("Missing parameters for key %s: %s", key, params)
            return template
