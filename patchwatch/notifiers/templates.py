"""
Notification text for patchwatch.


Public API:
- render_change_title(event: ChangeEvent) -> str
- render_change_message(event: ChangeEvent) -> str
- render_disabled_message(max_failures: int) -> str
"""
from __future__ import annotations

from ..watchers.base import ChangeEvent

DISABLED_TITLE = "patchwatch disabled"


def render_change_title(e: ChangeEvent) -> str:
    return e.name.strip() or e.identifier


def render_change_message(e: ChangeEvent) -> str:
    """Body of a change notification; the patch notes link travels as the URL."""
    who = e.name.strip() or e.identifier
    return f"A new version ({e.new_version}) is available for {who}."


def render_disabled_message(max_failures: int) -> str:
    return (
        f"Too many consecutive errors ({max_failures}) occurred while checking for new "
        "client versions, and the service has been shut down. "
        "Correct the configuration and turn the service back on."
    )
