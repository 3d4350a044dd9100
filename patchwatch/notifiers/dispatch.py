# patchwatch/notifiers/dispatch.py
# Formats and sends change / disablement notifications. Delivery failures are
# logged and handed back to the caller; they never abort the run.

from __future__ import annotations
import logging
from typing import Optional

from .pushover import PushoverNotifier
from .templates import (
    DISABLED_TITLE,
    render_change_message,
    render_change_title,
    render_disabled_message,
)
from ..config import DRY_RUN
from ..watchers.base import ChangeEvent

LOG = logging.getLogger("patchwatch")


class NotificationDispatcher:
    def __init__(self, notifier: PushoverNotifier, dry_run: bool = DRY_RUN):
        self.notifier = notifier
        self.dry_run = dry_run

    def notify(self, message: str, url: Optional[str] = None, title: Optional[str] = None) -> Optional[Exception]:
        if self.dry_run:
            LOG.info("[DRY RUN] Would notify: %s | %s | %s", title or "", message, url or "")
            return None
        try:
            self.notifier.send(message, url=url, title=title)
        except Exception as e:
            LOG.error("Notification failed (%s): %s", title or message[:40], e)
            return e
        return None

    def notify_change(self, event: ChangeEvent) -> Optional[Exception]:
        return self.notify(render_change_message(event), url=event.url, title=render_change_title(event))

    def notify_disabled(self, max_failures: int) -> Optional[Exception]:
        return self.notify(render_disabled_message(max_failures), title=DISABLED_TITLE)
