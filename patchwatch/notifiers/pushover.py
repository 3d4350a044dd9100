import logging
from typing import Optional

import requests

from ..config import HTTP_TIMEOUT, PUSHOVER_URL
from ..errors import TransportError
from ..utils.state import NotificationTarget

LOG = logging.getLogger("patchwatch")


class PushoverNotifier:
    """Send messages through the Pushover messages API."""

    def __init__(self, target: NotificationTarget, timeout: float = HTTP_TIMEOUT, url: str = PUSHOVER_URL):
        self.target = target
        self.timeout = timeout
        self.url = url

    def send(self, message: str, url: Optional[str] = None, title: Optional[str] = None) -> None:
        """
        POST one message. Raises TransportError on missing credentials, network
        errors, HTTP errors or a reply whose status is not 1.
        """
        if not self.target.app_token or not self.target.user_token:
            raise TransportError("Pushover app/user token missing; cannot send notification")

        data = {
            "token": self.target.app_token,
            "user": self.target.user_token,
            "message": message,
        }
        if self.target.device:
            data["device"] = self.target.device
        if title:
            data["title"] = title
        if url:
            data["url"] = url

        try:
            r = requests.post(self.url, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Pushover request failed: {e}") from e

        try:
            reply = r.json()
        except ValueError:
            reply = {}
        if not isinstance(reply, dict):
            reply = {}
        if r.status_code >= 400 or reply.get("status") != 1:
            errors = reply.get("errors") or [r.reason or "unknown error"]
            raise TransportError(f"Pushover rejected message ({r.status_code}): {'; '.join(map(str, errors))}")
        LOG.info("Pushover notification sent (request %s)", reply.get("request", "?"))
