import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .base import VersionSource
from ..config import HTTP_TIMEOUT, USER_AGENT
from ..errors import MissingDataError, TransportError
from ..utils.state import WatchedItem

LOG = logging.getLogger("patchwatch")

# --------------------------------------------------------------------
# Page Selector Source
# --------------------------------------------------------------------
class PageSelectorSource(VersionSource):
    """Scrape a patch label from an HTML page: text of the first selector match."""

    name = "page"

    def __init__(self, timeout: float = HTTP_TIMEOUT):
        self.timeout = timeout

    def fetch_version(self, item: WatchedItem) -> str:
        if not item.identifier or not item.selector:
            raise MissingDataError(f"{item.name}: page source needs both url and selector")
        LOG.info("Polling HTML page: %s", item.identifier)
        try:
            r = requests.get(item.identifier, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"failed to fetch {item.identifier}: {e}") from e

        soup = BeautifulSoup(r.text, "lxml")
        el = soup.select_one(item.selector)
        if el is None:
            raise MissingDataError(f"selector {item.selector!r} did not return results on {item.identifier}")
        text = " ".join(el.get_text(" ", strip=True).split())
        if not text:
            raise MissingDataError(f"selector {item.selector!r} matched an empty element on {item.identifier}")
        return text

    def patch_notes_url(self, item: WatchedItem) -> Optional[str]:
        return item.identifier or None
