# patchwatch/watchers/blizztrack.py
# BlizzTrack version source: reads the published client version label for a
# game id from the BlizzTrack JSON API.

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from .base import VersionSource
from ..config import BLIZZTRACK_API, BLIZZTRACK_NOTES, HTTP_TIMEOUT, REGION, USER_AGENT
from ..errors import MissingDataError, TransportError
from ..utils.state import WatchedItem

LOG = logging.getLogger("patchwatch")


class BlizzTrackSource(VersionSource):
    """
    Looks up `versionsname` for one region in the BlizzTrack "vers" document:

        {"name": "...", "code": "pro", "regions": [
            {"region": "us", "versionsname": "1.2.3.45678", ...}, ...]}

    Region codes are matched case-insensitively; the API has served both
    "us" and "US" over time.
    """

    name = "blizztrack"

    def __init__(self, region: str = REGION, timeout: float = HTTP_TIMEOUT,
                 api_url: str = BLIZZTRACK_API, notes_url: str = BLIZZTRACK_NOTES):
        self.region = region.strip().lower()
        self.timeout = timeout
        self.api_url = api_url
        self.notes_url = notes_url

    def _get_document(self, game_id: str) -> Dict[str, Any]:
        url = self.api_url.format(id=game_id)
        try:
            r = requests.get(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                             timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            raise TransportError(f"BlizzTrack request failed for {game_id}: {e}") from e
        except ValueError as e:
            raise TransportError(f"BlizzTrack returned invalid JSON for {game_id}: {e}") from e
        if not isinstance(data, dict):
            raise MissingDataError(f"BlizzTrack document for {game_id} is not an object")
        return data

    def fetch_version(self, item: WatchedItem) -> str:
        if not item.identifier:
            raise MissingDataError(f"{item.name}: no BlizzTrack id configured")
        data = self._get_document(item.identifier)
        for region in data.get("regions") or []:
            if not isinstance(region, dict):
                continue
            if str(region.get("region", "")).strip().lower() != self.region:
                continue
            label = str(region.get("versionsname") or "").strip()
            if not label:
                raise MissingDataError(f"{item.identifier}: empty version for region {self.region!r}")
            LOG.debug("BlizzTrack %s region %s -> %s", item.identifier, self.region, label)
            return label
        raise MissingDataError(f"{item.identifier}: region {self.region!r} not present")

    def patch_notes_url(self, item: WatchedItem) -> Optional[str]:
        return self.notes_url.format(id=item.identifier)
