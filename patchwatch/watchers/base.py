from dataclasses import dataclass
from typing import Optional

from ..utils.state import WatchedItem


@dataclass(frozen=True)
class ChangeEvent:
    name: str
    identifier: str
    old_version: str
    new_version: str
    url: Optional[str]


class VersionSource:
    name: str = "base"

    def fetch_version(self, item: WatchedItem) -> str:
        raise NotImplementedError

    def patch_notes_url(self, item: WatchedItem) -> Optional[str]:
        return None
