from typing import Dict, Optional

from .base import VersionSource
from .blizztrack import BlizzTrackSource
from .page_watcher import PageSelectorSource
from ..errors import ConfigError
from ..utils.state import BLIZZTRACK, PAGE, WatchedItem


class SourceRegistry:
    """Maps WatchedItem.source to a VersionSource instance."""

    def __init__(self, sources: Optional[Dict[str, VersionSource]] = None):
        if sources is None:
            sources = {BLIZZTRACK: BlizzTrackSource(), PAGE: PageSelectorSource()}
        self._sources = dict(sources)

    def source_for(self, item: WatchedItem) -> VersionSource:
        try:
            return self._sources[item.source]
        except KeyError:
            raise ConfigError(f"{item.name}: unknown source {item.source!r}") from None
