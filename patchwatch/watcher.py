# patchwatch/watcher.py
# One watcher run: query every item's source in parallel, compare against the
# stored versions, then apply the run-level failure accounting and the
# circuit breaker.

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import MAX_WORKERS
from .errors import MissingDataError
from .watchers.base import ChangeEvent
from .watchers.registry import SourceRegistry
from .utils.state import WatchedItem, WatcherState

LOG = logging.getLogger("patchwatch")

CHANGED = "changed"
UNCHANGED = "unchanged"
ERROR = "error"


@dataclass
class ItemResult:
    item: WatchedItem
    status: str
    version: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass
class RunResult:
    skipped: bool = False
    items: List[ItemResult] = field(default_factory=list)
    changes: List[ChangeEvent] = field(default_factory=list)
    errored: bool = False
    counter_reset: bool = False
    disabled: bool = False

    @property
    def should_persist(self) -> bool:
        return bool(self.changes) or self.errored or self.counter_reset or self.disabled


class VersionWatcher:
    def __init__(self, registry: Optional[SourceRegistry] = None, max_workers: int = MAX_WORKERS):
        self.registry = registry or SourceRegistry()
        self.max_workers = max(1, max_workers)

    def _query(self, item: WatchedItem) -> Tuple[Optional[str], Optional[str], Optional[BaseException]]:
        """Return (version, patch notes url, error) for one item; never raises."""
        try:
            source = self.registry.source_for(item)
            version = source.fetch_version(item)
            if not version or not version.strip():
                raise MissingDataError(f"{item.name}: source returned an empty version")
            return version, source.patch_notes_url(item), None
        except Exception as e:
            return None, None, e

    def _query_all(self, items: List[WatchedItem]):
        if not items:
            return []
        workers = min(self.max_workers, len(items))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="patchwatch") as pool:
            futures = [pool.submit(self._query, it) for it in items]
            # fan-in: every query finishes before anything touches the state
            return [f.result() for f in futures]

    def run(self, state: WatcherState) -> RunResult:
        if not state.enabled:
            LOG.info("Service is off; skipping version checks.")
            return RunResult(skipped=True)

        result = RunResult()
        for item, (version, url, err) in zip(state.items, self._query_all(state.items)):
            if err is not None:
                LOG.error("Version check failed for %s (%s): %s", item.name, item.identifier, err)
                result.errored = True
                result.items.append(ItemResult(item, ERROR, error=err))
                continue
            if version == item.version:
                LOG.info("No change for %s (%s)", item.name, version)
                result.items.append(ItemResult(item, UNCHANGED, version=version))
                continue
            LOG.info("New version (%s) detected for %s, was %r", version, item.name, item.version)
            result.changes.append(ChangeEvent(
                name=item.name,
                identifier=item.identifier,
                old_version=item.version,
                new_version=version,
                url=url,
            ))
            item.version = version
            result.items.append(ItemResult(item, CHANGED, version=version))

        if result.errored:
            state.failure_count += 1
        elif state.failure_count > 0:
            state.failure_count = 0
            result.counter_reset = True
            LOG.info("Consecutive failure count reset to 0 after checking all items successfully")

        if state.max_failures > 0 and state.failure_count >= state.max_failures:
            state.enabled = False
            state.failure_count = 0
            result.disabled = True
            LOG.warning("Service has been turned off after %d consecutive failed runs", state.max_failures)

        return result
