"""Shared fixtures for the patchwatch test suite.

The log file location is pinned to a throwaway directory before any patchwatch
module is imported, since patchwatch.main configures logging at import time.
"""

import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="patchwatch-logs-"))
os.environ.setdefault("DRY_RUN", "false")

import threading
from typing import Dict, List, Union

import pytest

from patchwatch.errors import TransportError
from patchwatch.utils.state import NotificationTarget, WatchedItem, WatcherState
from patchwatch.watchers.base import VersionSource
from patchwatch.watchers.registry import SourceRegistry


class FakeSource(VersionSource):
    """Answers from a dict; exception values are raised."""

    name = "fake"

    def __init__(self, answers: Dict[str, Union[str, Exception]]):
        self.answers = answers
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch_version(self, item: WatchedItem) -> str:
        with self._lock:
            self.calls.append(item.identifier)
        ans = self.answers[item.identifier]
        if isinstance(ans, Exception):
            raise ans
        return ans

    def patch_notes_url(self, item: WatchedItem) -> str:
        return f"https://notes.example/{item.identifier}"


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[dict] = []

    def send(self, message, url=None, title=None):
        self.sent.append({"message": message, "url": url, "title": title})
        if self.fail:
            raise TransportError("pushover down")


@pytest.fixture
def make_state():
    def _make(*items, enabled=True, failure_count=0, max_failures=3):
        return WatcherState(
            enabled=enabled,
            failure_count=failure_count,
            max_failures=max_failures,
            target=NotificationTarget("app", "user", "phone"),
            items=[WatchedItem(name=n, identifier=i, version=v) for n, i, v in items],
        )
    return _make


@pytest.fixture
def fake_registry():
    def _make(answers):
        src = FakeSource(answers)
        return src, SourceRegistry({"blizztrack": src})
    return _make


@pytest.fixture
def recording_notifier():
    return RecordingNotifier
