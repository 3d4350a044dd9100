# patchwatch/utils/state.py
# Watcher state (watched items, circuit breaker, Pushover target) with atomic
# JSON persistence.

from __future__ import annotations
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from ..errors import StateNotFoundError, StateParseError

LOG = logging.getLogger("patchwatch")

BLIZZTRACK = "blizztrack"
PAGE = "page"

_KNOWN_KEYS = {
    "serviceOn",
    "failureCount",
    "maxFailures",
    "pushoverAppToken",
    "pushoverUserToken",
    "pushoverDevice",
    "gameClients",
}


@dataclass
class WatchedItem:
    name: str
    identifier: str
    version: str = ""
    source: str = BLIZZTRACK
    selector: str = ""
    # "source" was spelled out in the loaded entry
    explicit_source: bool = False
    # unknown per-item keys, written back untouched
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WatchedItem":
        source = _str(d, "source", "") or BLIZZTRACK
        id_key = "url" if source == PAGE else "blizztrackId"
        known = {"name", "version", "source", "selector", id_key}
        return cls(
            name=_str(d, "name", ""),
            identifier=_str(d, id_key, ""),
            version=_str(d, "version", ""),
            source=source,
            selector=_str(d, "selector", ""),
            explicit_source=d.get("source") is not None,
            extra={k: v for k, v in d.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.source == PAGE:
            out: Dict[str, Any] = {
                "name": self.name,
                "source": PAGE,
                "url": self.identifier,
                "selector": self.selector,
                "version": self.version,
            }
        else:
            out = {"name": self.name, "blizztrackId": self.identifier}
            if self.explicit_source or self.source != BLIZZTRACK:
                out["source"] = self.source
            if self.selector:
                out["selector"] = self.selector
            out["version"] = self.version
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class NotificationTarget:
    app_token: str = ""
    user_token: str = ""
    device: str = ""


@dataclass
class WatcherState:
    enabled: bool = True
    failure_count: int = 0
    max_failures: int = 3
    target: NotificationTarget = field(default_factory=NotificationTarget)
    items: List[WatchedItem] = field(default_factory=list)
    # unknown top-level keys, written back untouched
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WatcherState":
        clients = d.get("gameClients")
        if clients is None:
            clients = []
        if not isinstance(clients, list) or not all(isinstance(c, dict) for c in clients):
            raise ValueError("gameClients must be a list of objects")
        return cls(
            enabled=_bool(d, "serviceOn", True),
            failure_count=_int(d, "failureCount", 0),
            max_failures=_int(d, "maxFailures", 3),
            target=NotificationTarget(
                app_token=_str(d, "pushoverAppToken", ""),
                user_token=_str(d, "pushoverUserToken", ""),
                device=_str(d, "pushoverDevice", ""),
            ),
            items=[WatchedItem.from_dict(c) for c in clients],
            extra={k: v for k, v in d.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "serviceOn": self.enabled,
            "failureCount": self.failure_count,
            "maxFailures": self.max_failures,
            "pushoverAppToken": self.target.app_token,
            "pushoverUserToken": self.target.user_token,
            "pushoverDevice": self.target.device,
            "gameClients": [it.to_dict() for it in self.items],
        }
        out.update(self.extra)
        return out


class StateStore:
    """Loads and saves a WatcherState as a JSON document.

    Saves go through a temp file in the target directory followed by a rename,
    so a crash mid-write leaves the previous document in place.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> WatcherState:
        try:
            raw_bytes = self._path.read_bytes()
        except FileNotFoundError:
            raise StateNotFoundError(self._path, "state file not found") from None
        try:
            raw = raw_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StateParseError(self._path, f"not UTF-8 text ({e})") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StateParseError(self._path, f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise StateParseError(self._path, "expected a JSON object at top level")
        try:
            state = WatcherState.from_dict(data)
        except (TypeError, ValueError) as e:
            raise StateParseError(self._path, str(e)) from e
        LOG.debug("Loaded state from %s (%d items)", self._path, len(state.items))
        return state

    def save(self, state: WatcherState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        with tempfile.NamedTemporaryFile(
            "w", dir=str(self._path.parent), prefix=self._path.name + ".", suffix=".tmp",
            delete=False, encoding="utf-8",
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                tmp.write(data + "\n")
            except BaseException:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            # NamedTemporaryFile is 0600; keep the mode of the file being replaced
            if self._path.exists():
                os.chmod(tmp_path, stat.S_IMODE(self._path.stat().st_mode))
            tmp_path.replace(self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        LOG.debug("Saved state to %s", self._path)


# ----------------------- field helpers -----------------------

def _str(d: Dict[str, Any], key: str, default: str) -> str:
    v = d.get(key, default)
    if v is None:
        return default
    if not isinstance(v, str):
        raise ValueError(f"{key} must be a string, got {type(v).__name__}")
    return v


def _int(d: Dict[str, Any], key: str, default: int) -> int:
    v = d.get(key, default)
    if v is None:
        return default
    # bool is an int subclass; reject it here
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{key} must be an integer, got {type(v).__name__}")
    return v


def _bool(d: Dict[str, Any], key: str, default: bool) -> bool:
    v = d.get(key, default)
    if v is None:
        return default
    if not isinstance(v, bool):
        raise ValueError(f"{key} must be a boolean, got {type(v).__name__}")
    return v
