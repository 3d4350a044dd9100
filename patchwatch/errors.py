# patchwatch/errors.py
# Error taxonomy shared by sources, notifiers and the state store.

from __future__ import annotations


class PatchWatchError(Exception):
    """Base class for every error raised by patchwatch."""


class TransportError(PatchWatchError):
    """Network/HTTP failure talking to a version source or the notifier."""


class MissingDataError(PatchWatchError):
    """The source answered but the expected version label was absent or empty."""


class ConfigError(PatchWatchError):
    """A watched item is configured in a way no source can handle."""


class StateError(PatchWatchError):
    def __init__(self, path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class StateNotFoundError(StateError):
    pass


class StateParseError(StateError):
    pass
