# patchwatch/main.py
# Orchestrator: load state → check versions → notify → persist state

from __future__ import annotations
import sys
import time
from typing import Optional

from . import config
from .errors import StateError
from .notifiers.dispatch import NotificationDispatcher
from .notifiers.pushover import PushoverNotifier
from .utils.log import get_logger
from .utils.state import StateStore
from .watcher import RunResult, VersionWatcher

logger = get_logger("patchwatch")


def run_once(
    store: StateStore,
    watcher: VersionWatcher,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> Optional[RunResult]:
    """Perform one check. Returns None when the state could not be loaded."""
    start = time.monotonic()
    try:
        state = store.load()
    except StateError as e:
        logger.error("Cannot load state: %s", e)
        return None

    if dispatcher is None:
        dispatcher = NotificationDispatcher(PushoverNotifier(state.target))

    result = watcher.run(state)
    if result.skipped:
        logger.info("Service completed, service off, completed in %.2fs", time.monotonic() - start)
        return result

    for event in result.changes:
        dispatcher.notify_change(event)

    if result.disabled:
        dispatcher.notify_disabled(state.max_failures)
    elif result.errored:
        logger.warning(
            "The service has failed %d times consecutively. It will be turned off after %d consecutive failures",
            state.failure_count, state.max_failures,
        )

    if result.should_persist:
        try:
            store.save(state)
        except OSError:
            logger.exception("Failed to persist state to %s", store.path)

    logger.info(
        "Service completed, %s, completed in %.2fs",
        f"{len(result.changes)} change(s) found" if result.changes else "no changes found",
        time.monotonic() - start,
    )
    return result


def main() -> int:
    store = StateStore(config.STATE_FILE)
    watcher = VersionWatcher(max_workers=config.MAX_WORKERS)
    result = run_once(store, watcher)
    return 1 if result is None else 0


if __name__ == "__main__":
    sys.exit(main())
