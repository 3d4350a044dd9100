# patchwatch/utils/log.py
# Logging setup used across patchwatch.
# Provides get_logger(name) that configures the root logger once with an
# append-mode rotating log file. Console output only with LOG_TO_CONSOLE=true.

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_INITIALIZED = False


def _init_root() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    lvl = getattr(logging, level, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger()
    root.setLevel(lvl)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    log_dir = Path(os.getenv("LOG_DIR", "."))
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = RotatingFileHandler(
        log_dir / os.getenv("LOG_FILE", "patchwatch.log"),
        mode="a",
        maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
        backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        encoding="utf-8",
    )
    fh.setLevel(lvl)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    if os.getenv("LOG_TO_CONSOLE", "false").lower() == "true":
        ch = logging.StreamHandler()
        ch.setLevel(lvl)
        ch.setFormatter(fmt)
        root.addHandler(ch)

    _INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with consistent formatting/level.

    Usage:
        from .utils.log import get_logger
        logger = get_logger("patchwatch")
    """
    _init_root()
    return logging.getLogger(name)
