"""Logging configuration for the API process."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - all taskboard logs pass
    - uvicorn startup/shutdown messages pass at INFO
    - other third-party loggers and captured warnings only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "taskboard" or name.startswith("taskboard."):
            return True

        if name in ("uvicorn", "uvicorn.error"):
            return record.levelno >= logging.INFO

        return record.levelno >= logging.WARNING


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, "_taskboard", False)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    force: bool = False,
) -> bool:
    """
    Configure the root logger with:
    - a filtered console handler at ``level``
    - an optional file handler that keeps everything

    Runs once per process: later calls are no-ops unless ``force`` is set,
    in which case the handlers installed here are replaced. Handlers added
    by anything else are left alone. Returns True when handlers were
    installed.
    """
    root = logging.getLogger()
    installed = [h for h in root.handlers if _is_ours(h)]
    if installed and not force:
        return False

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root.setLevel(logging.DEBUG)

    for h in installed:
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    ch._taskboard = True
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh._taskboard = True
        root.addHandler(fh)

    logging.captureWarnings(True)
    return True
