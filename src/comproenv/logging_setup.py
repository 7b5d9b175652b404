# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_FILE = "comproenv.log"


class _ConsoleFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - comproenv logs pass at the handler level
    - Python warnings (captured as 'py.warnings') only at ERROR+
    - any third-party logger only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "comproenv" or record.name.startswith("comproenv."):
            return True
        return record.levelno >= logging.ERROR


def console_level_from_env() -> int:
    """COMPROENV_DEBUG=1 turns on debug output on the console."""
    if os.environ.get("COMPROENV_DEBUG") == "1":
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: warnings only unless debugging, filtered
    - File handler: full logs in <log_dir>/comproenv.log

    Call this once, before the shell is created.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFilter())
    root.addHandler(ch)

    log_dir = Path(log_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / LOG_FILE), encoding="utf-8")
    except OSError as e:
        root.warning("File logging disabled: %s", e)
    else:
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
