"""
Diagnostic logging shared by the statusline and the subagent hooks.

Both run inside Claude Code and must never write to stderr, so logging is
silent unless DEBUG_STATUSLINE=true routes it to the error log file.
"""

import logging
import os
from pathlib import Path

DEFAULT_ERROR_LOG = Path("/tmp/statusline-error.log")


def debug_enabled() -> bool:
    return os.environ.get("DEBUG_STATUSLINE") == "true"


def default_log_path() -> Path | None:
    """The error log when debugging is switched on, else None."""
    return DEFAULT_ERROR_LOG if debug_enabled() else None


def configure_logging(log_path: Path | None) -> None:
    """Send diagnostics to ``log_path``; with no path, keep logging silent."""
    if log_path is None:
        root = logging.getLogger()
        if not root.handlers:
            root.addHandler(logging.NullHandler())
        return

    try:
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logging.basicConfig(level=logging.DEBUG, handlers=[handler], force=True)
