#!/usr/bin/env python3
"""
Claude Code statusline.

Reads the session JSON Claude Code writes to stdin, renders the enabled
widgets and prints the result. Registered as the ``statusLine`` command in
~/.claude/settings.json (see install_statusline.py).

Never disrupts the host: malformed input or any internal failure prints
nothing and still exits 0. Set DEBUG_STATUSLINE=true (or debug.log_errors in
the config) to log diagnostics to the error log file.

Usage:
    statusline.py [--config PATH] [--state-file PATH] < session.json
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from hud.cache import TTLCache  # noqa: E402
from hud.config import StatuslineConfig, load_config  # noqa: E402
from hud.layout import LayoutEngine  # noqa: E402
from hud.logs import configure_logging, debug_enabled, default_log_path  # noqa: E402
from hud.snapshot import RenderSnapshot  # noqa: E402

CLEANUP_TTL_SECONDS = 3600

logger = logging.getLogger("statusline")


def with_state_file(config: StatuslineConfig, state_file: Path | None) -> StatuslineConfig:
    """Point the subagents widget at a different state file."""
    if state_file is None:
        return config
    widgets = dict(config.widgets)
    widgets["subagents"] = {**widgets.get("subagents", {}), "state_file": str(state_file)}
    return dataclasses.replace(config, widgets=widgets)


def cleanup_cache_once(cache: TTLCache, session_id: str) -> bool:
    """Clear the cache once per session. Returns True if it was cleared."""
    marker = f"cleanup-{session_id}"
    if cache.get(marker):
        return False
    cache.clear()
    cache.set(marker, True, CLEANUP_TTL_SECONDS)
    return True


def render_statusline(
    raw: str,
    config: StatuslineConfig,
    cache: TTLCache | None = None,
) -> str:
    """Render the statusline for one stdin document. Returns "" on bad input."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.debug("Ignoring malformed statusline input: %s", e)
        return ""
    if not isinstance(data, dict):
        return ""

    snapshot = RenderSnapshot.from_dict(data)

    if cache is None:
        cache = TTLCache(config.cache.directory)
        cache.initialize()

    if config.cache.cleanup_on_start:
        cleanup_cache_once(cache, snapshot.session_id)

    engine = LayoutEngine(config, cache)

    if config.debug.measure_performance:
        report = engine.measure_performance(snapshot)
        logger.info(report.format())

    return engine.render(snapshot)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Claude Code statusline")
    parser.add_argument("--config", type=Path, help="Config override file")
    parser.add_argument("--state-file", type=Path, help="Subagent state file")
    args, _ = parser.parse_known_args(argv)

    configure_logging(default_log_path())

    try:
        config = with_state_file(load_config(args.config), args.state_file)
        if config.debug.log_errors and not debug_enabled():
            configure_logging(Path(config.debug.error_log_path))
        output = render_statusline(sys.stdin.read(), config)
    except Exception:
        logger.exception("Statusline render failed")
        output = ""

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
