#!/usr/bin/env python3
"""
SubagentStart hook.

Reads the hook event from stdin and records the agent in the shared
subagent state file. Always exits 0 so a broken state file can never
block an agent from starting.

Usage:
    subagent_start.py [--state-file PATH] < event.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from hud.logs import configure_logging, default_log_path  # noqa: E402
from subagent_state import add_agent, entry_from_event  # noqa: E402

logger = logging.getLogger(__name__)


def handle_event(raw: str, state_file: Path | None = None) -> bool:
    """Apply one start event. Returns True if an agent was recorded."""
    if not raw.strip():
        return False

    event = json.loads(raw)
    if not isinstance(event, dict):
        return False

    add_agent(entry_from_event(event), state_file)
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SubagentStart hook")
    parser.add_argument("--state-file", type=Path, help="Subagent state file")
    args, _ = parser.parse_known_args(argv)
    configure_logging(default_log_path())

    try:
        handle_event(sys.stdin.read(), args.state_file)
    except Exception:
        logger.debug("SubagentStart hook failed", exc_info=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
