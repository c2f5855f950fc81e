#!/usr/bin/env python3
"""
SubagentStop hook.

Reads the hook event from stdin and removes the finished agent from the
shared subagent state file. Always exits 0.

Usage:
    subagent_stop.py [--state-file PATH] < event.json
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
from subagent_state import pick_field, remove_agent  # noqa: E402

logger = logging.getLogger(__name__)


def handle_event(raw: str, state_file: Path | None = None) -> str | None:
    """Apply one stop event. Returns the removed agent id, if any."""
    if not raw.strip():
        return None

    event = json.loads(raw)
    if not isinstance(event, dict):
        return None

    agent_id = pick_field(event, "agent_id")
    if not agent_id:
        return None

    remove_agent(agent_id, state_file)
    return agent_id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SubagentStop hook")
    parser.add_argument("--state-file", type=Path, help="Subagent state file")
    args, _ = parser.parse_known_args(argv)
    configure_logging(default_log_path())

    try:
        handle_event(sys.stdin.read(), args.state_file)
    except Exception:
        logger.debug("SubagentStop hook failed", exc_info=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
