#!/usr/bin/env python3
"""
Subagent State Store

Shared JSON document listing the subagents that are currently running.
Written by the SubagentStart/SubagentStop hooks, read by the statusline's
subagents widget.

Writes go to a temp file in the same directory and are renamed over the
state file, so readers never see a half-written document. Read-modify-write
updates are serialized across processes with an advisory lock on a sibling
``.lock`` file.

Usage:
    subagent_state.py show                Print the current state as JSON
    subagent_state.py remove <agent_id>   Drop a stale entry
    subagent_state.py clear               Forget every active entry
"""

import fcntl
import json
import logging
import os
import sys
import tempfile
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterator

from jsonschema import ValidationError, validate

from hud import timeutil

STATE_FILE = Path("/tmp/claude-subagent-state.json")

STATE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["active"],
    "properties": {
        "active": {"type": "array"},
        "last_updated": {"type": "number"},
    },
}

# Scalar types accepted from hook events; anything else is treated as absent
FIELD_TYPES = (str, int, float)

# Accepted spellings per field, tried in order; the first non-empty value wins
FIELD_ALIASES = {
    "agent_id": ("agent_id", "agentId"),
    "agent_type": ("agent_type", "agentType", "type"),
    "model": ("model", "model_id"),
    "transcript_path": ("transcript_path", "transcriptPath"),
    "session_id": ("session_id", "sessionId"),
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubagentEntry:
    """One running subagent."""

    agent_id: str
    agent_type: str
    model: str
    started_at: int
    session_id: str
    transcript_path: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def empty_state() -> dict:
    return {"active": [], "last_updated": 0}


def _resolve(state_file: Path | str | None) -> Path:
    return Path(state_file) if state_file is not None else STATE_FILE


def pick_field(event: dict, field: str) -> str | None:
    """Return the first non-empty value among a field's accepted aliases."""
    for alias in FIELD_ALIASES[field]:
        value = event.get(alias)
        if isinstance(value, bool) or not isinstance(value, FIELD_TYPES) or value == "":
            continue
        return str(value)
    return None


def is_valid_entry(entry: object) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get("agent_id"), str)


def entry_from_event(event: dict, started_at: int | None = None) -> SubagentEntry:
    """Normalize a SubagentStart hook payload into an entry."""
    now = started_at if started_at is not None else timeutil.now_ms()
    return SubagentEntry(
        agent_id=pick_field(event, "agent_id") or f"unknown-{now}",
        agent_type=pick_field(event, "agent_type") or "unknown",
        model=pick_field(event, "model") or "unknown",
        started_at=now,
        session_id=pick_field(event, "session_id") or "unknown",
        transcript_path=pick_field(event, "transcript_path"),
    )


def read_state(state_file: Path | str | None = None) -> dict:
    """Load state, or an empty state if missing, unreadable or malformed.

    Individual entries without a string ``agent_id`` are dropped; the rest
    of the document is kept.
    """
    path = _resolve(state_file)
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        return empty_state()

    try:
        validate(instance=data, schema=STATE_SCHEMA)
    except ValidationError as e:
        logger.debug("Ignoring malformed state file %s: %s", path, e.message)
        return empty_state()

    active = [a for a in data["active"] if is_valid_entry(a)]
    if len(active) != len(data["active"]):
        logger.debug("Dropped %d malformed entries from %s", len(data["active"]) - len(active), path)
    data["active"] = active
    data.setdefault("last_updated", 0)
    return data


def write_state(state: dict, state_file: Path | str | None = None) -> None:
    """Stamp ``last_updated`` and atomically replace the state file."""
    path = _resolve(state_file)
    state["last_updated"] = timeutil.now_ms()
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            json.dump(state, f, indent=2)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError):
        if tmp_name:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        raise


@contextmanager
def _locked(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock for a read-modify-write cycle."""
    lock_path = path.with_name(path.name + ".lock")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(lock_path, "a")
    except OSError as e:
        logger.debug("Proceeding without state lock: %s", e)
        lock_file = None

    if lock_file is None:
        yield
        return

    with lock_file:
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


def add_agent(entry: SubagentEntry | dict, state_file: Path | str | None = None) -> None:
    """Record a running agent, replacing any entry with the same id."""
    record = entry.to_dict() if isinstance(entry, SubagentEntry) else dict(entry)
    path = _resolve(state_file)
    with _locked(path):
        state = read_state(path)
        state["active"] = [a for a in state["active"] if a.get("agent_id") != record["agent_id"]]
        state["active"].append(record)
        write_state(state, path)


def remove_agent(agent_id: str, state_file: Path | str | None = None) -> None:
    """Drop an agent by id. Unknown ids are ignored."""
    path = _resolve(state_file)
    with _locked(path):
        state = read_state(path)
        remaining = [a for a in state["active"] if a.get("agent_id") != agent_id]
        if len(remaining) == len(state["active"]):
            return
        state["active"] = remaining
        write_state(state, path)


def main() -> int:
    if len(sys.argv) < 2:
        print(__doc__)
        return 1

    cmd = sys.argv[1]

    if cmd == "show":
        print(json.dumps(read_state(), indent=2))
        return 0

    if cmd == "remove":
        if len(sys.argv) < 3:
            print("Usage: subagent_state.py remove <agent_id>")
            return 1
        remove_agent(sys.argv[2])
        print(f"Removed {sys.argv[2]}")
        return 0

    if cmd == "clear":
        write_state(empty_state())
        print("Cleared active subagents")
        return 0

    print(f"Unknown command: {cmd}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
