"""
Transcript token counter.

Sums ``input_tokens + output_tokens`` across a subagent's JSONL transcript.
The transcript grows for as long as the agent runs, so results are memoized
in the TTL cache together with the file's mtime and size; an unchanged file
is never re-read.
"""

import hashlib
import json
import math
from pathlib import Path

from hud.cache import TTLCache

DEFAULT_TOKEN_CACHE_TTL = 3

# Transcript records carry usage at different depths depending on the event
USAGE_PATHS = (
    ("usage",),
    ("message", "usage"),
    ("response", "usage"),
)


def token_cache_key(transcript_path: str) -> str:
    """Cache key for a transcript path (stable, filename-safe)."""
    digest = hashlib.sha256(str(transcript_path).encode()).hexdigest()[:16]
    return f"jsonl-tokens-{digest}"


def _find_usage(record: dict) -> dict | None:
    for path in USAGE_PATHS:
        node = record
        for part in path:
            if not isinstance(node, dict):
                node = None
                break
            node = node.get(part)
        if node is not None:
            return node if isinstance(node, dict) else None
    return None


def _as_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def count_tokens(content: str) -> int:
    """Sum token usage over every parseable line of a JSONL document."""
    total = 0
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(record, dict):
            continue

        usage = _find_usage(record)
        if usage:
            total += _as_count(usage.get("input_tokens")) + _as_count(usage.get("output_tokens"))
    return total


def get_tokens(
    transcript_path: str,
    cache: TTLCache,
    ttl_seconds: float = DEFAULT_TOKEN_CACHE_TTL,
) -> int | None:
    """
    Total tokens consumed so far by the transcript at ``transcript_path``.

    Args:
        transcript_path: Path to a subagent's JSONL transcript
        cache: Shared TTL cache
        ttl_seconds: How long a parse result may be reused

    Returns:
        Token total, or None if the file does not exist or cannot be read
    """
    path = Path(transcript_path).expanduser()
    try:
        stat = path.stat()
    except OSError:
        return None

    mtime = stat.st_mtime_ns
    size = stat.st_size
    cache_key = token_cache_key(transcript_path)

    cached = cache.get(cache_key)
    if (
        isinstance(cached, dict)
        and cached.get("mtime") == mtime
        and cached.get("size") == size
        and isinstance(cached.get("tokens"), int)
    ):
        return cached["tokens"]

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

    tokens = count_tokens(content)
    cache.set(cache_key, {"tokens": tokens, "mtime": mtime, "size": size}, ttl_seconds)
    return tokens


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_token_count(tokens: int) -> str:
    """Format a token count: 999 -> "999", 1000 -> "1.0K", 12500 -> "13K", 10_000_000 -> "10M"."""
    if tokens >= 1_000_000:
        millions = tokens / 1_000_000
        return f"{_round_half_up(millions)}M" if millions >= 10 else f"{millions:.1f}M"
    if tokens >= 1_000:
        thousands = tokens / 1_000
        return f"{_round_half_up(thousands)}K" if thousands >= 10 else f"{thousands:.1f}K"
    return str(int(tokens))
