"""Clock and duration helpers shared by the cache, the state store and widgets."""

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def format_duration(ms: float) -> str:
    """Format milliseconds as a compact human duration.

    5000 -> "5s", 65000 -> "1m 5s", 3665000 -> "1h 1m", 90000000 -> "1d 1h".
    """
    seconds = max(0, int(ms // 1000))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        remaining_hours = hours % 24
        return f"{days}d {remaining_hours}h" if remaining_hours else f"{days}d"
    if hours > 0:
        remaining_minutes = minutes % 60
        return f"{hours}h {remaining_minutes}m" if remaining_minutes else f"{hours}h"
    if minutes > 0:
        remaining_seconds = seconds % 60
        return f"{minutes}m {remaining_seconds}s" if remaining_seconds else f"{minutes}m"
    return f"{seconds}s"


def format_time_until(iso_timestamp: str | None) -> str | None:
    """Format an ISO timestamp as time remaining from now.

    Returns "expired" for past timestamps and None when the value
    cannot be parsed.
    """
    if not iso_timestamp:
        return None
    try:
        target = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return None
    if target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)

    delta_ms = (target - datetime.now(timezone.utc)).total_seconds() * 1000
    if delta_ms < 0:
        return "expired"
    return format_duration(delta_ms)
