"""
API rate limit utilization.

Example output: 5h: 45% | 7d: 23%

Colored green below 60%, yellow from 60% and red from 80% by default.
"""

import math

from hud import timeutil
from hud.cache import TTLCache
from hud.config import RateLimitsWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.usage import CredentialReader, UsageFetcher, UsageWindow
from hud.widgets.styling import color_for_level, colorize, threshold_level


class RateLimitsWidget:
    def __init__(
        self,
        config: RateLimitsWidgetConfig,
        cache: TTLCache,
        fetcher: UsageFetcher | None = None,
    ):
        self.config = config
        self.cache = cache
        self.fetcher = fetcher or UsageFetcher(
            cache, CredentialReader(), ttl_seconds=config.api_cache_ttl or 60
        )

    def _fragment(self, label: str, window: UsageWindow) -> str:
        pct = math.floor(window.utilization)
        thresholds = self.config.thresholds
        level = threshold_level(pct, thresholds.medium, thresholds.high)
        text = f"{label}: {pct}%"
        if self.config.show_reset_time:
            remaining = timeutil.format_time_until(window.resets_at)
            if remaining:
                text += f" ({remaining})"
        return colorize(text, color_for_level(level, self.config.colors))

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        limits = self.fetcher.fetch()
        if limits is None:
            return None

        windows = (
            ("5h", limits.five_hour, self.config.show_5_hour),
            ("7d", limits.seven_day, self.config.show_7_day),
            ("7d-opus", limits.seven_day_opus, self.config.show_7_day_opus),
        )
        parts = [self._fragment(label, window) for label, window, shown in windows if shown and window]
        if not parts:
            return None
        return " | ".join(parts)
