"""
Context window usage bar.

Example output: ██████░░░░ 60%

Colored green below the medium threshold, yellow from medium and red
from high (70/90 by default).
"""

import math

from hud.cache import TTLCache
from hud.config import ContextBarWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.widgets.styling import color_for_level, colorize, threshold_level

FILLED = "█"
EMPTY = "░"


class ContextBarWidget:
    def __init__(self, config: ContextBarWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    def usage_percentage(self, snapshot: RenderSnapshot) -> int:
        """Used context as a whole percentage clamped to 0..100."""
        pct = snapshot.context_window.used_percentage
        if pct is None:
            return 0
        return max(0, min(100, math.floor(pct)))

    def level(self, snapshot: RenderSnapshot) -> str:
        thresholds = self.config.thresholds
        return threshold_level(self.usage_percentage(snapshot), thresholds.medium, thresholds.high)

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        pct = self.usage_percentage(snapshot)
        width = self.config.width or 10
        filled = pct * width // 100
        bar = FILLED * filled + EMPTY * (width - filled)

        color = color_for_level(self.level(snapshot), self.config.colors)
        return colorize(f"{bar} {pct}%", color)
