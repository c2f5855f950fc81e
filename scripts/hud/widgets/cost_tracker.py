"""Session cost and duration. Example output: $0.15 | ⏱️  15m"""

from hud import timeutil
from hud.cache import TTLCache
from hud.config import CostTrackerWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.widgets.styling import colorize


class CostTrackerWidget:
    def __init__(self, config: CostTrackerWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        cost = snapshot.cost
        parts = []

        if self.config.show_cost:
            parts.append(colorize(f"${cost.total_cost_usd:.2f}", "green"))

        if self.config.show_duration:
            parts.append(colorize(f"⏱️  {timeutil.format_duration(cost.total_duration_ms)}", "cyan"))

        if self.config.show_lines and (cost.total_lines_added or cost.total_lines_removed):
            parts.append(
                colorize(f"+{cost.total_lines_added}", "green")
                + colorize(f"/-{cost.total_lines_removed}", "red")
            )

        if not parts:
            return None
        return " | ".join(parts)
