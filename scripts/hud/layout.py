"""
Layout engine.

Builds the enabled widgets once, then composes their fragments either on
one line or across the configured lines. A widget that raises is treated
as contributing nothing; the rest of the statusline still renders.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from hud.cache import TTLCache
from hud.config import StatuslineConfig
from hud.snapshot import RenderSnapshot, Widget
from hud.widgets import (
    ContextBarWidget,
    CostTrackerWidget,
    GitStatusWidget,
    ModelWidget,
    RateLimitsWidget,
    SubagentWidget,
    WorkspaceWidget,
)

SEPARATOR = " | "

WidgetFactory = Callable[..., Widget]

WIDGET_FACTORIES: dict[str, WidgetFactory] = {
    "model": ModelWidget,
    "context-bar": ContextBarWidget,
    "workspace": WorkspaceWidget,
    "cost-tracker": CostTrackerWidget,
    "git-status": GitStatusWidget,
    "rate-limits": RateLimitsWidget,
    "subagents": SubagentWidget,
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PerformanceReport:
    total_ms: float
    widgets: dict[str, float] = field(default_factory=dict)

    def format(self) -> str:
        timings = ", ".join(f"{name}={ms:.2f}ms" for name, ms in self.widgets.items())
        return f"Total: {self.total_ms:.2f}ms | Widgets: {timings}"


class LayoutEngine:
    """Owns the enabled widgets and renders them per the layout config."""

    def __init__(
        self,
        config: StatuslineConfig,
        cache: TTLCache,
        factories: dict[str, WidgetFactory] | None = None,
    ):
        self.config = config
        self.cache = cache
        self.factories = factories if factories is not None else WIDGET_FACTORIES
        self.widgets: dict[str, Widget] = self._build_widgets()

    def _build_widgets(self) -> dict[str, Widget]:
        widgets = {}
        for widget_id in self.config.widget_order():
            factory = self.factories.get(widget_id)
            if factory is None or not self.config.is_enabled(widget_id):
                continue
            try:
                widgets[widget_id] = factory(self.config.widget_config(widget_id), self.cache)
            except Exception:
                self._log_failure(widget_id, "construction")
        return widgets

    def _log_failure(self, widget_id: str, stage: str) -> None:
        if self.config.debug.log_errors:
            logger.exception("Widget %s failed during %s", widget_id, stage)

    def render_widget(self, widget_id: str, snapshot: RenderSnapshot) -> str | None:
        """Render one widget, isolating any failure as an absent fragment."""
        widget = self.widgets.get(widget_id)
        if widget is None:
            return None
        try:
            return widget.render(snapshot) or None
        except Exception:
            self._log_failure(widget_id, "render")
            return None

    def render(self, snapshot: RenderSnapshot) -> str:
        if self.config.layout.type == "single-line":
            return self.render_single_line(snapshot)
        return self.render_multi_line(snapshot)

    def render_single_line(self, snapshot: RenderSnapshot) -> str:
        fragments = [self.render_widget(widget_id, snapshot) for widget_id in self.widgets]
        return SEPARATOR.join(f for f in fragments if f)

    def render_multi_line(self, snapshot: RenderSnapshot) -> str:
        lines = []
        for line in self.config.layout.lines:
            fragments = [self.render_widget(widget_id, snapshot) for widget_id in line]
            fragments = [f for f in fragments if f]
            if fragments:
                lines.append(SEPARATOR.join(fragments))
        return "\n".join(lines)

    def measure_performance(self, snapshot: RenderSnapshot) -> PerformanceReport:
        """Time every enabled widget's render individually and in total."""
        timings = {}
        start = time.perf_counter()
        for widget_id, widget in self.widgets.items():
            widget_start = time.perf_counter()
            try:
                widget.render(snapshot)
            except Exception:
                pass
            timings[widget_id] = (time.perf_counter() - widget_start) * 1000
        total = (time.perf_counter() - start) * 1000
        return PerformanceReport(total_ms=total, widgets=timings)
