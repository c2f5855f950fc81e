"""
Statusline widgets.

Each widget is a plain class built from its typed config slice and the
shared TTLCache, satisfying the Widget protocol from hud.snapshot.
"""

from hud.widgets.context_bar import ContextBarWidget
from hud.widgets.cost_tracker import CostTrackerWidget
from hud.widgets.git_status import GitStatusWidget
from hud.widgets.model import ModelWidget
from hud.widgets.rate_limits import RateLimitsWidget
from hud.widgets.subagents import SubagentWidget
from hud.widgets.workspace import WorkspaceWidget

__all__ = [
    "ContextBarWidget",
    "CostTrackerWidget",
    "GitStatusWidget",
    "ModelWidget",
    "RateLimitsWidget",
    "SubagentWidget",
    "WorkspaceWidget",
]
