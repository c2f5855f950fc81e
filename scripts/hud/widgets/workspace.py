"""Working directory widget. Example output: 📁 my-project"""

import os

from hud.cache import TTLCache
from hud.config import WorkspaceWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.widgets.styling import colorize


class WorkspaceWidget:
    def __init__(self, config: WorkspaceWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        current_dir = snapshot.current_dir
        if not current_dir:
            return None

        if self.config.show_full_path:
            name = current_dir
        else:
            name = os.path.basename(current_dir.rstrip("/")) or current_dir

        text = self.config.format.replace("{name}", name)
        return colorize(text, self.config.color)
