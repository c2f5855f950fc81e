"""Model name widget. Example output: [Opus]"""

from hud.cache import TTLCache
from hud.config import ModelWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.widgets.styling import colorize


class ModelWidget:
    def __init__(self, config: ModelWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        name = snapshot.model.display_name or "Unknown"
        text = self.config.format.replace("{name}", name)
        return colorize(text, self.config.color)
