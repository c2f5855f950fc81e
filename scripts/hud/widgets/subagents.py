"""
Active subagent dashboard.

Example output: ⚡ 2 agents (45s) | Explore:haiku 8.2K | Plan:sonnet 4.0K

Renders nothing while no subagent is running, so the line it sits on
appears and disappears with the agents.
"""

from pathlib import Path

from hud import timeutil
from hud.cache import TTLCache
from hud.config import SubagentWidgetConfig
from hud.snapshot import RenderSnapshot
from hud.tokens import format_token_count, get_tokens
from hud.widgets.styling import colorize, style
from subagent_state import read_state


class SubagentWidget:
    def __init__(self, config: SubagentWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    @property
    def state_file(self) -> Path:
        return Path(self.config.state_file)

    def _label(self, agent: dict) -> str:
        agent_type = agent.get("agent_type")
        label = agent_type if isinstance(agent_type, str) and agent_type else "unknown"

        model = agent.get("model")
        if self.config.show_model and isinstance(model, str) and model and model != "unknown":
            label += f":{model}"

        transcript = agent.get("transcript_path")
        if self.config.show_tokens and isinstance(transcript, str) and transcript:
            tokens = get_tokens(transcript, self.cache, self.config.token_cache_ttl)
            if tokens:
                label += f" {format_token_count(tokens)}"

        return label

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        active = read_state(self.state_file)["active"]
        if not active:
            return None

        count = len(active)
        summary = f"⚡ {count} agent{'' if count == 1 else 's'}"
        if self.config.show_elapsed_time:
            now = timeutil.now_ms()
            started = [a["started_at"] for a in active if isinstance(a.get("started_at"), (int, float))]
            if started:
                summary += f" ({timeutil.format_duration(now - min(started))})"

        parts = [style(summary, "bold", "yellow")]

        shown = active[: max(0, self.config.max_agents_detailed)]
        parts.extend(colorize(self._label(agent), "cyan") for agent in shown)

        overflow = count - len(shown)
        if overflow > 0:
            parts.append(colorize(f"+{overflow} more", "gray"))

        return " | ".join(parts)
