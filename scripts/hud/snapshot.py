"""
Render input for one statusline invocation.

Claude Code sends one JSON document on stdin per render. It is parsed once
into the frozen dataclasses below; widgets only ever see this snapshot.
Every field is optional on the wire and falls back to a neutral default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _num(value: Any, default: float = 0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _int(value: Any) -> int:
    return int(_num(value, 0))


def _opt_num(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclass(frozen=True)
class ModelInfo:
    id: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class WorkspaceInfo:
    current_dir: str = ""
    project_dir: str = ""


@dataclass(frozen=True)
class CostInfo:
    total_cost_usd: float = 0.0
    total_duration_ms: int = 0
    total_api_duration_ms: int = 0
    total_lines_added: int = 0
    total_lines_removed: int = 0


@dataclass(frozen=True)
class CurrentUsage:
    """Token breakdown of the most recent turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0


@dataclass(frozen=True)
class ContextWindow:
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    context_window_size: int = 0
    used_percentage: float | None = None
    remaining_percentage: float | None = None
    current_usage: CurrentUsage | None = None


@dataclass(frozen=True)
class RenderSnapshot:
    """Immutable snapshot of everything a widget may render."""

    model: ModelInfo = ModelInfo()
    workspace: WorkspaceInfo = WorkspaceInfo()
    cwd: str = ""
    session_id: str = ""
    transcript_path: str = ""
    cost: CostInfo = CostInfo()
    context_window: ContextWindow = ContextWindow()
    exceeds_200k_tokens: bool = False
    version: str = ""
    output_style: str = ""

    @property
    def current_dir(self) -> str:
        """Working directory, preferring workspace.current_dir over cwd."""
        return self.workspace.current_dir or self.cwd

    @classmethod
    def from_dict(cls, data: dict) -> RenderSnapshot:
        if not isinstance(data, dict):
            return cls()

        model = _section(data, "model")
        workspace = _section(data, "workspace")
        cost = _section(data, "cost")
        ctx = _section(data, "context_window")
        usage = ctx.get("current_usage")

        current_usage = None
        if isinstance(usage, dict):
            current_usage = CurrentUsage(
                input_tokens=_int(usage.get("input_tokens")),
                output_tokens=_int(usage.get("output_tokens")),
                cache_creation_input_tokens=_int(usage.get("cache_creation_input_tokens")),
                cache_read_input_tokens=_int(usage.get("cache_read_input_tokens")),
            )

        return cls(
            model=ModelInfo(
                id=_str(model.get("id")),
                display_name=_str(model.get("display_name")),
            ),
            workspace=WorkspaceInfo(
                current_dir=_str(workspace.get("current_dir")),
                project_dir=_str(workspace.get("project_dir")),
            ),
            cwd=_str(data.get("cwd")),
            session_id=_str(data.get("session_id")),
            transcript_path=_str(data.get("transcript_path")),
            cost=CostInfo(
                total_cost_usd=float(_num(cost.get("total_cost_usd"))),
                total_duration_ms=_int(cost.get("total_duration_ms")),
                total_api_duration_ms=_int(cost.get("total_api_duration_ms")),
                total_lines_added=_int(cost.get("total_lines_added")),
                total_lines_removed=_int(cost.get("total_lines_removed")),
            ),
            context_window=ContextWindow(
                total_input_tokens=_int(ctx.get("total_input_tokens")),
                total_output_tokens=_int(ctx.get("total_output_tokens")),
                context_window_size=_int(ctx.get("context_window_size")),
                used_percentage=_opt_num(ctx.get("used_percentage")),
                remaining_percentage=_opt_num(ctx.get("remaining_percentage")),
                current_usage=current_usage,
            ),
            exceeds_200k_tokens=data.get("exceeds_200k_tokens") is True,
            version=_str(data.get("version")),
            output_style=_str(_section(data, "output_style").get("name")),
        )


class Widget(Protocol):
    """Protocol for a statusline fragment renderer."""

    def render(self, snapshot: RenderSnapshot) -> str | None:
        """Render a text fragment, or None to contribute nothing."""
        ...
