"""
Statusline configuration.

The baked-in DEFAULT_CONFIG is deep-merged with an optional user override
file (~/.config/claude-statusline/config.json). Mappings merge key by key;
lists and scalars in the override replace the default outright.

The merged document is validated against CONFIG_SCHEMA. An override that
fails validation or cannot be parsed is ignored in favor of the defaults.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validate

USER_CONFIG_PATH = Path.home() / ".config" / "claude-statusline" / "config.json"

WIDGET_IDS = (
    "model",
    "context-bar",
    "workspace",
    "cost-tracker",
    "git-status",
    "rate-limits",
    "subagents",
)

DEFAULT_CONFIG: dict[str, Any] = {
    "layout": {
        "type": "multi-line",
        "lines": [
            ["model", "context-bar", "workspace"],
            ["git-status", "cost-tracker", "rate-limits"],
            ["subagents"],
        ],
    },
    "widgets": {
        "model": {
            "enabled": True,
            "color": "cyan",
            "format": "[{name}]",
        },
        "context-bar": {
            "enabled": True,
            "width": 10,
            "colors": {"low": "green", "medium": "yellow", "high": "red"},
            "thresholds": {"medium": 70, "high": 90},
        },
        "workspace": {
            "enabled": True,
            "color": "blue",
            "format": "📁 {name}",
            "show_full_path": False,
        },
        "cost-tracker": {
            "enabled": True,
            "show_cost": True,
            "show_duration": True,
            "show_lines": False,
        },
        "git-status": {
            "enabled": True,
            "show_branch": True,
            "show_ahead_behind": True,
            "show_modified": True,
            "show_staged": True,
            "show_untracked": True,
            "cache_ttl": 5,
        },
        "rate-limits": {
            "enabled": True,
            "show_5_hour": True,
            "show_7_day": True,
            "show_7_day_opus": True,
            "show_reset_time": False,
            "api_cache_ttl": 60,
            "colors": {"low": "green", "medium": "yellow", "high": "red"},
            "thresholds": {"medium": 60, "high": 80},
        },
        "subagents": {
            "enabled": True,
            "show_tokens": True,
            "show_model": True,
            "show_elapsed_time": True,
            "token_cache_ttl": 3,
            "max_agents_detailed": 4,
            "state_file": "/tmp/claude-subagent-state.json",
        },
    },
    "cache": {
        "directory": "/tmp/claude-statusline-cache",
        "cleanup_on_start": False,
    },
    "debug": {
        "log_errors": False,
        "error_log_path": "/tmp/statusline-error.log",
        "measure_performance": False,
    },
}

_COLORS_SCHEMA = {
    "type": "object",
    "properties": {
        "low": {"type": "string"},
        "medium": {"type": "string"},
        "high": {"type": "string"},
    },
}

_THRESHOLDS_SCHEMA = {
    "type": "object",
    "properties": {
        "medium": {"type": "number"},
        "high": {"type": "number"},
    },
}

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["layout", "widgets", "cache", "debug"],
    "properties": {
        "layout": {
            "type": "object",
            "required": ["type", "lines"],
            "properties": {
                "type": {"enum": ["single-line", "multi-line"]},
                "lines": {
                    "type": "array",
                    "items": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
        "widgets": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "enabled": {"type": "boolean"},
                    "colors": _COLORS_SCHEMA,
                    "thresholds": _THRESHOLDS_SCHEMA,
                    "width": {"type": "integer", "minimum": 1},
                    "cache_ttl": {"type": "number", "minimum": 0},
                    "api_cache_ttl": {"type": "number", "minimum": 0},
                    "token_cache_ttl": {"type": "number", "minimum": 0},
                    "max_agents_detailed": {"type": "integer", "minimum": 0},
                    "format": {"type": "string"},
                    "color": {"type": "string"},
                },
            },
        },
        "cache": {
            "type": "object",
            "properties": {
                "directory": {"type": "string"},
                "cleanup_on_start": {"type": "boolean"},
            },
        },
        "debug": {
            "type": "object",
            "properties": {
                "log_errors": {"type": "boolean"},
                "error_log_path": {"type": "string"},
                "measure_performance": {"type": "boolean"},
            },
        },
    },
}

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Typed configuration slices
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColorConfig:
    low: str = "green"
    medium: str = "yellow"
    high: str = "red"


@dataclass(frozen=True)
class Thresholds:
    medium: float = 70
    high: float = 90


@dataclass(frozen=True)
class ModelWidgetConfig:
    enabled: bool = True
    color: str = "cyan"
    format: str = "[{name}]"


@dataclass(frozen=True)
class WorkspaceWidgetConfig:
    enabled: bool = True
    color: str = "blue"
    format: str = "📁 {name}"
    show_full_path: bool = False


@dataclass(frozen=True)
class ContextBarWidgetConfig:
    enabled: bool = True
    width: int = 10
    colors: ColorConfig = ColorConfig()
    thresholds: Thresholds = Thresholds(70, 90)


@dataclass(frozen=True)
class CostTrackerWidgetConfig:
    enabled: bool = True
    show_cost: bool = True
    show_duration: bool = True
    show_lines: bool = False


@dataclass(frozen=True)
class GitStatusWidgetConfig:
    enabled: bool = True
    show_branch: bool = True
    show_ahead_behind: bool = True
    show_modified: bool = True
    show_staged: bool = True
    show_untracked: bool = True
    cache_ttl: float = 5


@dataclass(frozen=True)
class RateLimitsWidgetConfig:
    enabled: bool = True
    show_5_hour: bool = True
    show_7_day: bool = True
    show_7_day_opus: bool = True
    show_reset_time: bool = False
    api_cache_ttl: float = 60
    colors: ColorConfig = ColorConfig()
    thresholds: Thresholds = Thresholds(60, 80)


@dataclass(frozen=True)
class SubagentWidgetConfig:
    enabled: bool = True
    show_tokens: bool = True
    show_model: bool = True
    show_elapsed_time: bool = True
    token_cache_ttl: float = 3
    max_agents_detailed: int = 4
    state_file: str = "/tmp/claude-subagent-state.json"


@dataclass(frozen=True)
class LayoutConfig:
    type: str = "multi-line"
    lines: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class CacheConfig:
    directory: str = "/tmp/claude-statusline-cache"
    cleanup_on_start: bool = False


@dataclass(frozen=True)
class DebugConfig:
    log_errors: bool = False
    error_log_path: str = "/tmp/statusline-error.log"
    measure_performance: bool = False


WIDGET_CONFIG_TYPES: dict[str, type] = {
    "model": ModelWidgetConfig,
    "context-bar": ContextBarWidgetConfig,
    "workspace": WorkspaceWidgetConfig,
    "cost-tracker": CostTrackerWidgetConfig,
    "git-status": GitStatusWidgetConfig,
    "rate-limits": RateLimitsWidgetConfig,
    "subagents": SubagentWidgetConfig,
}


def build_slice(cls: type, data: dict | None):
    """Build a config dataclass from a mapping, ignoring unknown keys.

    Nested ``colors``/``thresholds`` mappings are merged over the class
    defaults so a partial override keeps the remaining values.
    """
    data = data or {}
    defaults = cls()
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        default = getattr(defaults, f.name)
        if isinstance(default, (ColorConfig, Thresholds)) and isinstance(value, dict):
            value = build_slice(type(default), {**default.__dict__, **value})
        kwargs[f.name] = value
    return cls(**kwargs)


@dataclass(frozen=True)
class StatuslineConfig:
    """Complete, validated statusline configuration."""

    layout: LayoutConfig = LayoutConfig()
    widgets: dict[str, dict] = field(default_factory=dict)
    cache: CacheConfig = CacheConfig()
    debug: DebugConfig = DebugConfig()

    def widget_order(self) -> list[str]:
        """Widget ids in declaration order."""
        return list(self.widgets)

    def widget_config(self, widget_id: str):
        """Typed config slice for a widget, or None for unknown ids."""
        cls = WIDGET_CONFIG_TYPES.get(widget_id)
        if cls is None:
            return None
        return build_slice(cls, self.widgets.get(widget_id))

    def is_enabled(self, widget_id: str) -> bool:
        slice_ = self.widgets.get(widget_id)
        return isinstance(slice_, dict) and slice_.get("enabled") is True

    @classmethod
    def from_dict(cls, data: dict) -> StatuslineConfig:
        layout = data.get("layout", {})
        return cls(
            layout=LayoutConfig(
                type=layout.get("type", "multi-line"),
                lines=tuple(tuple(line) for line in layout.get("lines", [])),
            ),
            widgets=dict(data.get("widgets", {})),
            cache=build_slice(CacheConfig, data.get("cache")),
            debug=build_slice(DebugConfig, data.get("debug")),
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = deep_merge(current, value)
        elif value is not None:
            result[key] = copy.deepcopy(value)
    return result


def validate_config(data: dict) -> tuple[bool, str]:
    """Validate a merged config document. Returns (valid, error_message)."""
    try:
        validate(instance=data, schema=CONFIG_SCHEMA)
        return True, ""
    except ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        return False, f"Validation error at '{path}': {e.message}"


def load_config_dict(config_path: Path | None = None) -> dict:
    """Load the merged config document (defaults when no valid override)."""
    path = config_path if config_path is not None else USER_CONFIG_PATH
    defaults = copy.deepcopy(DEFAULT_CONFIG)

    try:
        override = json.loads(path.read_text())
    except FileNotFoundError:
        return defaults
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return defaults

    if not isinstance(override, dict):
        logger.warning("Ignoring config %s: top level must be an object", path)
        return defaults

    merged = deep_merge(defaults, override)
    valid, message = validate_config(merged)
    if not valid:
        logger.warning("Ignoring config %s: %s", path, message)
        return defaults
    return merged


def load_config(config_path: Path | None = None) -> StatuslineConfig:
    return StatuslineConfig.from_dict(load_config_dict(config_path))
