"""Tests for hud/config.py - defaults, deep merge and validation."""

import json
import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from hud.config import (
    DEFAULT_CONFIG,
    ColorConfig,
    ContextBarWidgetConfig,
    RateLimitsWidgetConfig,
    StatuslineConfig,
    SubagentWidgetConfig,
    Thresholds,
    build_slice,
    deep_merge,
    load_config,
    load_config_dict,
    validate_config,
)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config.json"


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_nested_dicts_merge(self) -> None:
        """Test that nested mappings merge key by key."""
        base = {"a": {"x": 1, "y": 2}, "b": 3}

        assert deep_merge(base, {"a": {"y": 20}}) == {"a": {"x": 1, "y": 20}, "b": 3}

    def test_lists_replace(self) -> None:
        """Test that lists replace rather than concatenate."""
        assert deep_merge({"l": [1, 2, 3]}, {"l": [9]}) == {"l": [9]}

    def test_new_keys_added(self) -> None:
        """Test that keys absent from base are added."""
        assert deep_merge({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_base_not_mutated(self) -> None:
        """Test that the inputs are left untouched."""
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_defaults_valid(self) -> None:
        """Test that the baked-in defaults pass validation."""
        valid, msg = validate_config(DEFAULT_CONFIG)

        assert valid, msg

    def test_bad_layout_type(self) -> None:
        """Test that an unknown layout type is rejected with a path."""
        bad = deep_merge(DEFAULT_CONFIG, {"layout": {"type": "grid"}})

        valid, msg = validate_config(bad)

        assert not valid
        assert "layout -> type" in msg


class TestLoadConfig:
    """Tests for load_config and load_config_dict."""

    def test_missing_file_gives_defaults(self, config_path: Path) -> None:
        """Test that no override file yields the defaults."""
        assert load_config_dict(config_path) == DEFAULT_CONFIG

    def test_partial_override_keeps_defaults(self, config_path: Path) -> None:
        """Test that unspecified keys keep their default values."""
        config_path.write_text(json.dumps({"widgets": {"context-bar": {"width": 20}}}))

        merged = load_config_dict(config_path)

        assert merged["widgets"]["context-bar"]["width"] == 20
        assert merged["widgets"]["context-bar"]["thresholds"] == {"medium": 70, "high": 90}
        assert merged["widgets"]["model"] == DEFAULT_CONFIG["widgets"]["model"]

    def test_layout_lines_replaced(self, config_path: Path) -> None:
        """Test that layout lines from the override replace the defaults."""
        config_path.write_text(json.dumps({"layout": {"lines": [["model"]]}}))

        config = load_config(config_path)

        assert config.layout.lines == (("model",),)
        assert config.layout.type == "multi-line"

    def test_invalid_override_falls_back(self, config_path: Path) -> None:
        """Test that an override failing validation is ignored."""
        config_path.write_text(json.dumps({"widgets": {"model": {"enabled": "yes"}}}))

        assert load_config_dict(config_path) == DEFAULT_CONFIG

    def test_unparseable_override_falls_back(self, config_path: Path) -> None:
        """Test that a corrupt override file is ignored."""
        config_path.write_text("{nope")

        assert load_config_dict(config_path) == DEFAULT_CONFIG

    def test_non_object_override_falls_back(self, config_path: Path) -> None:
        """Test that a non-object override is ignored."""
        config_path.write_text("[1, 2]")

        assert load_config_dict(config_path) == DEFAULT_CONFIG


class TestConfigSlices:
    """Tests for the typed config dataclasses."""

    def test_default_widget_slices(self) -> None:
        """Test typed slices built from the defaults."""
        config = StatuslineConfig.from_dict(DEFAULT_CONFIG)

        bar = config.widget_config("context-bar")
        assert isinstance(bar, ContextBarWidgetConfig)
        assert bar.thresholds == Thresholds(70, 90)

        limits = config.widget_config("rate-limits")
        assert isinstance(limits, RateLimitsWidgetConfig)
        assert limits.thresholds == Thresholds(60, 80)

        agents = config.widget_config("subagents")
        assert isinstance(agents, SubagentWidgetConfig)
        assert agents.state_file == "/tmp/claude-subagent-state.json"

    def test_unknown_widget_has_no_slice(self) -> None:
        """Test that an unknown widget id yields None."""
        assert StatuslineConfig.from_dict(DEFAULT_CONFIG).widget_config("clock") is None

    def test_unknown_keys_ignored(self) -> None:
        """Test that extra keys in a slice are dropped."""
        slice_ = build_slice(ContextBarWidgetConfig, {"width": 5, "sparkle": True})

        assert slice_.width == 5

    def test_partial_colors_merge(self) -> None:
        """Test that a partial colors mapping keeps the other defaults."""
        slice_ = build_slice(ContextBarWidgetConfig, {"colors": {"high": "magenta"}})

        assert slice_.colors == ColorConfig(low="green", medium="yellow", high="magenta")

    def test_widget_order_follows_declaration(self) -> None:
        """Test that widget order is the config's declared order."""
        config = StatuslineConfig.from_dict(DEFAULT_CONFIG)

        assert config.widget_order() == list(DEFAULT_CONFIG["widgets"])

    def test_is_enabled(self, config_path: Path) -> None:
        """Test that a disabled widget reports as such."""
        config_path.write_text(json.dumps({"widgets": {"git-status": {"enabled": False}}}))

        config = load_config(config_path)

        assert not config.is_enabled("git-status")
        assert config.is_enabled("model")
        assert not config.is_enabled("clock")

    def test_cache_and_debug_sections(self, config_path: Path) -> None:
        """Test cache and debug slices pick up overrides."""
        config_path.write_text(json.dumps({
            "cache": {"cleanup_on_start": True},
            "debug": {"measure_performance": True},
        }))

        config = load_config(config_path)

        assert config.cache.cleanup_on_start is True
        assert config.cache.directory == "/tmp/claude-statusline-cache"
        assert config.debug.measure_performance is True
        assert config.debug.log_errors is False
