"""Tests for install_statusline.py - Claude Code settings registration."""

import json
import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from install_statusline import install_statusline, script_command, update_settings


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / ".claude" / "settings.json"


class TestUpdateSettings:
    """Tests for update_settings function."""

    def test_registers_everything(self) -> None:
        """Test statusLine and both hooks on empty settings."""
        settings = update_settings({})

        assert settings["statusLine"] == {
            "type": "command",
            "command": script_command("statusline.py"),
            "padding": 2,
        }
        assert settings["hooks"]["SubagentStart"] == [
            {"matcher": "", "hooks": [{"type": "command", "command": script_command("subagent_start.py")}]}
        ]
        assert len(settings["hooks"]["SubagentStop"]) == 1

    def test_preserves_other_settings(self) -> None:
        """Test that unrelated settings and hooks survive."""
        other_hook = {"matcher": "Bash", "hooks": [{"type": "command", "command": "echo hi"}]}
        settings = update_settings({
            "model": "opus",
            "hooks": {
                "PreToolUse": [other_hook],
                "SubagentStart": [{"matcher": "", "hooks": [{"type": "command", "command": "other.sh"}]}],
            },
        })

        assert settings["model"] == "opus"
        assert settings["hooks"]["PreToolUse"] == [other_hook]
        assert len(settings["hooks"]["SubagentStart"]) == 2

    def test_idempotent(self) -> None:
        """Test that repeated installs do not duplicate registrations."""
        once = update_settings({})

        assert update_settings(once) == once


class TestInstallStatusline:
    """Tests for install_statusline function."""

    def test_writes_settings(self, settings_path: Path, tmp_path: Path) -> None:
        """Test writing a fresh settings file."""
        success, _ = install_statusline(settings_path, config_path=tmp_path / "config.json")

        assert success
        settings = json.loads(settings_path.read_text())
        assert "statusline.py" in settings["statusLine"]["command"]

    def test_rerun_is_idempotent(self, settings_path: Path, tmp_path: Path) -> None:
        """Test that running twice leaves identical settings."""
        install_statusline(settings_path, config_path=tmp_path / "config.json")
        first = settings_path.read_text()
        install_statusline(settings_path, config_path=tmp_path / "config.json")

        assert settings_path.read_text() == first

    def test_dry_run_writes_nothing(self, settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a dry run leaves the filesystem untouched."""
        success, msg = install_statusline(settings_path, dry_run=True, config_path=tmp_path / "config.json")

        assert success
        assert msg == "Dry run completed"
        assert not settings_path.exists()
        assert "DRY RUN" in capsys.readouterr().out

    def test_corrupt_settings_replaced(self, settings_path: Path, tmp_path: Path) -> None:
        """Test that an unparseable settings file is treated as empty."""
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{oops")

        success, _ = install_statusline(settings_path, config_path=tmp_path / "config.json")

        assert success
        assert "statusLine" in json.loads(settings_path.read_text())

    def test_write_config(self, settings_path: Path, tmp_path: Path) -> None:
        """Test writing the default config without overwriting an existing one."""
        config_path = tmp_path / "cfg" / "config.json"

        install_statusline(settings_path, write_config=True, config_path=config_path)
        assert json.loads(config_path.read_text())["layout"]["type"] == "multi-line"

        config_path.write_text("{}")
        install_statusline(settings_path, write_config=True, config_path=config_path)
        assert config_path.read_text() == "{}"
