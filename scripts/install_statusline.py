#!/usr/bin/env python3
"""
Install the statusline and subagent hooks into Claude Code.

Registers statusline.py as the ``statusLine`` command and the two subagent
lifecycle hooks in ~/.claude/settings.json. Earlier registrations of the
same scripts are replaced, so the installer can be re-run safely. All other
settings are preserved.

Usage:
    install_statusline.py
    install_statusline.py --dry-run
    install_statusline.py --settings PATH
    install_statusline.py --write-config
"""

import argparse
import json
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from hud.config import DEFAULT_CONFIG, USER_CONFIG_PATH  # noqa: E402

SETTINGS_PATH = Path.home() / ".claude" / "settings.json"

HOOK_SCRIPTS = {
    "SubagentStart": "subagent_start.py",
    "SubagentStop": "subagent_stop.py",
}


def script_command(script: str) -> str:
    return f"python3 {SCRIPT_DIR / script}"


def _registers(entry, script: str) -> bool:
    """True if a hook matcher entry runs ``script``."""
    if not isinstance(entry, dict):
        return False
    hooks = entry.get("hooks")
    if not isinstance(hooks, list):
        return False
    return any(
        isinstance(hook, dict) and script in str(hook.get("command", ""))
        for hook in hooks
    )


def update_settings(settings: dict) -> dict:
    """Return settings with the statusline and subagent hooks registered."""
    settings = dict(settings)
    settings["statusLine"] = {
        "type": "command",
        "command": script_command("statusline.py"),
        "padding": 2,
    }

    hooks = settings.get("hooks")
    hooks = dict(hooks) if isinstance(hooks, dict) else {}

    for event, script in HOOK_SCRIPTS.items():
        entries = hooks.get(event)
        entries = entries if isinstance(entries, list) else []
        entries = [e for e in entries if not _registers(e, script)]
        entries.append({
            "matcher": "",
            "hooks": [{"type": "command", "command": script_command(script)}],
        })
        hooks[event] = entries

    settings["hooks"] = hooks
    return settings


def load_settings(settings_path: Path) -> dict:
    if not settings_path.exists():
        return {}
    try:
        settings = json.loads(settings_path.read_text())
    except json.JSONDecodeError:
        return {}
    return settings if isinstance(settings, dict) else {}


def install_statusline(
    settings_path: Path = SETTINGS_PATH,
    dry_run: bool = False,
    write_config: bool = False,
    config_path: Path = USER_CONFIG_PATH,
) -> tuple[bool, str]:
    """
    Register the statusline in Claude Code settings.

    Args:
        settings_path: Claude Code settings file to update
        dry_run: If True, only show what would be done
        write_config: Also write the default config if none exists
        config_path: Where the user config lives

    Returns:
        (success, message)
    """
    settings = update_settings(load_settings(settings_path))
    rendered = json.dumps(settings, indent=2)
    create_config = write_config and not config_path.exists()

    if dry_run:
        print("DRY RUN - Would perform the following actions:")
        print(f"  Write file: {settings_path}")
        if create_config:
            print(f"  Write default config: {config_path}")
        print("\nGenerated settings:")
        print("-" * 40)
        print(rendered)
        print("-" * 40)
        return True, "Dry run completed"

    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(rendered + "\n")
        if create_config:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(json.dumps(DEFAULT_CONFIG, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return False, f"Failed to write settings: {e}"

    created = f"\n  - {config_path}" if create_config else ""
    return True, f"""
Statusline installed successfully!

Files created/updated:
  - {settings_path}{created}

Registered:
  - statusLine: {script_command("statusline.py")}
  - SubagentStart: {script_command("subagent_start.py")}
  - SubagentStop: {script_command("subagent_stop.py")}

Restart Claude Code or start a new session to see the statusline.
Customize widgets in {config_path}
"""


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Install the Claude Code statusline")
    parser.add_argument("--dry-run", action="store_true", help="Show changes without writing")
    parser.add_argument("--settings", type=Path, default=SETTINGS_PATH, help="Settings file")
    parser.add_argument("--write-config", action="store_true", help="Write the default config")
    args = parser.parse_args(argv)

    success, msg = install_statusline(args.settings, args.dry_run, args.write_config)
    print(msg)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
