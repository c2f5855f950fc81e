"""ANSI styling and threshold coloring shared by the widgets."""

from hud.config import ColorConfig

COLORS = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "gray": "\x1b[90m",
    "bg_black": "\x1b[40m",
    "bg_red": "\x1b[41m",
    "bg_green": "\x1b[42m",
    "bg_yellow": "\x1b[43m",
    "bg_blue": "\x1b[44m",
    "bg_magenta": "\x1b[45m",
    "bg_cyan": "\x1b[46m",
    "bg_white": "\x1b[47m",
}

RESET = COLORS["reset"]


def style(text: str, *styles: str) -> str:
    """Wrap text in the given styles. Unknown style names are ignored."""
    codes = "".join(COLORS.get(s, "") for s in styles)
    if not codes:
        return text
    return f"{codes}{text}{RESET}"


def colorize(text: str, color: str | None) -> str:
    if not color:
        return text
    return style(text, color)


def threshold_level(percentage: float, medium: float, high: float) -> str:
    """Classify a percentage as "low", "medium" or "high"."""
    if percentage >= high:
        return "high"
    if percentage >= medium:
        return "medium"
    return "low"


def color_for_level(level: str, colors: ColorConfig) -> str:
    return getattr(colors, level)
