"""
Severity levels and the color policy attached to them.

Levels are ordered most severe first, so a lower number means a more severe
message. A logger threshold emits a record when ``record.level <= threshold``.
"""

import click
from beartype.typing import Union
from enum import IntEnum


class Severity(IntEnum):
    """Log severities, most severe first"""

    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    NOTICE = 4
    INFO = 5
    DEBUG = 6


# Foreground colors used when a logger has color output enabled
LEVEL_COLORS = {
    Severity.CRITICAL: "magenta",
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.NOTICE: "green",
    Severity.INFO: "white",
    Severity.DEBUG: "cyan",
}


def colorize(level: Severity, text: str) -> str:
    """
    Wrap text in the escape sequence of the level's color and a reset suffix.

    Args:
        level: Severity of the rendered line
        text: Rendered line

    Returns:
        ``"\\x1b[<code>m" + text + "\\x1b[0m"``
    """
    return click.style(text, fg=LEVEL_COLORS[level], reset=True)


def parse_level(value: Union[Severity, str, int]) -> Severity:
    """
    Resolve a severity from a member, a level name or a level number.

    Raises:
        ValueError: if the value names no known level
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name in Severity.__members__:
            return Severity[name]
        if name.isdigit():
            value = int(name)
        else:
            raise ValueError(f"Invalid log level: {value}. Must be one of: {', '.join(Severity.__members__)}")
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return Severity(value)
        except ValueError:
            pass
    raise ValueError(f"Invalid log level: {value}. Must be one of: {', '.join(Severity.__members__)}")
