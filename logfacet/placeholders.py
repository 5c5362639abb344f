"""
Placeholder table: maps template placeholders to ``%``-mapping verbs.

Every verb names one of the seven record slots (id, time, module, filename,
line, level, message). ``%{lvl}`` renders the level slot truncated to three
characters, so truncation happens here and not at render time.
"""

from types import MappingProxyType
from beartype.typing import Tuple

MARKER = "%"
OPENER = "%{"
CLOSER = "}"
ARG_SEPARATOR = ":"

TIME_VERB = "%(time)s"

PLACEHOLDERS = MappingProxyType(
    {
        "%{id}": "%(id)d",
        "%{time}": TIME_VERB,
        "%{module}": "%(module)s",
        "%{filename}": "%(filename)s",
        "%{file}": "%(filename)s",
        "%{line}": "%(line)d",
        "%{level}": "%(level)s",
        "%{lvl}": "%(level).3s",
        "%{message}": "%(message)s",
    }
)

# Placeholders that take an argument after ':'
ARG_PLACEHOLDERS = frozenset({"%{time}"})


def lookup(placeholder: str) -> Tuple[str, bool]:
    """
    Resolve a placeholder to its verb.

    Args:
        placeholder: Full placeholder text without argument, e.g. ``"%{line}"``

    Returns:
        Tuple of (verb, accepts_arg). Unknown placeholders give ``("", False)``.
    """
    return PLACEHOLDERS.get(placeholder, ""), placeholder in ARG_PLACEHOLDERS


def placeholder_to_verb(placeholder: str) -> Tuple[str, str]:
    """
    Translate ``%{name}`` or ``%{name:arg}`` into (verb, arg).

    Anything not shaped like a placeholder resolves to an empty verb. The
    argument is only kept for placeholders that accept one.
    """
    if len(placeholder) < 4:
        return "", ""
    if not placeholder.startswith(OPENER) or not placeholder.endswith(CLOSER):
        return "", ""
    idx = placeholder.find(ARG_SEPARATOR)
    if idx == -1:
        verb, _ = lookup(placeholder)
        return verb, ""
    verb, accepts_arg = lookup(placeholder[:idx] + CLOSER)
    if not accepts_arg:
        return verb, ""
    return verb, placeholder[idx + 1 : -1]
