"""
Format translator - compiles placeholder templates into render templates.

A user template such as ``"%{time:%H:%M} [%{lvl}] %{message}"`` is compiled
once into a ``%``-mapping render string and a strftime time layout:

    >>> translate("%{time:%H:%M} [%{lvl}] %{message}")
    CompiledTemplate(render='%(time)s [%(level).3s] %(message)s', time_layout='%H:%M')

Translation never fails. Malformed placeholders degrade to literal text,
unknown placeholders disappear, and templates too short to hold
``%{message}`` fall back to the defaults.
"""

from beartype.typing import NamedTuple, Union

from logfacet.placeholders import MARKER, OPENER, CLOSER, placeholder_to_verb

DEFAULT_FORMAT = "#%{id} %{time} %{filename}:%{line} ▶ %{lvl} %{message}"
DEFAULT_TIME_LAYOUT = "%Y-%m-%d %H:%M:%S"

# len("%{message}")
MIN_TEMPLATE_LENGTH = 10

ESCAPED_MARKER = MARKER * 2


class CompiledTemplate(NamedTuple):
    """Render template over the record slots plus the strftime layout for the time slot"""

    render: str
    time_layout: str


def _compile(template: str) -> CompiledTemplate:
    render = []
    time_layout = DEFAULT_TIME_LAYOUT
    pos = 0
    idx = template.find(MARKER, pos)
    while idx != -1:
        render.append(template[pos:idx])
        if not template.startswith(OPENER, idx):
            render.append(ESCAPED_MARKER)
            pos = idx + 1
        else:
            end = template.find(CLOSER, idx)
            if end == -1:
                # dangling "%{": drop the marker, keep the rest as text
                pos = idx + 1
            else:
                nxt = template.find(OPENER, idx + 1)
                if nxt != -1 and nxt < end:
                    # "%{bad %{verb}": the first marker is literal
                    render.append(ESCAPED_MARKER)
                    pos = idx + 1
                else:
                    verb, arg = placeholder_to_verb(template[idx : end + 1])
                    render.append(verb)
                    # only %{time} carries an argument
                    if arg:
                        time_layout = arg
                    pos = end + 1
        idx = template.find(MARKER, pos)
    render.append(template[pos:])
    return CompiledTemplate("".join(render), time_layout)


DEFAULT_TEMPLATE = _compile(DEFAULT_FORMAT)


def translate(template: str) -> CompiledTemplate:
    """
    Compile a placeholder template.

    Args:
        template: Template with ``%{name}`` placeholders

    Returns:
        CompiledTemplate; the default one when the template is shorter than
        ``%{message}``
    """
    if len(template) < MIN_TEMPLATE_LENGTH:
        return DEFAULT_TEMPLATE
    return _compile(template)


def compile_template(template: Union[str, CompiledTemplate, None]) -> CompiledTemplate:
    """
    Compile a template unless it already is compiled.

    A CompiledTemplate is returned as is, so render strings never go through
    the translator a second time. ``None`` gives the default template.
    """
    if isinstance(template, CompiledTemplate):
        return template
    if template is None:
        return DEFAULT_TEMPLATE
    return translate(template)
