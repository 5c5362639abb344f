"""
Log record and the render contract.

A Record is built once per emitted call and rendered through a compiled
template. Rendering reads the record, it never changes it.
"""

from dataclasses import dataclass

from logfacet.levels import Severity
from logfacet.template import CompiledTemplate

# Trailing diagnostic a formatting engine may append for unused arguments
EXTRA_ARGS_MARKER = "%!(EXTRA"


class _Slots(dict):
    """Slot mapping where an unknown slot name renders as an empty string"""

    def __missing__(self, key):
        return ""


@dataclass(frozen=True)
class Record:
    """Everything that is known about one log event"""

    id: int
    time: str
    module: str
    level: Severity
    filename: str
    line: int
    message: str

    @property
    def level_name(self) -> str:
        return self.level.name

    def slots(self) -> dict:
        return _Slots(
            id=self.id,
            time=self.time,
            module=self.module,
            filename=self.filename,
            line=self.line,
            level=self.level_name,
            message=self.message,
        )

    def output(self, template: CompiledTemplate) -> str:
        return render(self, template)


def render(record: Record, template: CompiledTemplate) -> str:
    """
    Substitute the record fields into a compiled template.

    The time slot is used as already formatted; the template's time layout is
    applied when the record is built, not here.

    Args:
        record: Record to render
        template: Compiled template

    Returns:
        Rendered line without trailing newline
    """
    msg = template.render % record.slots()
    idx = msg.rfind(EXTRA_ARGS_MARKER)
    if idx != -1:
        return msg[:idx]
    return msg
