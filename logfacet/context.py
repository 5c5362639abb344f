"""
Shared logging context.

Holds the state every logger of a process shares: the sequence counter that
numbers records and the default template new loggers start with.
"""

from threading import Lock
from beartype.typing import Union

from logfacet.template import CompiledTemplate, compile_template


class LogContext:
    """
    Sequence id source and fallback template shared by a group of loggers.

    Example:
        context = LogContext()
        context.next_id()  # 1
        context.next_id()  # 2
    """

    def __init__(self, default_format: Union[str, CompiledTemplate, None] = None):
        self._lock = Lock()
        self._last_id = 0
        self.default_template = compile_template(default_format)

    def next_id(self) -> int:
        """Allocate the next sequence id (starts at 1, never reused)"""
        with self._lock:
            self._last_id += 1
            return self._last_id

    @property
    def last_id(self) -> int:
        return self._last_id

    def set_default_format(self, template: Union[str, CompiledTemplate]):
        """
        Replace the template used by loggers created from now on.

        Loggers that already exist keep their own compiled template.
        """
        self.default_template = compile_template(template)


# Context used by loggers that are not given one explicitly
DEFAULT_CONTEXT = LogContext()
