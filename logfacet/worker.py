"""
Worker - per-logger emission state and the render/write half of the pipeline.

A Worker owns what a logger is configured with: severity threshold, compiled
template, color flag and sink. It filters a finished Record, renders it,
optionally colorizes it and writes it as one line.
"""

import sys
from beartype.typing import Optional, TextIO, Union

from logfacet.levels import Severity, colorize
from logfacet.record import Record
from logfacet.sink import LineWriter
from logfacet.template import CompiledTemplate, DEFAULT_TEMPLATE, compile_template


class Worker:
    """
    Renders records and writes them to a sink.

    Example:
        worker = Worker(LineWriter(sys.stdout), color=0, level=Severity.DEBUG)
        worker.set_format("%{lvl} %{message}")
    """

    def __init__(
        self,
        writer: Optional[LineWriter] = None,
        color: Optional[int] = 0,
        template: Optional[CompiledTemplate] = None,
        level: Severity = Severity.INFO,
    ):
        """
        Args:
            writer: Line writer for the sink (default: stderr)
            color: Non-zero enables colored output
            template: Compiled template (default: built-in template)
            level: Severity threshold
        """
        self.writer = writer or LineWriter()
        self.color = color or 0
        self.template = template or DEFAULT_TEMPLATE
        self.level = level

    @property
    def time_layout(self) -> str:
        return self.template.time_layout

    @property
    def stream(self) -> TextIO:
        return self.writer.stream

    def set_format(self, template: Union[str, CompiledTemplate]):
        self.template = compile_template(template)

    def set_log_level(self, level: Severity):
        self.level = level

    def enabled_for(self, level: Severity) -> bool:
        """Check if a record at this level passes the threshold"""
        return level <= self.level

    def log(self, level: Severity, record: Record) -> Optional[Exception]:
        """
        Render a record and write it to the sink.

        Args:
            level: Severity used for filtering and color
            record: Record to write

        Returns:
            None on success or when filtered out, the exception if a
            hand-built template could not render the record or the write failed
        """
        if not self.enabled_for(level):
            return None

        try:
            line = record.output(self.template)
        except (TypeError, ValueError) as e:
            sys.stderr.write(f"Logging error: failed to render record #{record.id}: {e}\n")
            return e
        if self.color:
            line = colorize(level, line)

        try:
            self.writer.output(line)
        except (OSError, ValueError) as e:
            # Report on stderr unless stderr is the broken sink
            if self.stream is not sys.stderr:
                sys.stderr.write(f"Logging error: failed to write to output stream: {e}\n")
                sys.stderr.write(line + "\n")
            return e
        return None
