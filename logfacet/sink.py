"""
Line-oriented sink writer.

Wraps any object with ``write()`` (a stream, an open file, ``io.StringIO``)
and frames each rendered record as one line: configured prefix, text and a
trailing newline. Whole lines are written under a lock so records from
concurrent threads never interleave inside a line.
"""

import sys
from threading import Lock
from beartype.typing import Optional, TextIO


class LineWriter:
    """
    Writes one framed line per call.

    Example:
        writer = LineWriter(sys.stdout, prefix="[app] ")
        writer.output("ready")  # "[app] ready\\n"
    """

    def __init__(self, stream: Optional[TextIO] = None, prefix: str = ""):
        """
        Args:
            stream: Destination (default: sys.stderr)
            prefix: Text put in front of every line
        """
        self.stream = stream if stream is not None else sys.stderr
        self.prefix = prefix
        self._lock = Lock()

    def output(self, text: str):
        """
        Write prefix + text, adding a newline unless text already ends with one.

        Raises:
            OSError: if the underlying stream fails
            ValueError: if the underlying stream is closed
        """
        line = self.prefix + text
        if not line.endswith("\n"):
            line += "\n"
        with self._lock:
            self.stream.write(line)
            flush = getattr(self.stream, "flush", None)
            if flush is not None:
                flush()
