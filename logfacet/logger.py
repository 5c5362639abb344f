"""
Leveled logger - the emission pipeline and its convenience API.

Every public logging method funnels into ``Logger._log_internal`` which
filters by threshold, resolves the caller's file and line, builds a Record
with the next sequence id and hands it to the logger's Worker.

Usage:
    from logfacet.logger import Logger, LoggerConfig
    from logfacet.levels import Severity

    logger = Logger(LoggerConfig(module="api", color=0, level=Severity.DEBUG))
    logger.info("listening on", 8080)
    logger.errorf("request %s failed: %s", req_id, err)

Call depth:
    ``call_depth`` counts frames above ``_log_internal``: 0 is
    ``_log_internal`` itself, 1 the public method that called it, 2 the code
    that called that method. Every method on this class and every
    package-level function in ``logfacet`` passes 2. ``log`` and ``logf``
    take the depth from their caller, so a direct call needs 2 and a
    helper wrapping ``log`` needs 3.
"""

import os
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from beartype.typing import Dict, Optional, TextIO, Tuple, Union

from logfacet.context import LogContext, DEFAULT_CONTEXT
from logfacet.levels import Severity, parse_level
from logfacet.record import Record
from logfacet.sink import LineWriter
from logfacet.template import CompiledTemplate
from logfacet.worker import Worker

DEFAULT_MODULE = "DEFAULT"
UNKNOWN_FILE = "???"


class LoggerConfigError(ValueError):
    """Raised when a logger is constructed with an invalid option.

    Attributes:
        option: name of the rejected option
        reason: why it was rejected
    """

    def __init__(self, option: str, reason: str = ""):
        self.option = option
        self.reason = reason
        super().__init__(f"Invalid logger option '{option}'. {reason}")


class LoggerPanic(RuntimeError):
    """Raised by ``panic``/``panicf`` after the message has been logged"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass
class LoggerConfig:
    """Construction options of a Logger"""

    module: str = DEFAULT_MODULE
    color: Optional[int] = 1
    sink: Optional[TextIO] = None
    level: Union[Severity, str, int] = Severity.INFO
    prefix: str = ""

    def __post_init__(self):
        if not isinstance(self.module, str):
            raise LoggerConfigError("module", f"Expected str, got {type(self.module).__name__}.")
        if self.color is not None and not isinstance(self.color, int):
            raise LoggerConfigError("color", f"Expected int or None, got {type(self.color).__name__}.")
        if self.sink is not None and not callable(getattr(self.sink, "write", None)):
            raise LoggerConfigError("sink", f"{type(self.sink).__name__} has no write() method.")
        if not isinstance(self.prefix, str):
            raise LoggerConfigError("prefix", f"Expected str, got {type(self.prefix).__name__}.")
        try:
            self.level = parse_level(self.level)
        except ValueError as e:
            raise LoggerConfigError("level", str(e)) from e


def any_to_message(format_string: str, *args) -> str:
    """
    Build a message body.

    With an empty format the args are joined with spaces, otherwise the
    printf-style format is applied. A format that does not match its args
    never raises; the format and the args are joined instead.
    """
    if not format_string:
        return " ".join(str(arg) for arg in args)
    if not args:
        return format_string
    try:
        return format_string % args
    except (TypeError, ValueError, KeyError):
        return " ".join([format_string] + [str(arg) for arg in args])


def caller_info(call_depth: int) -> Tuple[str, int]:
    """
    Resolve (file base name, line) of the frame ``call_depth`` levels above
    the function calling this one.
    """
    try:
        frame = sys._getframe(call_depth + 1)
    except ValueError:
        return UNKNOWN_FILE, 0
    return os.path.basename(frame.f_code.co_filename), frame.f_lineno


def stack() -> str:
    """Return the current thread's stack trace"""
    return "".join(traceback.format_stack())


class Logger:
    """
    Leveled logger for one module.

    Example:
        logger = Logger(LoggerConfig(module="db"))
        logger.warning("slow query", 1.5)

        # Output (stderr, colored):
        # #1 2024-01-20 10:15:30 repo.py:42 ▶ WAR slow query 1.5
    """

    def __init__(self, config: Optional[LoggerConfig] = None, context: Optional[LogContext] = None):
        """
        Args:
            config: Construction options (default: LoggerConfig())
            context: Shared sequence counter and default template
                (default: process-wide DEFAULT_CONTEXT)
        """
        config = config or LoggerConfig()
        self.context = context or DEFAULT_CONTEXT
        self.module = config.module
        self.worker = Worker(
            writer=LineWriter(config.sink, prefix=config.prefix),
            color=config.color,
            template=self.context.default_template,
            level=config.level,
        )

    @property
    def level(self) -> Severity:
        return self.worker.level

    def set_format(self, template: Union[str, CompiledTemplate]):
        self.worker.set_format(template)

    def set_log_level(self, level: Union[Severity, str, int]):
        self.worker.set_log_level(parse_level(level))

    def set_log_color(self, color: Optional[int]):
        self.worker.color = color or 0

    def _log_internal(self, call_depth: int, level: Severity, message: str) -> Optional[Exception]:
        if not self.worker.enabled_for(level):
            return None

        filename, line = caller_info(call_depth)
        record = Record(
            id=self.context.next_id(),
            time=datetime.now().strftime(self.worker.time_layout),
            module=self.module,
            level=level,
            filename=filename,
            line=line,
            message=message,
        )
        return self.worker.log(level, record)

    def log(self, call_depth: int, level: Severity, *args) -> Optional[Exception]:
        """
        Log args joined with spaces at an explicit call depth.

        Returns:
            The sink error if the write failed, otherwise None
        """
        return self._log_internal(call_depth, level, any_to_message("", *args))

    def logf(self, call_depth: int, level: Severity, format_string: str, *args) -> Optional[Exception]:
        """
        Log a printf-style message at an explicit call depth.

        Returns:
            The sink error if the write failed, otherwise None
        """
        return self._log_internal(call_depth, level, any_to_message(format_string, *args))

    def fatal(self, *args):
        """Log at CRITICAL level, then exit the process with status 1"""
        self._log_internal(2, Severity.CRITICAL, any_to_message("", *args))
        sys.exit(1)

    def fatalf(self, format_string: str, *args):
        self._log_internal(2, Severity.CRITICAL, any_to_message(format_string, *args))
        sys.exit(1)

    def panic(self, *args):
        """
        Log at CRITICAL level, then raise LoggerPanic carrying the message.

        Raises:
            LoggerPanic: always
        """
        message = any_to_message("", *args)
        self._log_internal(2, Severity.CRITICAL, message)
        raise LoggerPanic(message)

    def panicf(self, format_string: str, *args):
        message = any_to_message(format_string, *args)
        self._log_internal(2, Severity.CRITICAL, message)
        raise LoggerPanic(message)

    def critical(self, *args):
        self._log_internal(2, Severity.CRITICAL, any_to_message("", *args))

    def criticalf(self, format_string: str, *args):
        self._log_internal(2, Severity.CRITICAL, any_to_message(format_string, *args))

    def error(self, *args):
        self._log_internal(2, Severity.ERROR, any_to_message("", *args))

    def errorf(self, format_string: str, *args):
        self._log_internal(2, Severity.ERROR, any_to_message(format_string, *args))

    def warning(self, *args):
        self._log_internal(2, Severity.WARNING, any_to_message("", *args))

    def warningf(self, format_string: str, *args):
        self._log_internal(2, Severity.WARNING, any_to_message(format_string, *args))

    def notice(self, *args):
        self._log_internal(2, Severity.NOTICE, any_to_message("", *args))

    def noticef(self, format_string: str, *args):
        self._log_internal(2, Severity.NOTICE, any_to_message(format_string, *args))

    def info(self, *args):
        self._log_internal(2, Severity.INFO, any_to_message("", *args))

    def infof(self, format_string: str, *args):
        self._log_internal(2, Severity.INFO, any_to_message(format_string, *args))

    def debug(self, *args):
        self._log_internal(2, Severity.DEBUG, any_to_message("", *args))

    def debugf(self, format_string: str, *args):
        self._log_internal(2, Severity.DEBUG, any_to_message(format_string, *args))

    def stack_as_error(self, *args):
        """Log the current stack at ERROR level after an optional message"""
        message = any_to_message("", *args) or "Stack info"
        self._log_internal(2, Severity.ERROR, message + "\n" + stack())

    def stack_as_critical(self, *args):
        """Log the current stack at CRITICAL level after an optional message"""
        message = any_to_message("", *args) or "Stack info"
        self._log_internal(2, Severity.CRITICAL, message + "\n" + stack())


class LoggerFactory:
    """
    Factory for creating loggers with consistent configuration.

    Keeps the defaults applied to new loggers, caches loggers by module name
    and owns the default logger used by the package-level functions. The
    default logger is only built on first use.
    """

    _default_level = Severity.INFO
    _default_color: Optional[int] = 1
    _default_stream: Optional[TextIO] = None
    _default_prefix = ""
    _default_template: Optional[Union[str, CompiledTemplate]] = None
    _default_module = DEFAULT_MODULE
    _context: LogContext = DEFAULT_CONTEXT
    _loggers: Dict[str, Logger] = {}
    _writer: Optional[LineWriter] = None

    @classmethod
    def configure(
        cls,
        level: Union[Severity, str, int, None] = None,
        template: Union[str, CompiledTemplate, None] = None,
        color: Optional[int] = None,
        stream: Optional[TextIO] = None,
        prefix: Optional[str] = None,
        module: Optional[str] = None,
    ):
        """
        Configure default logger settings and apply them to cached loggers.

        Only the given settings change.

        Args:
            level: Severity threshold or level name (DEBUG, INFO, NOTICE, ...)
            template: Placeholder template for every logger
            color: Non-zero enables colored output, 0 disables it
            stream: Output stream (default: sys.stderr)
            prefix: Text put in front of every line
            module: Module name of the default logger

        Raises:
            LoggerConfigError: if the level is not a known severity or a text
                option is not a string; nothing is changed in that case

        Example:
            LoggerFactory.configure(level="DEBUG", template="%{lvl} %{message}", color=0)
        """
        if template is not None and not isinstance(template, (str, CompiledTemplate)):
            raise LoggerConfigError("template", f"Expected str or CompiledTemplate, got {type(template).__name__}.")
        for option, value in (("prefix", prefix), ("module", module)):
            if value is not None and not isinstance(value, str):
                raise LoggerConfigError(option, f"Expected str, got {type(value).__name__}.")
        if level is not None:
            try:
                level = parse_level(level)
            except ValueError as e:
                raise LoggerConfigError("level", str(e)) from e
            cls._default_level = level
        if template is not None:
            cls._default_template = template
        if color is not None:
            cls._default_color = color
        if stream is not None:
            cls._default_stream = stream
        if prefix is not None:
            cls._default_prefix = prefix
        if module is not None:
            cls._default_module = module

        cls._writer = None
        for logger in cls._loggers.values():
            cls._apply_defaults(logger)

    @classmethod
    def _apply_defaults(cls, logger: Logger):
        logger.set_log_level(cls._default_level)
        logger.set_log_color(cls._default_color)
        logger.worker.writer = cls._shared_writer()
        if cls._default_template is not None:
            logger.set_format(cls._default_template)

    @classmethod
    def _shared_writer(cls) -> LineWriter:
        # One writer, and so one lock, per sink for all factory loggers
        if cls._writer is None:
            cls._writer = LineWriter(cls._default_stream, prefix=cls._default_prefix)
        return cls._writer

    @classmethod
    def get_logger(cls, name: str) -> Logger:
        """
        Get a logger for a module, creating it with the factory defaults.

        Returns cached logger if already created for this name.
        """
        if name not in cls._loggers:
            logger = Logger(
                LoggerConfig(
                    module=name,
                    color=cls._default_color,
                    sink=cls._default_stream,
                    level=cls._default_level,
                    prefix=cls._default_prefix,
                ),
                context=cls._context,
            )
            logger.worker.writer = cls._shared_writer()
            if cls._default_template is not None:
                logger.set_format(cls._default_template)
            cls._loggers[name] = logger
        return cls._loggers[name]

    @classmethod
    def default(cls) -> Logger:
        """Return the default logger, building it on first use"""
        return cls.get_logger(cls._default_module)

    @classmethod
    def context(cls) -> LogContext:
        return cls._context

    @classmethod
    def reset(cls, context: Optional[LogContext] = None):
        """
        Reset factory to defaults and clear all cached loggers.

        Args:
            context: Context for loggers created afterwards (default: DEFAULT_CONTEXT)
        """
        cls._default_level = Severity.INFO
        cls._default_color = 1
        cls._default_stream = None
        cls._default_prefix = ""
        cls._default_template = None
        cls._default_module = DEFAULT_MODULE
        cls._context = context or DEFAULT_CONTEXT
        cls._loggers = {}
        cls._writer = None
