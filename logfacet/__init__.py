"""
logfacet - leveled, formattable logging

Each message gets a severity, the caller's file and line, a process-wide
sequence number and a timestamp, is rendered through a placeholder template
and optionally colorized by severity.

Usage:
    import logfacet

    logfacet.info("service started on port", 8080)
    logfacet.warningf("retrying in %ds", 5)

    logger = logfacet.get_logger("db")
    logger.set_format("%{time:%H:%M:%S} %{module} [%{level}] %{message}")
    logger.error("connection lost")

Configuration:
    # Via environment variables
    export LOGFACET_LOG_LEVEL=DEBUG
    export LOGFACET_LOG_FORMAT='%{lvl} %{file}:%{line} %{message}'

    # Via configuration file
    from logfacet.config import LoggingConfig
    LoggingConfig.setup_logging(config_path="logfacet.yml")
"""

__version__ = "1.0.0"

import sys

from logfacet.context import LogContext, DEFAULT_CONTEXT
from logfacet.levels import Severity
from logfacet.logger import (
    Logger,
    LoggerConfig,
    LoggerConfigError,
    LoggerFactory,
    LoggerPanic,
    any_to_message,
    stack,
)
from logfacet.template import CompiledTemplate, translate

__all__ = [
    "CompiledTemplate",
    "DEFAULT_CONTEXT",
    "LogContext",
    "Logger",
    "LoggerConfig",
    "LoggerConfigError",
    "LoggerFactory",
    "LoggerPanic",
    "Severity",
    "get_logger",
    "stack",
    "translate",
]


def get_logger(name: str) -> Logger:
    """
    Get a logger instance with the factory's default configuration.

    Args:
        name: Module name shown by the ``%{module}`` placeholder

    Example:
        logger = get_logger("api")
        logger.info("request completed", 200)
    """
    return LoggerFactory.get_logger(name)


def set_format(template):
    LoggerFactory.default().set_format(template)


def set_default_format(template):
    """Set the template loggers created from now on start with"""
    LoggerFactory.context().set_default_format(template)


def set_log_level(level):
    LoggerFactory.default().set_log_level(level)


def set_log_color(color):
    LoggerFactory.default().set_log_color(color)


def fatal(*args):
    """Log at CRITICAL level on the default logger, then exit with status 1"""
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, any_to_message("", *args))
    sys.exit(1)


def fatalf(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, any_to_message(format_string, *args))
    sys.exit(1)


def panic(*args):
    """Log at CRITICAL level on the default logger, then raise LoggerPanic"""
    message = any_to_message("", *args)
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, message)
    raise LoggerPanic(message)


def panicf(format_string, *args):
    message = any_to_message(format_string, *args)
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, message)
    raise LoggerPanic(message)


def critical(*args):
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, any_to_message("", *args))


def criticalf(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, any_to_message(format_string, *args))


def error(*args):
    LoggerFactory.default()._log_internal(2, Severity.ERROR, any_to_message("", *args))


def errorf(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.ERROR, any_to_message(format_string, *args))


def warning(*args):
    LoggerFactory.default()._log_internal(2, Severity.WARNING, any_to_message("", *args))


def warningf(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.WARNING, any_to_message(format_string, *args))


def notice(*args):
    LoggerFactory.default()._log_internal(2, Severity.NOTICE, any_to_message("", *args))


def noticef(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.NOTICE, any_to_message(format_string, *args))


def info(*args):
    LoggerFactory.default()._log_internal(2, Severity.INFO, any_to_message("", *args))


def infof(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.INFO, any_to_message(format_string, *args))


def debug(*args):
    LoggerFactory.default()._log_internal(2, Severity.DEBUG, any_to_message("", *args))


def debugf(format_string, *args):
    LoggerFactory.default()._log_internal(2, Severity.DEBUG, any_to_message(format_string, *args))


def stack_as_error(*args):
    message = any_to_message("", *args) or "Stack info"
    LoggerFactory.default()._log_internal(2, Severity.ERROR, message + "\n" + stack())


def stack_as_critical(*args):
    message = any_to_message("", *args) or "Stack info"
    LoggerFactory.default()._log_internal(2, Severity.CRITICAL, message + "\n" + stack())
