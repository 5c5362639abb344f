"""
Unit tests for logger.py

Tests the emission pipeline including:
- Level filtering
- Caller file and line at every wrapper depth
- Sequence ids (also across threads)
- Message formatting
- Fatal and panic paths
- Construction options
- LoggerFactory and the package-level functions
"""

import sys
import threading
import unittest
from datetime import datetime
from io import StringIO
from unittest import mock

import logfacet
from logfacet.context import LogContext
from logfacet.levels import Severity
from logfacet.logger import (
    Logger,
    LoggerConfig,
    LoggerConfigError,
    LoggerFactory,
    LoggerPanic,
    any_to_message,
    caller_info,
)
from logfacet.template import DEFAULT_TEMPLATE


class BrokenStream:
    def write(self, data):
        raise OSError("disk full")


def log_through_helper(logger: Logger, message: str):
    """One extra frame between the call site and Logger.log"""
    logger.log(3, Severity.INFO, message)


class LoggerTestCase(unittest.TestCase):
    def setUp(self):
        self.output = StringIO()
        self.context = LogContext()
        self.logger = self.make_logger()

    def tearDown(self):
        self.output.close()

    def make_logger(self, template="%{lvl} %{message}", **options) -> Logger:
        config = dict(module="test", color=0, sink=self.output, level=Severity.DEBUG)
        config.update(options)
        logger = Logger(LoggerConfig(**config), context=self.context)
        logger.set_format(template)
        return logger

    def lines(self):
        return self.output.getvalue().splitlines()


class TestEmission(LoggerTestCase):
    """Test the emission pipeline"""

    def test_logger_initialization(self):
        self.assertEqual(self.logger.module, "test")
        self.assertEqual(self.logger.level, Severity.DEBUG)
        self.assertEqual(self.logger.worker.color, 0)

    def test_level_filtering(self):
        """Threshold WARNING drops INFO and emits ERROR"""
        self.logger.set_log_level(Severity.WARNING)

        self.logger.info("Info message")
        self.assertEqual(self.output.getvalue(), "")

        self.logger.error("Error message")
        self.assertEqual(self.output.getvalue(), "ERR Error message\n")

    def test_filtered_records_take_no_id(self):
        logger = self.make_logger("%{id} %{message}", level=Severity.WARNING)

        logger.debug("dropped")
        logger.info("dropped")
        logger.warning("kept")

        self.assertEqual(self.lines(), ["1 kept"])
        self.assertEqual(self.context.last_id, 1)

    def test_set_log_level_by_name(self):
        self.logger.set_log_level("error")
        self.assertEqual(self.logger.level, Severity.ERROR)

    def test_all_levels(self):
        self.logger.critical("a")
        self.logger.error("b")
        self.logger.warning("c")
        self.logger.notice("d")
        self.logger.info("e")
        self.logger.debug("f")

        self.assertEqual(self.lines(), ["CRI a", "ERR b", "WAR c", "NOT d", "INF e", "DEB f"])

    def test_all_format_variants(self):
        self.logger.criticalf("%s", "a")
        self.logger.errorf("%s", "b")
        self.logger.warningf("%s", "c")
        self.logger.noticef("%s", "d")
        self.logger.infof("%s", "e")
        self.logger.debugf("%s", "f")

        self.assertEqual(self.lines(), ["CRI a", "ERR b", "WAR c", "NOT d", "INF e", "DEB f"])

    def test_sequence_ids(self):
        self.logger.set_format("%{id} %{message}")

        self.logger.info("a")
        self.logger.info("b")
        self.logger.info("c")

        self.assertEqual(self.lines(), ["1 a", "2 b", "3 c"])

    def test_ids_are_shared_by_loggers_of_a_context(self):
        other = self.make_logger("%{id} %{module} %{message}", module="other")
        self.logger.set_format("%{id} %{module} %{message}")

        self.logger.info("a")
        other.info("b")
        self.logger.info("c")

        self.assertEqual(self.lines(), ["1 test a", "2 other b", "3 test c"])

    def test_module(self):
        logger = self.make_logger("%{module}: %{message}", module="db")
        logger.info("connected")
        self.assertEqual(self.lines(), ["db: connected"])

    def test_time_layout(self):
        self.logger.set_format("%{time:%Y} %{message}")
        self.logger.info("now")
        year = datetime.now().year
        self.assertIn(self.lines()[0], [f"{year} now", f"{year + 1} now"])

    def test_default_template(self):
        logger = Logger(LoggerConfig(color=0, sink=self.output), context=self.context)
        self.assertEqual(logger.worker.template, DEFAULT_TEMPLATE)

        logger.info("hello")

        line = self.lines()[0]
        self.assertTrue(line.startswith("#1 "))
        self.assertTrue(line.endswith(" ▶ INF hello"))
        self.assertIn("test_logger.py:", line)

    def test_color_output(self):
        logger = self.make_logger("%{message}", color=1)
        logger.error("boom")
        self.assertEqual(self.output.getvalue(), "\x1b[31mboom\x1b[0m\n")

    def test_set_log_color(self):
        self.logger.set_log_color(1)
        self.logger.warning("hot")
        self.logger.set_log_color(None)
        self.logger.warning("cold")
        self.assertEqual(self.output.getvalue(), "\x1b[33mWAR hot\x1b[0m\nWAR cold\n")

    def test_prefix(self):
        logger = self.make_logger(prefix="app| ")
        logger.info("ready")
        self.assertEqual(self.output.getvalue(), "app| INF ready\n")

    @mock.patch("sys.stderr", new_callable=StringIO)
    def test_sink_failure_is_returned(self, stderr):
        logger = Logger(LoggerConfig(color=0, sink=BrokenStream()), context=self.context)

        result = logger.log(2, Severity.ERROR, "lost")
        logger.error("ignored")

        self.assertIsInstance(result, OSError)
        self.assertIn("Logging error", stderr.getvalue())

    def test_successful_log_returns_none(self):
        self.assertIsNone(self.logger.log(2, Severity.INFO, "ok"))
        self.assertIsNone(self.logger.logf(2, Severity.INFO, "%d", 1))


class TestCallerLocation(LoggerTestCase):
    """Test that file and line match the call site at each wrapper depth"""

    def setUp(self):
        super().setUp()
        self.logger.set_format("%{file}:%{line} %{message}")

    def test_direct_method(self):
        line = sys._getframe().f_lineno + 1
        self.logger.info("here")
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here"])

    def test_format_method(self):
        line = sys._getframe().f_lineno + 1
        self.logger.errorf("here %d", 1)
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here 1"])

    def test_log_with_explicit_depth(self):
        line = sys._getframe().f_lineno + 1
        self.logger.log(2, Severity.INFO, "here")
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here"])

    def test_logf_with_explicit_depth(self):
        line = sys._getframe().f_lineno + 1
        self.logger.logf(2, Severity.INFO, "%s", "here")
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here"])

    def test_helper_wrapping_log(self):
        line = sys._getframe().f_lineno + 1
        log_through_helper(self.logger, "here")
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here"])

    def test_panic(self):
        line = sys._getframe().f_lineno + 2
        with self.assertRaises(LoggerPanic):
            self.logger.panic("here")
        self.assertEqual(self.lines(), [f"test_logger.py:{line} here"])

    def test_caller_info_out_of_range(self):
        self.assertEqual(caller_info(100000), ("???", 0))


class TestMessages(unittest.TestCase):
    """Test message formatting"""

    def test_args_are_joined(self):
        self.assertEqual(any_to_message("", "a", 1, 2.5, None), "a 1 2.5 None")

    def test_no_args(self):
        self.assertEqual(any_to_message(""), "")

    def test_printf_format(self):
        self.assertEqual(any_to_message("%s=%d", "x", 3), "x=3")

    def test_format_without_args_is_literal(self):
        self.assertEqual(any_to_message("100%"), "100%")

    def test_mismatched_format_does_not_raise(self):
        self.assertEqual(any_to_message("%d", "x"), "%d x")
        self.assertEqual(any_to_message("%s %s", "x"), "%s %s x")
        self.assertEqual(any_to_message("%s", "x", "y"), "%s x y")


class TestTerminalPaths(LoggerTestCase):
    """Test fatal and panic"""

    def test_fatal_exits(self):
        with self.assertRaises(SystemExit) as context:
            self.logger.fatal("bye", 1)

        self.assertEqual(context.exception.code, 1)
        self.assertEqual(self.lines(), ["CRI bye 1"])

    def test_fatalf_exits(self):
        with self.assertRaises(SystemExit) as context:
            self.logger.fatalf("bye %d", 2)

        self.assertEqual(context.exception.code, 1)
        self.assertEqual(self.lines(), ["CRI bye 2"])

    def test_fatal_logs_despite_strict_threshold(self):
        self.logger.set_log_level(Severity.CRITICAL)
        with self.assertRaises(SystemExit):
            self.logger.fatal("bye")
        self.assertEqual(self.lines(), ["CRI bye"])

    def test_panic_raises_with_message(self):
        with self.assertRaises(LoggerPanic) as context:
            self.logger.panic("boom", 42)

        self.assertEqual(context.exception.message, "boom 42")
        self.assertEqual(str(context.exception), "boom 42")
        self.assertEqual(self.lines(), ["CRI boom 42"])

    def test_panicf_raises_with_message(self):
        with self.assertRaises(LoggerPanic) as context:
            self.logger.panicf("code=%d", 7)

        self.assertEqual(context.exception.message, "code=7")
        self.assertEqual(self.lines(), ["CRI code=7"])

    def test_panic_is_catchable(self):
        try:
            self.logger.panic("recovered")
        except RuntimeError as e:
            self.assertIsInstance(e, LoggerPanic)

    def test_stack_as_error(self):
        self.logger.stack_as_error()

        output = self.output.getvalue()
        self.assertTrue(output.startswith("ERR Stack info\n"))
        self.assertIn("test_logger.py", output)
        self.assertIn("test_stack_as_error", output)

    def test_stack_as_critical_with_message(self):
        self.logger.stack_as_critical("state dump")

        output = self.output.getvalue()
        self.assertTrue(output.startswith("CRI state dump\n"))
        self.assertIn("test_stack_as_critical_with_message", output)


class TestLoggerConfig(unittest.TestCase):
    """Test construction options"""

    def test_defaults(self):
        config = LoggerConfig()

        self.assertEqual(config.module, "DEFAULT")
        self.assertEqual(config.color, 1)
        self.assertIsNone(config.sink)
        self.assertEqual(config.level, Severity.INFO)
        self.assertEqual(config.prefix, "")

    def test_default_sink_is_stderr(self):
        logger = Logger(LoggerConfig())
        self.assertIs(logger.worker.stream, sys.stderr)

    def test_level_name_is_normalized(self):
        self.assertEqual(LoggerConfig(level="debug").level, Severity.DEBUG)
        self.assertEqual(LoggerConfig(level=4).level, Severity.NOTICE)

    def test_invalid_options(self):
        invalid = [
            dict(module=5),
            dict(color="red"),
            dict(sink=object()),
            dict(level="verbose"),
            dict(level=0),
            dict(prefix=None),
        ]
        for options in invalid:
            with self.subTest(options=options):
                with self.assertRaises(LoggerConfigError):
                    LoggerConfig(**options)

    def test_error_names_option(self):
        with self.assertRaises(LoggerConfigError) as context:
            LoggerConfig(color="red")

        self.assertEqual(context.exception.option, "color")
        self.assertIsInstance(context.exception, ValueError)

    def test_color_disabled(self):
        self.assertIsNone(LoggerConfig(color=None).color)
        self.assertEqual(Logger(LoggerConfig(color=None)).worker.color, 0)


class TestLogContext(unittest.TestCase):
    """Test the shared context"""

    def test_ids_start_at_one(self):
        context = LogContext()
        self.assertEqual(context.next_id(), 1)
        self.assertEqual(context.next_id(), 2)
        self.assertEqual(context.last_id, 2)

    def test_default_format_applies_to_new_loggers(self):
        output = StringIO()
        context = LogContext()
        before = Logger(LoggerConfig(color=0, sink=output), context=context)

        context.set_default_format("%{lvl}: %{message}")
        after = Logger(LoggerConfig(color=0, sink=output), context=context)

        self.assertEqual(before.worker.template, DEFAULT_TEMPLATE)
        after.info("hello")
        self.assertEqual(output.getvalue(), "INF: hello\n")

    def test_concurrent_ids_are_unique_and_contiguous(self):
        output = StringIO()
        context = LogContext()
        threads_count, per_thread = 8, 250

        def worker(index):
            logger = Logger(
                LoggerConfig(module=f"t{index}", color=0, sink=output, level=Severity.DEBUG), context=context
            )
            logger.set_format("%{id} %{module} %{message}")
            for n in range(per_thread):
                logger.debug("msg", n)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        ids = [int(line.split(" ", 1)[0]) for line in output.getvalue().splitlines()]
        self.assertEqual(sorted(ids), list(range(1, threads_count * per_thread + 1)))


class TestLoggerFactory(unittest.TestCase):
    """Test LoggerFactory and the package-level functions"""

    def setUp(self):
        self.output = StringIO()
        LoggerFactory.reset(context=LogContext())
        LoggerFactory.configure(level="DEBUG", color=0, stream=self.output)

    def tearDown(self):
        LoggerFactory.reset()

    def test_get_logger_caches(self):
        logger1 = LoggerFactory.get_logger("test")
        logger2 = LoggerFactory.get_logger("test")
        self.assertIs(logger1, logger2)
        self.assertIs(logfacet.get_logger("test"), logger1)

    def test_default_logger(self):
        default = LoggerFactory.default()
        self.assertEqual(default.module, "DEFAULT")
        self.assertIs(LoggerFactory.default(), default)

    def test_configure_updates_existing_loggers(self):
        logger = LoggerFactory.get_logger("test")
        output = StringIO()

        LoggerFactory.configure(level="ERROR", template="%{module} %{lvl} %{message}", stream=output)
        logger.warning("dropped")
        logger.error("kept")

        self.assertEqual(logger.level, Severity.ERROR)
        self.assertEqual(output.getvalue(), "test ERR kept\n")

    def test_configure_invalid_level(self):
        with self.assertRaises(LoggerConfigError):
            LoggerFactory.configure(level="INVALID")

    def test_configure_rejects_non_string_options(self):
        """Non-string template, prefix or module is rejected and nothing changes"""
        logger = LoggerFactory.get_logger("test")
        for option, value in [("template", 1234567890123), ("prefix", 5), ("module", 7)]:
            with self.subTest(option=option):
                with self.assertRaises(LoggerConfigError) as context:
                    LoggerFactory.configure(level="ERROR", **{option: value})
                self.assertEqual(context.exception.option, option)

        logger.info("still works")
        self.assertEqual(logger.level, Severity.DEBUG)
        self.assertTrue(self.output.getvalue().endswith(" ▶ INF still works\n"))

    def test_configure_default_module(self):
        LoggerFactory.configure(module="api", template="%{module} %{message}")
        logfacet.info("ready")
        self.assertEqual(self.output.getvalue(), "api ready\n")

    def test_loggers_share_factory_context(self):
        LoggerFactory.configure(template="%{id} %{module} %{message}")
        LoggerFactory.get_logger("a").info("x")
        LoggerFactory.get_logger("b").info("y")
        self.assertEqual(self.output.getvalue(), "1 a x\n2 b y\n")

    def test_reset(self):
        LoggerFactory.get_logger("test")
        LoggerFactory.reset()
        self.assertEqual(LoggerFactory._loggers, {})
        self.assertEqual(LoggerFactory._default_level, Severity.INFO)
        self.assertIs(LoggerFactory.context(), logfacet.DEFAULT_CONTEXT)

    def test_package_functions(self):
        logfacet.set_format("%{lvl} %{message}")

        logfacet.critical("a")
        logfacet.errorf("%s", "b")
        logfacet.warning("c")
        logfacet.noticef("%d", 4)
        logfacet.info("e", 5)
        logfacet.debugf("%s-%s", "f", 6)

        self.assertEqual(
            self.output.getvalue().splitlines(), ["CRI a", "ERR b", "WAR c", "NOT 4", "INF e 5", "DEB f-6"]
        )

    def test_package_function_caller_location(self):
        logfacet.set_format("%{file}:%{line} %{message}")
        line = sys._getframe().f_lineno + 1
        logfacet.info("here")
        self.assertEqual(self.output.getvalue(), f"test_logger.py:{line} here\n")

    def test_package_level_and_color(self):
        logfacet.set_format("%{lvl} %{message}")
        logfacet.set_log_level("warning")
        logfacet.info("dropped")
        logfacet.set_log_color(1)
        logfacet.error("red")
        self.assertEqual(self.output.getvalue(), "\x1b[31mERR red\x1b[0m\n")

    def test_package_set_default_format(self):
        logfacet.set_default_format("%{module}> %{message}")
        LoggerFactory.get_logger("late").info("hi")
        self.assertEqual(self.output.getvalue(), "late> hi\n")

    def test_package_fatal_and_panic(self):
        logfacet.set_format("%{lvl} %{message}")

        with self.assertRaises(SystemExit):
            logfacet.fatal("gone")
        with self.assertRaises(SystemExit):
            logfacet.fatalf("gone %d", 2)
        with self.assertRaises(LoggerPanic):
            logfacet.panic("boom")
        with self.assertRaises(LoggerPanic):
            logfacet.panicf("boom %d", 2)

        self.assertEqual(self.output.getvalue().splitlines(), ["CRI gone", "CRI gone 2", "CRI boom", "CRI boom 2"])

    def test_package_stack(self):
        logfacet.set_format("%{lvl} %{message}")
        logfacet.stack_as_error("dump")
        logfacet.stack_as_critical()

        output = self.output.getvalue()
        self.assertTrue(output.startswith("ERR dump\n"))
        self.assertIn("CRI Stack info\n", output)
        self.assertIn("test_package_stack", logfacet.stack())


if __name__ == "__main__":
    unittest.main()
