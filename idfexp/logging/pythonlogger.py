import logging
import sys

from idfexp.logging.ilogger import ILogger, indent
from idfexp.logging.loglevel import LogLevel

# Indented messages of a script run stay aligned behind a fixed-width level
_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DEBUG_FORMAT = "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)s | %(message)s"


def _formatter(log_level: LogLevel) -> logging.Formatter:
    if log_level == LogLevel.DEBUG:
        return logging.Formatter(_DEBUG_FORMAT, datefmt="%H:%M:%S")
    return logging.Formatter(_FORMAT, datefmt="%H:%M:%S")


def _stack_level(additional_depth: int) -> int:
    """
    The stack level is used to print the file and line number of the line being logged.
    Because there are a few layers between the place where the idfexp logger is used and
    the place where the python logger is used we need to set a custom stack level.

    An additional_depth can be provided to add to this default stack level.
    This is useful when a decorator is added which introduces an additional level between
    the idfexp logger and the python logger.
    """

    default_stack_level = 4
    return default_stack_level + additional_depth


class PythonLogger(ILogger):
    """
    The :class:`PythonLogger` logs the progress of script runs to the ``idfexp``
    logger of the python logging framework.
    """

    def __init__(
        self,
        log_level: LogLevel,
        add_default_stream_handler: bool,
        add_default_file_handler: bool,
        log_file: str = "idfexp.log",
    ) -> None:
        self.logger = logging.getLogger("idfexp")
        self.logger.setLevel(log_level.value)
        self.formatter = _formatter(log_level)

        if add_default_stream_handler:
            self._add_handler(logging.StreamHandler(stream=sys.stdout))
        if add_default_file_handler:
            self._add_handler(logging.FileHandler(log_file, encoding="utf-8"))

    def _log(self, level: int, message: str, additional_depth: int, indent_level: int) -> None:
        self.logger.log(
            level, indent(message, indent_level), stacklevel=_stack_level(additional_depth)
        )

    def debug(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log(logging.DEBUG, message, additional_depth, indent_level)

    def info(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log(logging.INFO, message, additional_depth, indent_level)

    def warning(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log(logging.WARNING, message, additional_depth, indent_level)

    def error(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log(logging.ERROR, message, additional_depth, indent_level)

    def critical(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log(logging.CRITICAL, message, additional_depth, indent_level)

    def _add_handler(self, handler: logging.Handler) -> None:
        handler.setFormatter(self.formatter)
        self.logger.addHandler(handler)
