import sys

from loguru import logger

from idfexp.logging.ilogger import ILogger, indent
from idfexp.logging.loglevel import LogLevel

_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"
_DEBUG_FORMAT = "{time:HH:mm:ss} | {level: <8} | {file}:{line} | {message}"


def _depth_level(additional_depth: int) -> int:
    """
    The depth level is used to print the file and line number of the line being logged.
    Because there are a few layers between the place where the idfexp logger is used and
    the place where the loguru logger is used we need to set a custom stack level.

    An additional_depth can be provided to add to this default depth level.
    This is useful when a decorator is added which introduces an additional level between
    the idfexp logger and the loguru logger.
    """

    default_stack_level = 3
    return default_stack_level + additional_depth


class LoguruLogger(ILogger):
    """
    The :class:`LoguruLogger` logs the progress of script runs with loguru.
    """

    def __init__(
        self,
        log_level: LogLevel,
        add_default_stream_handler: bool,
        add_default_file_handler: bool,
        log_file: str = "idfexp.log",
    ) -> None:
        # Remove default handler set by loguru
        logger.remove()
        log_format = _DEBUG_FORMAT if log_level == LogLevel.DEBUG else _FORMAT

        if add_default_stream_handler:
            logger.add(sys.stdout, level=log_level.value, format=log_format)
        if add_default_file_handler:
            logger.add(log_file, level=log_level.value, format=log_format, encoding="utf-8")

    def _log(self, level: str, message: str, additional_depth: int, indent_level: int) -> None:
        logger.opt(depth=_depth_level(additional_depth)).log(
            level, indent(message, indent_level)
        )

    def debug(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log("DEBUG", message, additional_depth, indent_level)

    def info(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log("INFO", message, additional_depth, indent_level)

    def warning(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log("WARNING", message, additional_depth, indent_level)

    def error(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log("ERROR", message, additional_depth, indent_level)

    def critical(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self._log("CRITICAL", message, additional_depth, indent_level)
