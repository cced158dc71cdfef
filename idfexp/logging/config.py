from enum import Enum

import idfexp

from .loglevel import LogLevel
from .logurulogger import LoguruLogger
from .nulllogger import NullLogger
from .pythonlogger import PythonLogger


class LoggerType(Enum):
    """
    The available logging frameworks.
    """

    PYTHON = PythonLogger.__name__
    """
    The default python logging framework.
    """
    LOGURU = LoguruLogger.__name__
    """
    The loguru logging framework.
    """
    NULL = NullLogger.__name__
    """
    A dummy logger that doesn't log anything.
    """


def configure(
    logger_type: LoggerType,
    log_level: LogLevel = LogLevel.WARNING,
    add_default_stream_handler: bool = True,
    add_default_file_handler: bool = False,
    log_file: str = "idfexp.log",
) -> None:
    """
    Setup the logging framework for script runs and assign it a log level.

    Parameters
    ----------
    logger_type : LoggerType
        The logging framework to be used.
    log_level : LogLevel
        The log level to be set. At ``DEBUG`` the messages also show the
        source file and line of idfexp that logged them.
    add_default_stream_handler : bool
        Log to stdout. True by default.
    add_default_file_handler : bool
        Log to ``log_file`` as well. False by default.
    log_file : str
        Path of the log file, `idfexp.log` in the working directory by default.
    """
    match logger_type:
        case LoggerType.PYTHON:
            idfexp.logging.logger.instance = PythonLogger(
                log_level, add_default_stream_handler, add_default_file_handler, log_file
            )
        case LoggerType.LOGURU:
            idfexp.logging.logger.instance = LoguruLogger(
                log_level, add_default_stream_handler, add_default_file_handler, log_file
            )
        case _:
            idfexp.logging.logger.instance = NullLogger()
