from enum import Enum


class LogLevel(Enum):
    """
    The available log levels for the logger.
    """

    DEBUG = 10
    """
    Detailed progress of a script run: expanded lines, skipped preconditions,
    remarks, intermediate expressions and released grids.
    """
    INFO = 20
    """
    Evaluated lines and written results.
    """
    WARNING = 30
    """
    Something unexpected happened, but the script run continues, e.g. a
    missing file was skipped in quiet mode.
    """
    ERROR = 40
    """
    The script run failed.
    """
    CRITICAL = 50
    """
    The tool itself could not run.
    """
