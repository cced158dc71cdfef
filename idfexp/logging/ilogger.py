from abc import abstractmethod

from idfexp.logging.loglevel import LogLevel

INDENT = "  "


def indent(message: str, level: int = 1) -> str:
    """
    Prefix a message with two spaces per indentation level, to show log
    messages of sub steps (e.g. written results) below the line they belong to.
    """
    return INDENT * level + message


class ILogger:
    """
    Interface to be implemented by all logger wrappers.

    Every method takes an ``indent_level``: script runs log one message per
    evaluated line at level 0, the steps of that line at level 1 and the
    intermediate results of an expression at level 2.
    """

    @abstractmethod
    def debug(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        """
        Log message with severity ':attr:`~idfexp.logging.loglevel.LogLevel.DEBUG`'.

        Parameters
        ----------
        message : str
            message to be logged
        additional_depth: Optional[int]
            additional depth level. Use this to correct the filename and line number
            when you add logging to a decorator
        indent_level: int
            number of indentation levels of the message within a script run
        """
        raise NotImplementedError

    @abstractmethod
    def info(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        """
        Log message with severity ':attr:`~idfexp.logging.loglevel.LogLevel.INFO`'.
        See :meth:`debug` for the parameters.
        """
        raise NotImplementedError

    @abstractmethod
    def warning(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        """
        Log message with severity ':attr:`~idfexp.logging.loglevel.LogLevel.WARNING`'.
        See :meth:`debug` for the parameters.
        """
        raise NotImplementedError

    @abstractmethod
    def error(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        """
        Log message with severity ':attr:`~idfexp.logging.loglevel.LogLevel.ERROR`'.
        See :meth:`debug` for the parameters.
        """
        raise NotImplementedError

    @abstractmethod
    def critical(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        """
        Log message with severity ':attr:`~idfexp.logging.loglevel.LogLevel.CRITICAL`'.
        See :meth:`debug` for the parameters.
        """
        raise NotImplementedError

    def log(
        self,
        loglevel: LogLevel,
        message: str,
        additional_depth: int = 0,
        indent_level: int = 0,
    ) -> None:
        """
        logs a message with the specified urgency level.
        """
        match loglevel:
            case LogLevel.DEBUG:
                self.debug(message, additional_depth, indent_level)
            case LogLevel.INFO:
                self.info(message, additional_depth, indent_level)
            case LogLevel.WARNING:
                self.warning(message, additional_depth, indent_level)
            case LogLevel.ERROR:
                self.error(message, additional_depth, indent_level)
            case LogLevel.CRITICAL:
                self.critical(message, additional_depth, indent_level)
            case _:
                raise ValueError(f"Unknown logging urgency at level {loglevel}")
