from idfexp.logging.ilogger import ILogger


class NullLogger(ILogger):
    """
    Default logger of idfexp, until :func:`idfexp.logging.configure` is called.
    Script runs are silent with it, also for ``--logger null`` on the command
    line.
    """

    def debug(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        pass

    def info(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        pass

    def warning(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        pass

    def error(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        pass

    def critical(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        pass
