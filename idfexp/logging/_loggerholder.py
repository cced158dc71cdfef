from idfexp.logging.ilogger import ILogger
from idfexp.logging.nulllogger import NullLogger


class _LoggerHolder(ILogger):
    """
    The :class:`_LoggerHolder` is wrapper that allows us to change the logger during runtime.

    Modules import ``idfexp.logging.logger`` at import time, when it still
    holds the default :class:`NullLogger`. Calling
    :func:`idfexp.logging.configure` afterwards only swaps the instance inside
    this holder, so every module that imported the holder logs to the newly
    configured framework.

     >>> import idfexp
     >>> from idfexp.logging import LoggerType
     >>>
     >>> def run(logger=idfexp.logging.logger):
     >>>    logger.info("running")
     >>>
     >>> idfexp.logging.configure(LoggerType.LOGURU)
     >>> run()  # logs through loguru
    """

    def __init__(self) -> None:
        self._instance = NullLogger()

    @property
    def instance(self) -> ILogger:
        """
        Contains the actual ILogger object
        """
        return self._instance

    @instance.setter
    def instance(self, value: ILogger) -> None:
        self._instance = value

    def debug(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self.instance.debug(message, additional_depth, indent_level)

    def info(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self.instance.info(message, additional_depth, indent_level)

    def warning(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self.instance.warning(message, additional_depth, indent_level)

    def error(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self.instance.error(message, additional_depth, indent_level)

    def critical(self, message: str, additional_depth: int = 0, indent_level: int = 0) -> None:
        self.instance.critical(message, additional_depth, indent_level)
