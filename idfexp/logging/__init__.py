"""
Package used for providing logging support to idfexp.

Examples
--------

Log the progress of a script run to stdout using the python logging framework

>>> import idfexp
>>> from idfexp.logging import LoggerType, LogLevel
>>>
>>> idfexp.logging.configure(LoggerType.PYTHON, LogLevel.INFO)

Log to stdout and to a file using loguru

>>> import idfexp
>>> from idfexp.logging import LoggerType
>>>
>>> idfexp.logging.configure(LoggerType.LOGURU, add_default_file_handler=True)

If you want to integrate idfexp logging into your own logging framework

>>> import logging
>>> import idfexp
>>> from idfexp.logging import LoggerType, LogLevel
>>>
>>> idfexp.logging.configure(LoggerType.PYTHON, LogLevel.INFO, add_default_stream_handler=False)
>>> logging.basicConfig(level=logging.INFO, handlers=[logging.FileHandler("run.log")])

"""

from idfexp.logging._loggerholder import _LoggerHolder
from idfexp.logging.config import LoggerType, configure
from idfexp.logging.ilogger import ILogger, indent  # noqa: I001
from idfexp.logging.loglevel import LogLevel

logger = _LoggerHolder()
