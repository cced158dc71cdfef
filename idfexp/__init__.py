# exports
from idfexp import expressions, idf, interpreter, logging, util
from idfexp.interpreter import Interpreter
from idfexp.settings import Extent, InterpreterSettings, QuietMode

__version__ = "1.0.0"
