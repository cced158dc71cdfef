"""
Interpreter of scripts: loops, preconditions, variables and the script driver.
"""

from idfexp.interpreter.interpreter import Interpreter
from idfexp.interpreter.loops import LoopFrame
from idfexp.interpreter.variables import Variable, VariableTable
