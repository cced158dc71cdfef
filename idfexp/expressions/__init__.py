"""
Grid expressions: operators, functions and the parser that evaluates them.
"""

from idfexp.expressions.expressiontype import ExpressionType
from idfexp.expressions.parser import ExpressionParser, open_idf, parse
