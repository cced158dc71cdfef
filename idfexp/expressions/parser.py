"""
Evaluation of grid expressions such as ``max(a,b)*2+top.idf``.

The expression is split into cells of an operand and the action (operator)
that follows it. Cells are then merged from left to right: two neighbouring
cells are merged when the priority of the action of the left cell is at least
the priority of the action of the right cell. Parenthesised sub expressions and
function arguments are split and merged recursively.
"""

import pathlib
import re
from typing import List, Mapping, Optional, Tuple

import numpy as np

from idfexp.errors import MissingResourceError, ScriptSyntaxError
from idfexp.expressions import operations
from idfexp.expressions.expressiontype import ExpressionType
from idfexp.expressions.functions import FUNCTIONS
from idfexp.grid import ConstantGrid, Grid, GridValue
from idfexp.logging import logger
from idfexp.metadata import Metadata
from idfexp.settings import InterpreterSettings
from idfexp.util.path import resolve_path

_NUMBER = re.compile(r"-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")
# Shortest path ending in .idf that is followed by an action, a comma or a ")"
_IDF_FILE = re.compile(r"[^,()*+^=!<>&|]*?\.idf(?=$|[-+*/^=!<>&|,)])", re.IGNORECASE)
_BOUNDARY = frozenset("+-*/^=!<>&|,)")

# What ends a (sub)expression
_LINE = 0
_PARENTHESIS = 1
_ARGUMENT = 2


def _is_boundary(text: str, position: int) -> bool:
    return position >= len(text) or text[position] in _BOUNDARY


def _check_parentheses(expression: str) -> None:
    depth = 0
    for character in expression:
        if character == "(":
            depth += 1
        elif character == ")":
            depth -= 1
            if depth < 0:
                raise ScriptSyntaxError(f"Unexpected ')' in expression: {expression}")
    if depth != 0:
        raise ScriptSyntaxError(f"Missing ')' in expression: {expression}")


def open_idf(path: pathlib.Path, settings: InterpreterSettings) -> Grid:
    """
    Open an IDF file lazily. When NoData is used as a value, NoData cells get
    the configured calculation value.
    """
    fill_value = settings.nodata_value if settings.nodata_as_value else None
    grid = Grid.open(path, fill_value=fill_value)
    if settings.nodata_as_value and np.isnan(grid.nodata):
        logger.warning(
            f"NoData-value of IDF-file '{path.name}' is NaN, it is not used as value",
            indent_level=1,
        )
    return grid


class _Cell:
    __slots__ = ("value", "action", "label")

    def __init__(self, value: GridValue, action: str, label: str):
        self.value = value
        self.action = action
        self.label = label


class ExpressionParser:
    """
    Evaluates grid expressions.

    Parameters
    ----------
    settings: InterpreterSettings

    Examples
    --------
    >>> parser = ExpressionParser(InterpreterSettings(base_path="model"))
    >>> value, kind = parser.parse("max(top.idf-1,bot.idf)", variables={})
    """

    def __init__(self, settings: InterpreterSettings):
        self.settings = settings
        # Numbers the intermediate results of a whole run: Exp1, Exp2, ...
        self.expression_count = 0
        self._variables: Mapping[str, Optional[GridValue]] = {}
        self._names: List[str] = []
        self._operation_count = 0

    def parse(
        self, expression: str, variables: Mapping[str, Optional[GridValue]]
    ) -> Tuple[GridValue, ExpressionType]:
        """
        Evaluate an expression.

        Parameters
        ----------
        expression: str
        variables: mapping of str to Grid, ConstantGrid or None
            Values of the variables that the expression may refer to.

        Returns
        -------
        value: Grid or ConstantGrid
        kind: ExpressionType
        """
        text = "".join(expression.split())
        if text == "":
            raise ScriptSyntaxError("Empty expression")
        _check_parentheses(text)

        self._variables = variables
        # Longest name first, names may contain other names
        self._names = sorted(variables, key=len, reverse=True)
        self._operation_count = 0
        value, kind, _, _ = self._split_and_merge(text, 0, _LINE)
        if kind == ExpressionType.COMPLEX and self._operation_count == 1:
            kind = ExpressionType.ARITHMETIC
        return value, kind

    def _split_and_merge(self, text: str, position: int, stop: int):
        cells = []
        while True:
            value, kind, label, position = self._operand(text, position)
            action, position, terminator = self._action(text, position, stop)
            cells.append(_Cell(value, action, label))
            if action == operations.END:
                break

        if len(cells) == 1:
            return cells[0].value, kind, position, terminator
        self._merge(cells[0], cells, 1, False)
        return cells[0].value, ExpressionType.COMPLEX, position, terminator

    def _merge(
        self, current: _Cell, cells: List[_Cell], index: int, one_only: bool
    ) -> int:
        """Merge cells into current, returns the index of the first unmerged cell."""
        while index < len(cells):
            next_cell = cells[index]
            index += 1
            while not self._can_merge(current, next_cell):
                # The right cell binds stronger, merge it with its right neighbours
                index = self._merge(next_cell, cells, index, True)
            self._merge_cells(current, next_cell)
            if one_only:
                break
        return index

    @staticmethod
    def _can_merge(left: _Cell, right: _Cell) -> bool:
        return operations.PRIORITIES[left.action] >= operations.PRIORITIES[right.action]

    def _next_expression_id(self) -> str:
        self.expression_count += 1
        self._operation_count += 1
        return f"Exp{self.expression_count}"

    def _merge_cells(self, left: _Cell, right: _Cell) -> None:
        expression_id = self._next_expression_id()
        expression = f"{left.label}{left.action}{right.label}"
        self._log_evaluation(expression_id, expression)
        left.value = operations.apply(
            left.action, left.value, right.value, self.settings.extent
        )
        self._write_intermediate(left.value, expression_id, expression)
        left.label = expression_id
        left.action = right.action

    def _operand(self, text: str, position: int):
        if position >= len(text):
            raise ScriptSyntaxError(f"Missing operand at end of expression: {text}")
        start = position
        character = text[position]

        if character == "(":
            value, kind, position, _ = self._split_and_merge(
                text, position + 1, _PARENTHESIS
            )
            return value, kind, text[start:position], position

        for name in self._names:
            end = position + len(name)
            if text.startswith(name, position) and _is_boundary(text, end):
                return self._variable(name) + (name, end)

        match = _NUMBER.match(text, position)
        if match and _is_boundary(text, match.end()):
            return (
                ConstantGrid(float(match.group())),
                ExpressionType.CONSTANT,
                match.group(),
                match.end(),
            )

        if character == "-":
            value, kind, label, position = self._operand(text, position + 1)
            if kind != ExpressionType.CONSTANT:
                self._operation_count += 1
                kind = ExpressionType.COMPLEX
            return operations.negate(value), kind, f"-{label}", position

        match = _IDF_FILE.match(text, position)
        if match:
            path = resolve_path(match.group(), self.settings.base_path)
            token_end = self._token_end(text, position)
            if match.end() == token_end or path.is_file():
                return self._file(path) + (match.group(), match.end())

        end = self._token_end(text, position)
        token = text[position:end]
        if end < len(text) and text[end] == "(":
            name = token.lower()
            if name not in FUNCTIONS:
                raise ScriptSyntaxError(f"Unknown function '{token}' in expression: {text}")
            return self._function(name, text, end + 1)
        if token == "":
            raise ScriptSyntaxError(f"Invalid expression (sub)string: {text[position:]}")
        if token.lower().endswith(".idf"):
            return self._file(resolve_path(token, self.settings.base_path)) + (token, end)
        raise MissingResourceError(f"Variable or IDF-file not found: {token}")

    @staticmethod
    def _token_end(text: str, position: int) -> int:
        end = position
        while end < len(text) and text[end] not in _BOUNDARY and text[end] != "(":
            end += 1
        return end

    def _variable(self, name: str) -> Tuple[GridValue, ExpressionType]:
        value = self._variables[name]
        if value is None:
            raise MissingResourceError(f"Variable has no value: {name}")
        value = value.copy()
        if isinstance(value, ConstantGrid):
            return value, ExpressionType.CONSTANT
        return value, ExpressionType.VARIABLE

    def _file(self, path: pathlib.Path) -> Tuple[GridValue, ExpressionType]:
        if not path.is_file():
            raise MissingResourceError(f"IDF-file not found: {path}")
        return open_idf(path, self.settings), ExpressionType.FILE

    def _function(self, name: str, text: str, position: int):
        arguments = []
        labels = []
        while True:
            start = position
            value, _, position, terminator = self._split_and_merge(
                text, position, _ARGUMENT
            )
            arguments.append(value)
            labels.append(text[start : position - 1])
            if terminator == ")":
                break

        function = FUNCTIONS[name]
        expression = f"{name}({','.join(labels)})"
        expression_id = self._next_expression_id()
        self._log_evaluation(expression_id, expression)
        value = function(arguments, expression, self.settings)
        self._write_intermediate(value, expression_id, expression)
        return value, function.kind, expression_id, position

    def _action(self, text: str, position: int, stop: int):
        """Returns the action, the position after it, and the terminator."""
        if position >= len(text):
            if stop == _LINE:
                return operations.END, position, None
            raise ScriptSyntaxError(f"Missing ')' in expression: {text}")

        character = text[position]
        if character == ")":
            if stop == _LINE:
                raise ScriptSyntaxError(f"Unexpected ')' in expression: {text}")
            return operations.END, position + 1, ")"
        if character == ",":
            if stop != _ARGUMENT:
                raise ScriptSyntaxError(f"Unexpected ',' in expression: {text}")
            return operations.END, position + 1, ","
        for action in operations.ACTIONS:
            if text.startswith(action, position):
                return action, position + len(action), None
        raise ScriptSyntaxError(f"Invalid symbol '{character}' in expression: {text}")

    def _log_evaluation(self, expression_id: str, expression: str) -> None:
        if self.settings.writes_intermediate_results:
            logger.info(
                f"Evaluating expression '{expression_id} = {expression}'", indent_level=1
            )

    def _write_intermediate(
        self, value: GridValue, expression_id: str, expression: str
    ) -> None:
        if not self.settings.writes_intermediate_results:
            return
        if isinstance(value, ConstantGrid):
            logger.info(f"Result is a constant value: {value.value:g}", indent_level=2)
            return
        path = self.settings.debug_path / f"{expression_id}.IDF"
        metadata = Metadata(
            f"Intermediate result {expression_id}: {expression}",
            "Automatically generated with debug mode of idfexp",
        )
        value.write(
            path, nodata=self.settings.nodata, dtype=self.settings.dtype, metadata=metadata
        )
        logger.info(f"Intermediate result written to: {path.name}", indent_level=2)


def parse(
    expression: str,
    variables: Mapping[str, Optional[GridValue]],
    settings: InterpreterSettings,
) -> Tuple[GridValue, ExpressionType]:
    """Evaluate a single expression, see :meth:`ExpressionParser.parse`."""
    return ExpressionParser(settings).parse(expression, variables)
