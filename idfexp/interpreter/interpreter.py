"""
Interpreter of scripts with grid expressions.

A script is processed line by line. Each line is joined with its continuation
lines. Remarks are skipped as written. Other lines are substituted for loop
indices and resolved for preconditions, and then handled as a remark, a FOR-
or ENDFOR-line or an assignment.
"""

import pathlib
from typing import List, Optional, Sequence, Tuple, Union

from idfexp import util
from idfexp.errors import (
    MissingResourceError,
    QuietAbort,
    ScriptError,
    ScriptSyntaxError,
)
from idfexp.expressions import ExpressionParser, ExpressionType, open_idf
from idfexp.grid import ConstantGrid, GridValue
from idfexp.interpreter import lexer, loops, preconditions
from idfexp.interpreter.checker import check_script
from idfexp.interpreter.memory import release_memory
from idfexp.interpreter.variables import Variable, VariableTable
from idfexp.logging import logger
from idfexp.logging.logging_decorators import standard_log_decorator
from idfexp.metadata import Metadata
from idfexp.settings import InterpreterSettings, QuietMode

# Characters that make an expression ending in .idf more than a file name
_OPERATOR_CHARACTERS = frozenset("+*^=!<>&|,()")


class Interpreter:
    """
    Runs scripts with grid expressions.

    Parameters
    ----------
    settings: InterpreterSettings

    Examples
    --------
    >>> settings = InterpreterSettings(base_path="model", output_path="results")
    >>> Interpreter(settings).process_file("model/heads.ini")
    """

    def __init__(self, settings: InterpreterSettings):
        self.settings = settings
        self.parser = ExpressionParser(settings)
        self.variables = VariableTable(settings)
        self.loops: List[loops.LoopFrame] = []
        self.script_path: Optional[pathlib.Path] = None
        self._lines: Sequence[str] = []

    @standard_log_decorator()
    def process_file(self, path: Union[str, pathlib.Path]) -> None:
        """
        Run a script file. Only ``.ini`` files are accepted.

        Raises
        ------
        ScriptError
            When a line of the script cannot be processed.
        QuietAbort
            When a file or variable is missing in quiet mode ``SILENT_EXIT``.
        """
        path = pathlib.Path(path)
        if path.suffix.lower() != ".ini":
            raise ScriptSyntaxError(f"Unknown input file extension: {path.suffix}")
        with open(path, encoding="utf-8") as f:
            script = f.read()
        self.script_path = path
        self.process_script(script)

    def process_script(self, script: str) -> None:
        """Run the lines of a script."""
        lines = script.splitlines()
        self._lines = lines
        self.variables = VariableTable(self.settings)
        self.loops = []

        if self.settings.debug and self.script_path is not None:
            self._write_expanded_script(lines)
        check_script(lines)

        index = 0
        while index < len(lines):
            line_number = index + 1
            line, index = lexer.read_logical_line(lines, index)
            try:
                index = self._process_line(line, index, line_number)
            except (QuietAbort, ScriptError):
                raise
            except Exception as e:
                raise ScriptError.from_exception(line_number, line, e) from e

        if self.loops:
            raise ScriptError(len(lines), lines[-1], "Missing ENDFOR for FOR-loop")
        logger.info("Finished processing script")

    def _process_line(self, line: str, index: int, line_number: int) -> int:
        """Process a logical line, returns the index of the next line to process."""
        # Remarks are free text, %% in a remark is not a loop index
        if lexer.is_comment(line):
            return self._remark(line, index)
        line = lexer.substitute_loop_indices(line, self.loops)
        if lexer.is_precondition(line):
            line = preconditions.resolve(line, self.settings)

        if line == "":
            return index
        elif lexer.is_comment(line):
            return self._remark(line, index)
        elif lexer.is_for(line):
            frame = loops.LoopFrame.parse(line, index, self.settings.base_path)
            if frame.is_exhausted:
                return loops.skip_loop(self._lines, index)
            self.loops.append(frame)
            return index
        elif lexer.is_endfor(line):
            if not self.loops:
                raise ScriptSyntaxError("ENDFOR without matching FOR")
            frame = self.loops.pop().advance()
            if frame.is_exhausted:
                return index
            self.loops.append(frame)
            return frame.resume_at
        elif lexer.has_assignment(line):
            self._assign(line, line_number)
            release_memory(self.variables, self.settings)
            return index
        raise ScriptSyntaxError("Invalid expression")

    def _remark(self, line: str, index: int) -> int:
        if self.settings.debug:
            logger.info(f"Remark: {lexer.strip_comment(line)}")
        return index

    def _assign(self, line: str, line_number: int) -> None:
        target, expression = lexer.split_assignment(line)
        name, subpath = lexer.parse_target(target)
        logger.info(f"Evaluating expression at line {line_number}: '{line}' ...")

        expanded = util.expand_environment_variables(expression)
        if self.settings.debug and expanded != expression:
            logger.info(
                f"Expression '{expression}' evaluated to: {expanded}", indent_level=1
            )

        try:
            value, kind = self._resolve(expanded)
        except MissingResourceError as e:
            match self.settings.quiet_mode:
                case QuietMode.SILENT_EXIT:
                    raise QuietAbort(str(e)) from e
                case QuietMode.SILENT_SKIP:
                    logger.warning(
                        f"{e}, variable '{name}' is not defined", indent_level=1
                    )
                    value, kind = None, ExpressionType.UNDEFINED
                case _:
                    raise

        if kind.is_computed and isinstance(value, ConstantGrid):
            logger.info(f"Result is a constant value: {value.value:g}", indent_level=1)
            kind = ExpressionType.CONSTANT

        variable = Variable(name, value, kind, subpath)
        if kind.is_computed:
            self._write_result(variable, expanded)
        self.variables[name] = variable

    def _resolve(self, expression: str) -> Tuple[GridValue, ExpressionType]:
        if expression.lower().endswith(".idf") and not (
            _OPERATOR_CHARACTERS & set(expression)
        ):
            path = util.resolve_path(expression.replace('"', "").strip(), self.settings.base_path)
            if not path.is_file():
                raise MissingResourceError(f"IDF-file not found: {expression}")
            return open_idf(path, self.settings), ExpressionType.FILE

        variable = self.variables.get(expression)
        if variable is not None:
            if variable.value is None:
                raise MissingResourceError(f"Variable has no value: {expression}")
            value = variable.value.copy()
            if isinstance(value, ConstantGrid):
                return value, ExpressionType.CONSTANT
            return value, ExpressionType.VARIABLE

        return self.parser.parse(expression, self.variables.values_by_name())

    def _write_result(self, variable: Variable, expression: str) -> None:
        if self.settings.is_rounded:
            variable.value = variable.value.rounded(self.settings.decimal_count)
        if self.settings.add_metadata:
            variable.metadata = Metadata(
                f"Expression evaluation using IDF files: {expression}",
                "Automatically generated with idfexp",
                source=self.script_path if self.script_path is not None else "",
            )
        variable.persist(self.settings)
        logger.info(
            f"Expression result has been written to: {variable.path.name}", indent_level=1
        )

    def _write_expanded_script(self, lines: Sequence[str]) -> pathlib.Path:
        """Write the script with expanded environment variables to the output path."""
        path = self.settings.output_path / util.add_postfix(self.script_path, "_expanded").name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(util.expand_environment_variables(line) + "\n")
        logger.info(f"Script with expanded environment variables written to: {path}")
        return path
