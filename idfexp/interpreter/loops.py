"""FOR-loops of scripts."""

import dataclasses
import pathlib
import re
from dataclasses import dataclass
from typing import Sequence, Tuple

from idfexp import util
from idfexp.errors import ScriptSyntaxError
from idfexp.interpreter import lexer

_TO = re.compile(r"\s+to\s+", re.IGNORECASE)
_COUNT = re.compile(r"^count\((?P<argument>.*)\)$", re.IGNORECASE)


@dataclass(frozen=True)
class LoopFrame:
    """
    State of one iteration of an active FOR-loop.

    Parameters
    ----------
    name: str
        Name of the loop variable.
    iterates: tuple of str
        All values of the loop variable.
    index: int
        Index of the current iterate.
    resume_at: int
        Index of the script line just after the FOR-line.
    """

    name: str
    iterates: Tuple[str, ...]
    index: int = 0
    resume_at: int = 0

    @property
    def value(self) -> str:
        return self.iterates[self.index]

    @property
    def is_exhausted(self) -> bool:
        return self.index >= len(self.iterates)

    def advance(self) -> "LoopFrame":
        return dataclasses.replace(self, index=self.index + 1)

    @classmethod
    def parse(cls, line: str, resume_at: int, base_path: pathlib.Path) -> "LoopFrame":
        """
        Parse ``FOR <name>=<start> TO <end>``, with end an integer or
        ``count(<path>[,<filter>])``.
        """
        definition = util.expand_environment_variables(line[3:]).strip()
        name, separator, bounds = definition.partition("=")
        name = name.strip()
        if separator == "" or name == "":
            raise ScriptSyntaxError(f"Error in FOR-expression, =-symbol missing: {line}")
        parts = _TO.split(bounds.strip(), maxsplit=1)
        if len(parts) != 2:
            raise ScriptSyntaxError(f"Error in FOR-expression, TO-keyword missing: {line}")
        start_text, end_text = (part.strip() for part in parts)

        try:
            start = int(start_text)
        except ValueError:
            raise ScriptSyntaxError(
                f"Error in FOR-expression, invalid initial index: {start_text}"
            )
        match = _COUNT.match(end_text)
        if match:
            end = count(match.group("argument"), base_path)
        else:
            try:
                end = int(end_text)
            except ValueError:
                raise ScriptSyntaxError(
                    f"Error in FOR-expression, invalid last index: {end_text}"
                )
        iterates = tuple(str(i) for i in range(start, end + 1))
        return cls(name, iterates, 0, resume_at)


def count(argument: str, base_path: pathlib.Path) -> int:
    """
    Number of files for ``count(<path>[,<filter>])``. Without a filter, the
    file name of path is used as filter when it has an extension.
    """
    argument = argument.replace('"', "").strip()
    path_text, _, pattern = argument.partition(",")
    path = util.path.to_path(util.expand_environment_variables(path_text.strip()))
    pattern = pattern.strip()
    if pattern == "":
        if path.suffix != "":
            pattern = path.name
            path = path.parent
        else:
            pattern = "*"
    directory = util.resolve_path(path, base_path)
    try:
        return util.count_files(directory, pattern)
    except NotADirectoryError as e:
        raise ScriptSyntaxError(
            f"Error in FOR-expression, invalid path for count()-expression: {argument}"
        ) from e


def skip_loop(lines: Sequence[str], index: int) -> int:
    """
    Index of the line after the ENDFOR that matches a FOR-line, with index the
    line after the FOR-line. Nested loops are skipped as a whole.
    """
    depth = 0
    while index < len(lines):
        line, index = lexer.read_logical_line(lines, index)
        if lexer.is_for(line):
            depth += 1
        elif lexer.is_endfor(line):
            if depth == 0:
                return index
            depth -= 1
    raise ScriptSyntaxError("Missing ENDFOR for FOR-loop")
