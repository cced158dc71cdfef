"""Checks of the structure of a script, before it is run."""

import re
from typing import Sequence

from idfexp.errors import ScriptError
from idfexp.interpreter import lexer

_GUARDED_LOOP = re.compile(r":\s*(for\s|endfor\b)", re.IGNORECASE)


def check_script(lines: Sequence[str]) -> None:
    """
    Check that FOR- and ENDFOR-lines are balanced, and that they have no
    precondition.

    Raises
    ------
    ScriptError
        At the first line that breaks a rule.
    """
    open_loops = []
    index = 0
    while index < len(lines):
        line_number = index + 1
        line, index = lexer.read_logical_line(lines, index)
        if lexer.is_precondition(line) and _GUARDED_LOOP.search(line):
            raise ScriptError(
                line_number, line, "FOR- and ENDFOR-lines cannot have a precondition"
            )
        if lexer.is_for(line):
            open_loops.append((line_number, line))
        elif lexer.is_endfor(line):
            if not open_loops:
                raise ScriptError(line_number, line, "ENDFOR without matching FOR")
            open_loops.pop()

    if open_loops:
        line_number, line = open_loops[-1]
        raise ScriptError(line_number, line, "Missing ENDFOR for FOR-loop")
