"""
Lexical rules of scripts: logical lines, line classification, assignment
splitting and substitution of loop index references (``%%i``).
"""

import re
from typing import List, Sequence, Tuple

from idfexp.errors import ScriptSyntaxError
from idfexp.logging import logger
from idfexp.util.path import expand_environment_variables, to_path

# A single "=", not part of "==", "!=", ">=" or "<="
ASSIGNMENT = re.compile(r"(?<![=!<>])=(?!=)")
_FOR = re.compile(r"^for\s", re.IGNORECASE)
_ENDFOR = re.compile(r"^endfor\b", re.IGNORECASE)
_INDEX_OPERATORS = "+-*/"
_COMMENT_PREFIXES = ("//", "'")

LOOP_REFERENCE = "%%"


def read_logical_line(lines: Sequence[str], index: int) -> Tuple[str, int]:
    """
    Read the line at index, joined with the lines that follow when it ends with
    the continuation character ``_``.

    Returns
    -------
    line: str
        The trimmed logical line.
    next_index: int
        Index of the line after the logical line.
    """
    line = lines[index].strip()
    index += 1
    while line.endswith("_") and index < len(lines):
        line = line[:-1] + lines[index].strip()
        index += 1
    return line, index


def is_comment(line: str) -> bool:
    lower = line.lower()
    return lower == "rem" or lower.startswith("rem ") or line.startswith(_COMMENT_PREFIXES)


def strip_comment(line: str) -> str:
    if line.lower().startswith("rem"):
        return line[3:].strip()
    elif line.startswith("//"):
        return line[2:].strip()
    return line[1:].strip()


def is_for(line: str) -> bool:
    return _FOR.match(line) is not None


def is_endfor(line: str) -> bool:
    return _ENDFOR.match(line) is not None


def is_precondition(line: str) -> bool:
    return line[:3].lower() == "#if"


def has_assignment(line: str) -> bool:
    return ASSIGNMENT.search(line) is not None


def split_assignment(line: str) -> Tuple[str, str]:
    """
    Split ``<name>=<expression>`` on its single assignment symbol. Comparison
    operators ``==``, ``!=``, ``>=`` and ``<=`` are not taken as assignment.
    """
    parts = ASSIGNMENT.split(line)
    if len(parts) != 2:
        raise ScriptSyntaxError("Exactly one equal sign is expected")
    name, expression = (part.strip() for part in parts)
    if name == "":
        raise ScriptSyntaxError("Missing variable name before equal sign")
    if expression == "":
        raise ScriptSyntaxError("Missing expression after equal sign")
    return name, expression


def parse_target(target: str) -> Tuple[str, str]:
    """
    Split the left hand side of an assignment into a variable name and an
    output subpath (empty when absent). An ``.IDF`` extension is stripped.

    >>> parse_target("results\\\\head.IDF")
    ('head', 'results')
    """
    path = to_path(expand_environment_variables(target))
    name = path.name
    if name.lower().endswith(".idf"):
        name = name[:-4]
    if name == "":
        raise ScriptSyntaxError(f"Invalid variable name: {target}")
    subpath = "" if str(path.parent) == "." else str(path.parent)
    return name, subpath


def _find_frame(text: str, position: int, frames):
    """Frame of which the name starts at position: longest name, then innermost."""
    candidates = sorted(reversed(frames), key=lambda frame: len(frame.name), reverse=True)
    for frame in candidates:
        if text.startswith(frame.name, position):
            return frame
    return None


def _to_int(value: str, description: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ScriptSyntaxError(f"Integer value expected for {description}: {value}")


def _substitute_expression(inner: str, frames) -> Tuple[str, bool]:
    """Evaluate ``name<op>value`` of a ``%%(name<op>value)`` reference."""
    inner = inner.strip()
    frame = _find_frame(inner, 0, frames)
    if frame is None:
        return "", False
    rest = inner[len(frame.name) :].strip()
    if rest == "" or rest[0] not in _INDEX_OPERATORS:
        raise ScriptSyntaxError(f"Invalid loop index expression: %%({inner})")
    operator = rest[0]
    iterate = _to_int(frame.value, f"loop index {frame.name}")
    value = _to_int(rest[1:].strip(), f"loop index expression %%({inner})")
    match operator:
        case "+":
            result = iterate + value
        case "-":
            result = iterate - value
        case "*":
            result = iterate * value
        case "/":
            # Legacy behaviour of scripts: "/" adds the value
            result = iterate + value
            logger.warning(
                f"'/' in loop index expression %%({inner}) adds {value}, it does not divide",
                indent_level=1,
            )
    return str(result), True


def substitute_loop_indices(line: str, frames: List) -> str:
    """
    Replace references to the current iterate of active loops.

    Recognized forms, in order: ``%%(i+1)`` with an operator ``+``, ``-``,
    ``*`` or ``/``; ``%%00i``, zero padded to the number of zeros; ``%%i``.
    References to names of no active loop are left as is.

    Parameters
    ----------
    line: str
    frames: list of LoopFrame
        Active loops, innermost last.

    Returns
    -------
    substituted: str
    """
    if not frames or LOOP_REFERENCE not in line:
        return line

    parts = []
    position = 0
    while True:
        start = line.find(LOOP_REFERENCE, position)
        if start == -1:
            break
        parts.append(line[position:start])
        cursor = start + len(LOOP_REFERENCE)

        if line.startswith("(", cursor):
            close = line.find(")", cursor)
            if close != -1:
                substituted, found = _substitute_expression(line[cursor + 1 : close], frames)
                if found:
                    parts.append(substituted)
                    position = close + 1
                    continue

        zeros = len(line[cursor:]) - len(line[cursor:].lstrip("0"))
        frame = _find_frame(line, cursor + zeros, frames)
        if frame is None and zeros > 0:
            # A loop name may start with a zero
            zeros = 0
            frame = _find_frame(line, cursor, frames)
        if frame is None:
            parts.append(LOOP_REFERENCE)
            position = cursor
            continue
        value = frame.value.zfill(zeros) if zeros > 0 else frame.value
        parts.append(value)
        position = cursor + zeros + len(frame.name)

    parts.append(line[position:])
    return "".join(parts)
