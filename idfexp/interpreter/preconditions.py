"""
Preconditions of script lines: ``#IF [NOT] EXIST <path>: <line>``.
"""

import re
from typing import Tuple

from idfexp import util
from idfexp.errors import ScriptSyntaxError
from idfexp.interpreter import lexer
from idfexp.logging import logger
from idfexp.settings import InterpreterSettings

_CLAUSE = re.compile(
    r"^(?P<negated>not\s+)?(?P<keyword>\S+)\s*(?P<argument>.*)$", re.IGNORECASE
)
_NESTED = re.compile(r"#if", re.IGNORECASE)
# A colon that is not part of a drive letter such as C:\
_SEPARATOR = re.compile(r":(?![\\/])")


def split_precondition(line: str) -> Tuple[str, str]:
    """
    Split ``#IF <clause>: <residual>`` on the last colon before the
    assignment, or before a nested ``#IF``. Without either, the line is split
    on the first colon that is not a drive letter colon.
    """
    body = line[3:]
    nested = _NESTED.search(body)
    assignment = lexer.ASSIGNMENT.search(body)
    if nested is not None:
        limit = nested.start()
    elif assignment is not None:
        limit = assignment.start()
    else:
        separator = _SEPARATOR.search(body)
        limit = len(body) if separator is None else separator.end()
    colon = body.rfind(":", 0, limit)
    if colon == -1:
        raise ScriptSyntaxError(f"Missing ':' after precondition: {line}")
    return body[:colon].strip(), body[colon + 1 :].strip()


def _exists(argument: str, settings: InterpreterSettings) -> bool:
    text = util.expand_environment_variables(argument).replace('"', "").strip()
    if text == "":
        raise ScriptSyntaxError("Missing path for EXIST-precondition")
    return util.resolve_path(text, settings.base_path).exists()


def evaluate(clause: str, settings: InterpreterSettings) -> bool:
    """Evaluate a precondition clause: ``[NOT] EXIST <path>``."""
    parsed = _CLAUSE.match(clause)
    if clause == "" or parsed is None:
        raise ScriptSyntaxError("Missing precondition after #IF")
    keyword = parsed.group("keyword").upper()
    match keyword:
        case "EXIST":
            result = _exists(parsed.group("argument"), settings)
        case _:
            raise ScriptSyntaxError(f"Unknown precondition keyword: {keyword}")
    if parsed.group("negated"):
        return not result
    return result


def resolve(line: str, settings: InterpreterSettings) -> str:
    """
    Resolve the preconditions of a line.

    Returns
    -------
    residual: str
        The line without its preconditions, or an empty string when a
        precondition is not met.
    """
    while lexer.is_precondition(line):
        clause, residual = split_precondition(line)
        if not evaluate(clause, settings):
            if settings.debug:
                logger.info(
                    f"Skipped line, precondition not met: {clause}", indent_level=1
                )
            return ""
        line = residual
    return line
