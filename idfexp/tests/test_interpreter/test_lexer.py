import pytest

from idfexp.errors import ScriptSyntaxError
from idfexp.interpreter import lexer
from idfexp.interpreter.loops import LoopFrame


@pytest.fixture
def frames():
    return [LoopFrame("i", ("1", "2", "3"), index=1), LoopFrame("ii", ("7", "8"), index=0)]


def test_read_logical_line():
    lines = ["a = 1 + _", "  2 _", "  * 3", "b = 3"]
    assert lexer.read_logical_line(lines, 0) == ("a = 1 + 2 * 3", 3)
    assert lexer.read_logical_line(lines, 3) == ("b = 3", 4)


def test_read_logical_line_continuation_at_end():
    assert lexer.read_logical_line(["a = b_"], 0) == ("a = b_", 1)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("REM a remark", True),
        ("rem", True),
        ("// a remark", True),
        ("' a remark", True),
        ("remainder = 1", False),
        ("a = 1", False),
    ],
)
def test_is_comment(line, expected):
    assert lexer.is_comment(line) is expected


def test_strip_comment():
    assert lexer.strip_comment("REM a remark") == "a remark"
    assert lexer.strip_comment("//a remark") == "a remark"
    assert lexer.strip_comment("' a remark") == "a remark"


def test_is_for_and_endfor():
    assert lexer.is_for("FOR i = 1 TO 3")
    assert lexer.is_for("for\ti=1 to 3")
    assert not lexer.is_for("format = 1")
    assert lexer.is_endfor("ENDFOR")
    assert lexer.is_endfor("endfor ")
    assert not lexer.is_endfor("endformat = 1")


def test_is_precondition():
    assert lexer.is_precondition("#IF EXIST a.idf: b = 1")
    assert lexer.is_precondition("#if exist a.idf: b = 1")
    assert not lexer.is_precondition("b = 1")


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("a = b", True),
        ("a = b==c", True),
        ("a = b<=c", True),
        ("a==b", False),
        ("a!=b", False),
        ("a>=b", False),
    ],
)
def test_has_assignment(line, expected):
    assert lexer.has_assignment(line) is expected


def test_split_assignment():
    assert lexer.split_assignment("a = if(b==NoData,1,b)") == ("a", "if(b==NoData,1,b)")
    assert lexer.split_assignment("a=b>=c") == ("a", "b>=c")


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("a = b = c", "Exactly one equal sign is expected"),
        (" = b", "Missing variable name before equal sign"),
        ("a = ", "Missing expression after equal sign"),
    ],
)
def test_split_assignment_invalid(line, message):
    with pytest.raises(ScriptSyntaxError, match=message):
        lexer.split_assignment(line)


def test_parse_target():
    assert lexer.parse_target("head") == ("head", "")
    assert lexer.parse_target("head.IDF") == ("head", "")
    assert lexer.parse_target("results\\layer1\\head.idf") == ("head", "results/layer1")


def test_parse_target_environment_variable(monkeypatch):
    monkeypatch.setenv("IDFEXP_RESULTS", "results")
    assert lexer.parse_target("%IDFEXP_RESULTS%\\head") == ("head", "results")


def test_parse_target_invalid():
    with pytest.raises(ScriptSyntaxError, match="Invalid variable name"):
        lexer.parse_target(".idf")


def test_substitute_without_frames():
    assert lexer.substitute_loop_indices("a%%i = 1", []) == "a%%i = 1"


def test_substitute_plain(frames):
    assert lexer.substitute_loop_indices("a%%i = b%%i.idf", frames) == "a2 = b2.idf"


def test_substitute_longest_name(frames):
    assert lexer.substitute_loop_indices("a%%ii = %%i", frames) == "a7 = 2"


def test_substitute_innermost(frames):
    frames.append(LoopFrame("i", ("5",)))
    assert lexer.substitute_loop_indices("%%i", frames) == "5"


def test_substitute_zero_padded(frames):
    assert lexer.substitute_loop_indices("l%%00i.idf", frames) == "l02.idf"
    assert lexer.substitute_loop_indices("l%%000i.idf", frames) == "l002.idf"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("%%(i+1)", "3"),
        ("%%(i-1)", "1"),
        ("%%(i*3)", "6"),
        ("%%( i + 10 )", "12"),
        ("l%%(ii+1).idf", "l8.idf"),
    ],
)
def test_substitute_expression(frames, line, expected):
    assert lexer.substitute_loop_indices(line, frames) == expected


def test_substitute_division_adds(frames, recording_logger):
    assert lexer.substitute_loop_indices("%%(i/2)", frames) == "4"
    assert recording_logger.contains("does not divide", "warning")


def test_substitute_unknown_loop(frames):
    assert lexer.substitute_loop_indices("%%j + %%(j+1)", frames) == "%%j + %%(j+1)"


@pytest.mark.parametrize("line", ["%%(i+x)", "%%(i%2)", "%%(i)"])
def test_substitute_invalid_expression(frames, line):
    with pytest.raises(ScriptSyntaxError):
        lexer.substitute_loop_indices(line, frames)


def test_substitute_non_integer_iterate():
    frames = [LoopFrame("i", ("a",))]
    with pytest.raises(ScriptSyntaxError, match="Integer value expected"):
        lexer.substitute_loop_indices("%%(i+1)", frames)
