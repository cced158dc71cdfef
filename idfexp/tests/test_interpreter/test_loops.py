import dataclasses

import pytest

from idfexp.errors import ScriptSyntaxError
from idfexp.interpreter import loops
from idfexp.interpreter.loops import LoopFrame


def test_parse(tmp_path):
    frame = LoopFrame.parse("FOR i = 1 TO 3", 5, tmp_path)
    assert frame.name == "i"
    assert frame.iterates == ("1", "2", "3")
    assert frame.value == "1"
    assert frame.resume_at == 5


def test_parse_case_insensitive(tmp_path):
    frame = LoopFrame.parse("for layer=2 to 3", 0, tmp_path)
    assert frame.name == "layer"
    assert frame.iterates == ("2", "3")


def test_parse_environment_variables(tmp_path, monkeypatch):
    monkeypatch.setenv("IDFEXP_LOOP", "ilay")
    monkeypatch.setenv("IDFEXP_FIRST", "2")
    monkeypatch.setenv("IDFEXP_NLAY", "4")
    frame = LoopFrame.parse("FOR %IDFEXP_LOOP% = %IDFEXP_FIRST% TO %IDFEXP_NLAY%", 0, tmp_path)
    assert frame.name == "ilay"
    assert frame.iterates == ("2", "3", "4")


def test_parse_empty_range(tmp_path):
    frame = LoopFrame.parse("FOR i = 3 TO 1", 0, tmp_path)
    assert frame.iterates == ()
    assert frame.is_exhausted


def test_advance():
    frame = LoopFrame("i", ("1", "2"))
    advanced = frame.advance()
    assert advanced.value == "2"
    assert frame.value == "1"
    assert advanced.advance().is_exhausted
    with pytest.raises(dataclasses.FrozenInstanceError):
        frame.index = 1


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("FOR i 1 TO 3", "=-symbol missing"),
        ("FOR = 1 TO 3", "=-symbol missing"),
        ("FOR i = 1 3", "TO-keyword missing"),
        ("FOR i = a TO 3", "invalid initial index"),
        ("FOR i = 1 TO b", "invalid last index"),
    ],
)
def test_parse_invalid(tmp_path, line, message):
    with pytest.raises(ScriptSyntaxError, match=message):
        LoopFrame.parse(line, 0, tmp_path)


def test_parse_count(model_dir):
    frame = LoopFrame.parse("FOR i = 1 TO COUNT(*.idf)", 0, model_dir)
    assert frame.iterates == ("1", "2", "3")


@pytest.mark.parametrize(
    "argument", ["model", '"model"', "model,*.idf", "model/*.IDF", "model\\*.idf"]
)
def test_count(model_dir, argument):
    assert loops.count(argument, model_dir.parent) == 3


def test_count_filter(model_dir):
    assert loops.count("model,r*.idf", model_dir.parent) == 1
    assert loops.count("model,*.ipf", model_dir.parent) == 0


def test_count_environment_variable(model_dir, monkeypatch):
    monkeypatch.setenv("IDFEXP_MODEL", str(model_dir))
    assert loops.count("%IDFEXP_MODEL%", model_dir) == 3


def test_count_invalid_path(tmp_path):
    with pytest.raises(ScriptSyntaxError, match="invalid path for count"):
        loops.count("missing", tmp_path)


def test_skip_loop():
    lines = [
        "FOR i = 1 TO 0",
        "  FOR j = 1 TO 2",
        "    a = 1",
        "  ENDFOR",
        "ENDFOR",
        "b = 2",
    ]
    assert loops.skip_loop(lines, 1) == 5


def test_skip_loop_missing_endfor():
    with pytest.raises(ScriptSyntaxError, match="Missing ENDFOR"):
        loops.skip_loop(["FOR i = 1 TO 0", "a = 1"], 1)
