import pathlib

import numpy as np
import pytest

from idfexp.settings import Extent, InterpreterSettings, QuietMode

from .fixtures.idf_fixture import write_grid


def test_extent_invalid():
    with pytest.raises(ValueError, match="Invalid extent"):
        Extent(10.0, 0.0, 0.0, 10.0)


def test_extent_str():
    assert str(Extent(0.0, 1.0, 2.5, 3.0)) == "(0,1,2.5,3)"


def test_extent_contains_union_intersection():
    a = Extent(0.0, 0.0, 10.0, 10.0)
    b = Extent(5.0, 5.0, 15.0, 15.0)
    assert a.contains(Extent(1.0, 1.0, 9.0, 9.0))
    assert a.contains(a)
    assert not a.contains(b)
    assert a.union(b) == Extent(0.0, 0.0, 15.0, 15.0)
    assert a.intersection(b) == Extent(5.0, 5.0, 10.0, 10.0)
    assert a.intersection(Extent(20.0, 20.0, 30.0, 30.0)) is None
    assert a.equals(Extent(0.0, 0.0, 10.0, 10.0))


def test_extent_parse_values():
    assert Extent.parse("0, 1, 2, 3") == Extent(0.0, 1.0, 2.0, 3.0)


@pytest.mark.parametrize("text", ["0,1,2", "a,b,c,d"])
def test_extent_parse_invalid(text):
    with pytest.raises(ValueError):
        Extent.parse(text)


def test_extent_parse_idf(tmp_path):
    write_grid(tmp_path / "extent.idf", np.ones((2, 3)), xmin=10.0, ymax=20.0)
    assert Extent.parse("extent.idf", tmp_path) == Extent(10.0, 18.0, 13.0, 20.0)
    with pytest.raises(ValueError, match="not found"):
        Extent.parse("missing.idf", tmp_path)


def test_settings_defaults():
    settings = InterpreterSettings(base_path="model")
    assert settings.base_path == pathlib.Path("model")
    assert settings.output_path == pathlib.Path("model")
    assert settings.quiet_mode == QuietMode.OFF
    assert not settings.is_rounded
    assert not settings.writes_intermediate_results
    assert settings.debug_path == pathlib.Path("model") / "debug"
    assert settings.dtype == np.float32


def test_settings_debug_writes_intermediate_results():
    assert InterpreterSettings(debug=True).writes_intermediate_results
    assert InterpreterSettings(write_intermediate_results=True).writes_intermediate_results


def test_settings_is_frozen():
    settings = InterpreterSettings()
    with pytest.raises(AttributeError):
        settings.debug = True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"decimal_count": -1},
        {"quiet_mode": 1},
        {"dtype": np.int32},
    ],
)
def test_settings_invalid(kwargs):
    with pytest.raises(ValueError):
        InterpreterSettings(**kwargs)


def test_nodata_calculation_value():
    assert InterpreterSettings().nodata_calculation_value(-9999.0) == -9999.0
    assert InterpreterSettings(nodata_value=0.0).nodata_calculation_value(-9999.0) == 0.0
