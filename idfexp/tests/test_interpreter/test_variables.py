import numpy as np
import pytest

from idfexp import idf
from idfexp.expressions import ExpressionType
from idfexp.grid import ConstantGrid, Grid
from idfexp.interpreter.memory import release_memory
from idfexp.interpreter.variables import Variable, VariableTable, nodata_constant
from idfexp.metadata import Metadata
from idfexp.settings import InterpreterSettings

from ..fixtures.idf_fixture import make_grid


@pytest.fixture
def settings(model_dir, tmp_path):
    return InterpreterSettings(base_path=model_dir, output_path=tmp_path / "output")


def computed(name, values=((1.0, 2.0), (3.0, 4.0)), **kwargs):
    return Variable(name, Grid(make_grid(values)), ExpressionType.ARITHMETIC, **kwargs)


@pytest.mark.parametrize(
    ("value", "kind", "persisted"),
    [
        (None, ExpressionType.UNDEFINED, True),
        (ConstantGrid(1.0), ExpressionType.CONSTANT, True),
        (ConstantGrid(1.0), ExpressionType.ARITHMETIC, True),
        (Grid(make_grid([[1.0]])), ExpressionType.FILE, True),
        (Grid(make_grid([[1.0]])), ExpressionType.VARIABLE, False),
        (Grid(make_grid([[1.0]])), ExpressionType.COMPLEX, False),
    ],
)
def test_is_persisted(value, kind, persisted):
    assert Variable("a", value, kind).is_persisted is persisted


def test_output_path(settings, tmp_path):
    assert computed("a").output_path(settings) == settings.output_path / "a.IDF"
    nested = computed("a", subpath="sub\\dir")
    assert nested.output_path(settings) == settings.output_path / "sub" / "dir" / "a.IDF"
    absolute = computed("a", subpath=str(tmp_path / "elsewhere"))
    assert absolute.output_path(settings) == tmp_path / "elsewhere" / "a.IDF"


def test_persist(settings):
    variable = computed("a", metadata=Metadata("a"))
    assert variable.persist(settings)
    assert variable.path == settings.output_path / "a.IDF"
    assert variable.path.is_file()
    assert Metadata.path(variable.path).is_file()
    assert np.array_equal(idf.open(variable.path).values, [[1.0, 2.0], [3.0, 4.0]])
    assert not variable.persist(settings)


def test_persist_dtype_and_nodata(model_dir, tmp_path):
    settings = InterpreterSettings(
        base_path=model_dir, output_path=tmp_path, dtype=np.float64, nodata=-1.0
    )
    variable = computed("a", values=((1.0, np.nan),))
    variable.persist(settings)
    header = idf.header(variable.path)
    assert header["nodata"] == -1.0
    assert header["dtype"] == "float64"


def test_persist_nothing(settings):
    assert not Variable("a", None, ExpressionType.UNDEFINED).persist(settings)
    assert not Variable("c", ConstantGrid(1.0), ExpressionType.CONSTANT).persist(settings)


def test_release(settings):
    variable = computed("a")
    assert not variable.release()
    variable.persist(settings)
    assert variable.release()
    assert not variable.value.is_loaded
    assert not Variable("a", None, ExpressionType.UNDEFINED).release()


def test_nodata_constant(model_dir):
    assert np.isnan(nodata_constant(InterpreterSettings()).value)
    settings = InterpreterSettings(nodata_as_value=True)
    assert nodata_constant(settings).value == -9999.0
    settings = InterpreterSettings(nodata_as_value=True, nodata_value=0.0)
    assert nodata_constant(settings).value == 0.0


def test_variable_table(settings):
    table = VariableTable(settings)
    assert sorted(table) == ["NaN", "NoData"]
    table["a"] = Variable("a", ConstantGrid(2.0), ExpressionType.CONSTANT)
    values = table.values_by_name()
    assert np.isnan(values["NoData"].value)
    assert values["a"].value == 2.0


def test_release_memory(settings, model_dir, recording_logger):
    table = VariableTable(settings)
    table["a"] = computed("a")
    table["r"] = Variable("r", Grid.open(model_dir / "ramp.idf").load(), ExpressionType.FILE)
    table["u"] = Variable("u", None, ExpressionType.UNDEFINED)
    assert release_memory(table, settings) == 2
    assert (settings.output_path / "a.IDF").is_file()
    assert not (settings.output_path / "r.IDF").exists()
    assert not table["a"].value.is_loaded
    assert not table["r"].value.is_loaded
    # Nothing left to release
    assert release_memory(table, settings) == 0
    assert recording_logger.records == []


def test_release_memory_logs_in_debug(model_dir, tmp_path, recording_logger):
    settings = InterpreterSettings(base_path=model_dir, output_path=tmp_path, debug=True)
    table = VariableTable(settings)
    table["a"] = computed("a")
    release_memory(table, settings)
    assert recording_logger.contains("Released memory of 1 grid(s)", "info")
