import numpy as np
import pytest

from idfexp import idf, regrid
from idfexp.grid import ConstantGrid, Grid
from idfexp.metadata import Metadata
from idfexp.settings import Extent

from .fixtures.idf_fixture import make_grid


def test_constant_grid():
    constant = ConstantGrid(2)
    assert constant.value == 2.0
    assert not constant.is_nodata
    assert ConstantGrid(np.nan).is_nodata
    assert constant.release() is False
    assert constant.copy() is not constant
    assert constant.copy().value == 2.0


def test_constant_grid_allocate():
    like = Grid(make_grid(np.zeros((2, 3))))
    allocated = ConstantGrid(5.0).allocate(like)
    assert allocated.data.shape == (2, 3)
    assert (allocated.data.values == 5.0).all()


def test_open_is_lazy(model_dir):
    grid = Grid.open(model_dir / "ramp.idf")
    assert grid.path == model_dir / "ramp.idf"
    assert grid.is_persisted
    assert grid.data.chunks is not None
    assert grid.nodata == pytest.approx(1.0e20)
    assert grid.extent == Extent(0.0, 0.0, 4.0, 3.0)
    assert grid.cellsize == 1.0


def test_open_fill_value(model_dir):
    grid = Grid.open(model_dir / "holes.idf", fill_value=0.0)
    assert (grid.data.values[:, 0] == 0.0).all()
    # NaN means the NoData value of the file itself
    grid = Grid.open(model_dir / "holes.idf", fill_value=np.nan)
    assert grid.fill_value == -9999.0
    assert (grid.data.values[:, 0] == -9999.0).all()


def test_release_and_reload(model_dir):
    grid = Grid.open(model_dir / "ramp.idf").load()
    assert grid.is_loaded
    assert grid.release() is True
    assert not grid.is_loaded
    assert grid.release() is False
    assert grid.data.values[0, 0] == 1.0


def test_release_unpersisted():
    grid = Grid(make_grid(np.ones((2, 2))))
    assert not grid.is_persisted
    assert grid.release() is False
    assert grid.is_loaded


def test_write(tmp_path):
    grid = Grid(make_grid(np.ones((2, 2))))
    path = tmp_path / "sub" / "ones.IDF"
    grid.write(path, metadata=Metadata("ones"))
    assert path.is_file()
    assert Metadata.path(path).is_file()
    assert grid.path == path
    assert grid.is_persisted
    assert grid.release()
    assert grid.data.values.sum() == 4.0


def test_metadata_is_utf8(tmp_path):
    path = tmp_path / "ones.IDF"
    Metadata("Stijghoogte in m³/d", source="Ü.ini").write(path)
    content = Metadata.path(path).read_text(encoding="utf-8")
    assert "Description=Stijghoogte in m³/d" in content
    assert "Source=Ü.ini" in content


def test_write_own_nodata(tmp_path):
    values = np.ones((2, 2))
    values[0, 0] = np.nan
    grid = Grid(make_grid(values), nodata=-1.0)
    path = grid.write(tmp_path / "nodata.IDF", nodata=1.0e20)
    assert idf.header(path)["nodata"] == -1.0


def test_write_over_own_file(model_dir):
    path = model_dir / "ramp.idf"
    grid = Grid.open(path)
    increased = grid.with_data(grid.data + 1.0)
    increased.write(path)
    assert idf.open(path).values[0, 0] == 2.0


def test_copy_keeps_path(model_dir):
    grid = Grid.open(model_dir / "ramp.idf")
    copied = grid.copy()
    assert copied is not grid
    assert copied.path == grid.path
    assert copied.is_persisted


def test_with_data_keeps_nodata(model_dir):
    grid = Grid.open(model_dir / "holes.idf")
    other = grid.with_data(grid.data * 2)
    assert other.nodata == -9999.0
    assert other.path is None
    assert not other.is_persisted


def test_rounded():
    grid = Grid(make_grid([[1.234, 5.678]]))
    assert np.allclose(grid.rounded(1).data.values, [[1.2, 5.7]])


def test_fit_same_extent_returns_self():
    grid = Grid(make_grid(np.ones((2, 2))))
    assert grid.fit(Extent(0.0, 0.0, 2.0, 2.0)) is grid


def test_fit_other_extent():
    grid = Grid(make_grid(np.ones((2, 2))))
    fitted = grid.fit(Extent(1.0, 0.0, 3.0, 2.0))
    assert fitted.extent == Extent(1.0, 0.0, 3.0, 2.0)
    assert np.isnan(fitted.data.values[:, 1]).all()


def test_scale():
    grid = Grid(make_grid(np.ones((4, 4))))
    assert grid.scale(2.0).cellsize == 2.0
    assert grid.scale(0.5).cellsize == 0.5
    same = grid.scale(1.0)
    assert same is not grid
    assert same.cellsize == 1.0


def test_scale_methods():
    grid = Grid(make_grid(np.ones((2, 2))))
    divided = grid.scale(0.5, downscale_method=regrid.DownscaleMethod.DIVIDE)
    assert np.allclose(divided.data.values, 0.25)
    summed = grid.scale(2.0, upscale_method=regrid.UpscaleMethod.SUM)
    assert summed.data.values[0, 0] == 4.0


def test_clip_and_bounding_box():
    values = np.full((3, 3), np.nan)
    values[1, 1] = 1.0
    grid = Grid(make_grid(values))
    assert grid.clip(Extent(10.0, 10.0, 11.0, 11.0)) is None
    assert grid.bounding_box().extent == Extent(1.0, 1.0, 2.0, 2.0)
    assert Grid(make_grid(np.full((2, 2), np.nan))).bounding_box() is None
