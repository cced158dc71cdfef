import numpy as np
import pytest
import xarray as xr
from pytest import approx

from idfexp import idf, util


@pytest.fixture(scope="module", params=[np.float32, np.float64])
def test_da(request):
    nrow, ncol = 3, 4
    dx, dy = 1.0, -1.0
    xmin, xmax = 0.0, 4.0
    ymin, ymax = 0.0, 3.0
    coords = util._xycoords((xmin, xmax, ymin, ymax), (dx, dy))
    kwargs = {"name": "test", "coords": coords, "dims": ("y", "x")}
    data = np.ones((nrow, ncol), dtype=request.param)
    da = xr.DataArray(data, **kwargs)
    return da


@pytest.fixture(scope="module")
def test_da_nonequidistant():
    nrow, ncol = 3, 4
    dx = np.array([0.9, 1.1, 0.8, 1.2])
    dy = np.array([-1.3, -0.7, -1.0])
    xmin, xmax = 0.0, 4.0
    ymin, ymax = 0.0, 3.0
    coords = util._xycoords((xmin, xmax, ymin, ymax), (dx, dy))
    kwargs = {"name": "nonequidistant", "coords": coords, "dims": ("y", "x")}
    data = np.ones((nrow, ncol), dtype=np.float32)
    return xr.DataArray(data, **kwargs)


def test_header(test_da, tmp_path):
    path = tmp_path / "test.idf"
    idf.write(path, test_da, dtype=test_da.dtype.type)
    attrs = idf.header(path)
    assert attrs["ncol"] == 4
    assert attrs["nrow"] == 3
    assert attrs["xmin"] == approx(0.0)
    assert attrs["xmax"] == approx(4.0)
    assert attrs["ymin"] == approx(0.0)
    assert attrs["ymax"] == approx(3.0)
    assert attrs["dx"] == approx(1.0)
    assert attrs["dy"] == approx(-1.0)
    assert attrs["dtype"] == np.dtype(test_da.dtype).name


def test_saveopen(test_da, tmp_path):
    path = tmp_path / "test.idf"
    idf.write(path, test_da, dtype=test_da.dtype.type)
    da = idf.open(path)
    assert isinstance(da, xr.DataArray)
    assert da.name == "test"
    assert da.dims == ("y", "x")
    assert np.array_equal(da.values, test_da.values)
    assert np.allclose(da.x.values, test_da.x.values)
    assert np.allclose(da.y.values, test_da.y.values)


def test_open_is_lazy(test_da, tmp_path):
    path = tmp_path / "test.idf"
    idf.write(path, test_da)
    da = idf.open(path)
    assert da.chunks is not None


def test_saveopen_nonequidistant(test_da_nonequidistant, tmp_path):
    path = tmp_path / "nonequidistant.idf"
    idf.write(path, test_da_nonequidistant)
    da = idf.open(path)
    assert np.allclose(da.coords["dx"].values, test_da_nonequidistant.coords["dx"].values)
    assert np.allclose(da.coords["dy"].values, test_da_nonequidistant.coords["dy"].values)


def test_nodata_to_nan(test_da, tmp_path):
    path = tmp_path / "nodata.idf"
    da = test_da.copy()
    da[0, 0] = np.nan
    idf.write(path, da, nodata=-9999.0)
    attrs = idf.header(path)
    assert attrs["nodata"] == -9999.0

    back = idf.open(path)
    assert np.isnan(back.values[0, 0])
    assert back.attrs["nodata"] == -9999.0
    assert np.nansum(back.values) == approx(11.0)


def test_write_flips_increasing_y(test_da, tmp_path):
    path = tmp_path / "flipped.idf"
    da = test_da.copy()
    da.values[:] = np.arange(12).reshape(3, 4)
    idf.write(path, da.isel(y=slice(None, None, -1)))
    back = idf.open(path)
    assert np.array_equal(back.values, da.values)


def test_write_wrong_dims(tmp_path):
    da = xr.DataArray(np.ones((2, 2)), dims=("x", "y"))
    with pytest.raises(ValueError, match="Dimensions must be exactly"):
        idf.write(tmp_path / "wrong.idf", da)


def test_write_wrong_type(tmp_path):
    with pytest.raises(TypeError):
        idf.write(tmp_path / "wrong.idf", np.ones((2, 2)))


def test_open_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        idf.open(tmp_path / "missing.idf")


def test_header_invalid_file(tmp_path):
    path = tmp_path / "invalid.idf"
    path.write_bytes(b"\x00" * 64)
    with pytest.raises(ValueError, match="Not a supported IDF file"):
        idf.header(path)
