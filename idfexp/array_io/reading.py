import pathlib

import dask
import dask.array
import numpy as np
import xarray as xr

from idfexp import util


def _to_nan(a, nodata):
    """Change all nodata values in the array to NaN"""
    # it needs to be NaN for xarray to deal with it properly
    # no need to store the nodata value if it is always NaN
    if np.isnan(nodata):
        return a
    else:
        isnodata = np.isclose(a, nodata)
        a[isnodata] = np.nan
        return a


def _dask(path, attrs, _read):
    """
    Read a single IDF file to a dask.array

    Parameters
    ----------
    path : str or Path
        Path to the IDF file to be read
    attrs : dict
        A dict as returned by idfexp.idf.header.
    _read : callable
        Function that reads the values of the file to a numpy.ndarray.

    Returns
    -------
    dask.array
        A float dask.array with shape (nrow, ncol) of the values
        in the IDF file. On opening all nodata values are changed
        to NaN in the dask.array.
    """
    headersize = attrs["headersize"]
    nrow = attrs["nrow"]
    ncol = attrs["ncol"]
    dtype = attrs["dtype"]
    nodata = attrs["nodata"]

    # Dask delayed caches the input arguments. If the working directory changes
    # before .compute(), the file cannot be found if the path is relative.
    abspath = pathlib.Path(path).resolve()
    # dask.delayed requires currying
    a = dask.delayed(_read)(abspath, headersize, nrow, ncol, nodata, dtype)
    return dask.array.from_delayed(a, shape=(nrow, ncol), dtype=dtype)


def _load(path, _read, header):
    """Read a single 2D IDF file lazily to a xarray.DataArray"""
    attrs = header(path)
    bounds = (attrs["xmin"], attrs["xmax"], attrs["ymin"], attrs["ymax"])
    cellsizes = (attrs["dx"], attrs["dy"])
    coords = util._xycoords(bounds, cellsizes)
    dask_array = _dask(path, attrs, _read)

    out = xr.DataArray(
        dask_array, coords, ("y", "x"), name=pathlib.Path(path).stem
    )
    out.attrs["nodata"] = attrs["nodata"]
    if "top" in attrs:
        out.attrs["top"] = attrs["top"]
        out.attrs["bot"] = attrs["bot"]
    return out
