"""
Utility functions for dealing with the spatial location of rasters:
:func:`idfexp.util.spatial.coord_reference`,
:func:`idfexp.util.spatial.spatial_reference` and
:func:`idfexp.util.spatial.empty_2d`. Rasters are ``xarray.DataArray`` objects
with dims ``("y", "x")``, midpoint coordinates and scalar ``dx`` and ``dy``
coordinates (``dy`` negative).
"""

import collections
from typing import Any, Dict, Tuple, Union

import numpy as np
import xarray as xr

FloatArray = np.ndarray


def _xycoords(bounds, cellsizes) -> Dict[str, Any]:
    """Based on bounds and cellsizes, construct coords with spatial information"""
    # unpack tuples
    xmin, xmax, ymin, ymax = bounds
    dx, dy = cellsizes
    coords: collections.OrderedDict[str, Any] = collections.OrderedDict()
    if isinstance(dx, (int, float, np.integer, np.floating)):  # equidistant
        # Count cells first, np.arange with a float step may overshoot by one
        ncol = int(round((xmax - xmin) / abs(dx)))
        nrow = int(round((ymax - ymin) / abs(dy)))
        coords["x"] = xmin + (np.arange(ncol) + 0.5) * abs(dx)
        coords["y"] = ymax - (np.arange(nrow) + 0.5) * abs(dy)
        coords["dx"] = np.array(float(abs(dx)))
        coords["dy"] = np.array(-float(abs(dy)))
    else:  # nonequidistant
        # even though IDF may store them as float32, we always convert them to float64
        dx = np.abs(dx.astype(np.float64))
        dy = -np.abs(dy.astype(np.float64))
        coords["x"] = xmin + np.cumsum(dx) - 0.5 * dx
        coords["y"] = ymax + np.cumsum(dy) - 0.5 * dy
        if np.allclose(dx, dx[0]) and np.allclose(dy, dy[0]):
            coords["dx"] = np.array(float(dx[0]))
            coords["dy"] = np.array(float(dy[0]))
        else:
            coords["dx"] = ("x", dx)
            coords["dy"] = ("y", dy)
    return coords


def coord_reference(da_coord) -> Tuple[Union[float, FloatArray], float, float]:
    """
    Extracts dx, xmin, xmax for a coordinate DataArray, where x is any coordinate.

    If the DataArray coordinates are nonequidistant, dx will be returned as
    1D ndarray instead of float.

    Parameters
    ----------
    da_coord : xarray.DataArray of a coordinate

    Returns
    --------------
    tuple
        (dx, xmin, xmax) for a coordinate x
    """
    x = da_coord.values

    dx_string = f"d{da_coord.name}"
    if dx_string in da_coord.coords:
        dx = da_coord.coords[dx_string]
        if (dx.shape == x.shape) and (dx.size != 1):
            dx = dx.values.astype(np.float64)
            xmin = float(x.min()) - 0.5 * abs(dx[np.argmin(x)])
            xmax = float(x.max()) + 0.5 * abs(dx[np.argmax(x)])
            if np.allclose(dx, dx[0]):
                dx = float(dx[0])
        else:
            dx = float(dx)
            xmin = float(x.min()) - 0.5 * abs(dx)
            xmax = float(x.max()) + 0.5 * abs(dx)
    elif x.size == 1:
        raise ValueError(
            f"DataArray has size 1 along {da_coord.name}, so cellsize must be provided"
            f" as a coordinate named d{da_coord.name}."
        )
    else:
        dxs = np.diff(x.astype(np.float64))
        dx = float(dxs[0])
        if not np.allclose(dxs, dx, atol=abs(1.0e-4 * dx)):
            raise ValueError(
                f"DataArray has to be equidistant along {da_coord.name}, or cellsizes"
                f" must be provided as a coordinate named d{da_coord.name}."
            )
        # as xarray uses midpoint coordinates
        xmin = float(x.min()) - 0.5 * abs(dx)
        xmax = float(x.max()) + 0.5 * abs(dx)

    return dx, xmin, xmax


def spatial_reference(
    a: xr.DataArray,
) -> Tuple[Union[float, FloatArray], float, float, Union[float, FloatArray], float, float]:
    """
    Extracts spatial reference from DataArray.

    Parameters
    ----------
    a : xarray.DataArray

    Returns
    --------------
    tuple
        (dx, xmin, xmax, dy, ymin, ymax)
    """
    dx, xmin, xmax = coord_reference(a["x"])
    dy, ymin, ymax = coord_reference(a["y"])
    return dx, xmin, xmax, dy, ymin, ymax


def empty_2d(
    dx: float,
    xmin: float,
    xmax: float,
    dy: float,
    ymin: float,
    ymax: float,
) -> xr.DataArray:
    """
    Create an empty 2D (x, y) DataArray.

    Note that xarray uses midpoint coordinates. ``xmin`` and ``xmax`` are used
    to generate the appropriate midpoints.

    Parameters
    ----------
    dx: float
        cell size along x
    xmin: float
    xmax: float
    dy: float
        cell size along y
    ymin: float
    ymax: float

    Returns
    -------
    empty: xr.DataArray
        Filled with NaN.
    """
    bounds = (xmin, xmax, ymin, ymax)
    cellsizes = (np.abs(dx), -np.abs(dy))
    coords = _xycoords(bounds, cellsizes)
    nrow = coords["y"].size
    ncol = coords["x"].size
    return xr.DataArray(
        data=np.full((nrow, ncol), np.nan), coords=coords, dims=["y", "x"]
    )


def is_divisor(numerator: Union[float, FloatArray], denominator: float) -> bool:
    """
    Parameters
    ----------
    numerator: np.array of floats or float
    denominator: float

    Returns
    -------
    is_divisor: bool
    """
    denominator = np.abs(denominator)
    remainder = np.abs(numerator) % denominator
    return bool(np.all(np.isclose(remainder, 0.0) | np.isclose(remainder, denominator)))
