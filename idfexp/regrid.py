"""
Changing the extent and cellsize of 2D grids.

All functions work on ``xarray.DataArray`` objects with dims ``("y", "x")``,
equidistant midpoint coordinates and scalar ``dx`` and ``dy`` coordinates.
Values are transferred by nearest cell; cells without a source cell are NaN.
"""

import math
from enum import Enum

import numba
import numpy as np
import xarray as xr

from idfexp import util
from idfexp.settings import Extent

# Relative tolerance to decide whether coordinates coincide with cell edges
_EPSILON = 1.0e-6


class DownscaleMethod(Enum):
    BLOCK = 0
    """Each smaller cell gets the value of the cell that it lies in."""
    DIVIDE = 1
    """The value of a cell is divided over the smaller cells by area."""


class UpscaleMethod(Enum):
    MEAN = 0
    MEDIAN = 1
    MINIMUM = 2
    MAXIMUM = 3
    MOST_OCCURRING = 4
    BOUNDARY = 5
    """Negative values dominate positive values, positive values dominate zero."""
    SUM = 6
    MOST_OCCURRING_NODATA = 7
    """Most occurring value, where NoData counts as a value."""


def cellsizes(da: xr.DataArray):
    """Absolute cellsizes (dx, dy) of an equidistant grid."""
    dx, _, _, dy, _, _ = util.spatial_reference(da)
    if not (isinstance(dx, float) and isinstance(dy, float)):
        raise ValueError("Only equidistant grids are supported")
    return abs(dx), abs(dy)


def extent(da: xr.DataArray) -> Extent:
    _, xmin, xmax, _, ymin, ymax = util.spatial_reference(da)
    return Extent(xmin, ymin, xmax, ymax)


def _floor(value: float) -> int:
    return math.floor(value + _EPSILON)


def _ceil(value: float) -> int:
    return math.ceil(value - _EPSILON)


def snap(target: Extent, origin: Extent, dx: float, dy: float) -> Extent:
    """
    Snap an extent outwards to the cell edges of a grid with lower left corner
    ``origin.xmin``, upper left corner ``origin.ymax`` and cellsizes dx and dy.
    """
    xmin = origin.xmin + _floor((target.xmin - origin.xmin) / dx) * dx
    xmax = origin.xmin + _ceil((target.xmax - origin.xmin) / dx) * dx
    ymax = origin.ymax - _floor((origin.ymax - target.ymax) / dy) * dy
    ymin = origin.ymax - _ceil((origin.ymax - target.ymin) / dy) * dy
    return Extent(xmin, ymin, xmax, ymax)


def _reindex(da: xr.DataArray, coords) -> xr.DataArray:
    """Nearest cell lookup of da for the cell midpoints in coords."""
    dx, dy = cellsizes(da)
    # Midpoints on the boundary of two source cells still belong to one of them
    out = da.reindex(
        x=coords["x"], method="nearest", tolerance=0.5 * dx * (1.0 + _EPSILON)
    ).reindex(y=coords["y"], method="nearest", tolerance=0.5 * dy * (1.0 + _EPSILON))
    return out.assign_coords(dx=coords["dx"], dy=coords["dy"])


def _same_grid(a: xr.DataArray, b: xr.DataArray) -> bool:
    return (
        a.x.size == b.x.size
        and a.y.size == b.y.size
        and np.allclose(a.x.values, b.x.values)
        and np.allclose(a.y.values, b.y.values)
    )


def match(da: xr.DataArray, like: xr.DataArray) -> xr.DataArray:
    """Transfer da to the cells of like."""
    if _same_grid(da, like):
        return da.assign_coords(x=like.x.values, y=like.y.values)
    coords = {
        "x": like.x.values,
        "y": like.y.values,
        "dx": like.coords["dx"].values,
        "dy": like.coords["dy"].values,
    }
    return _reindex(da, coords)


def fit(da: xr.DataArray, target: Extent) -> xr.DataArray:
    """
    Clip and/or enlarge da to the extent target, snapped to the cells of da.
    Enlarged cells are NaN.
    """
    dx, dy = cellsizes(da)
    snapped = snap(target, extent(da), dx, dy)
    coords = util._xycoords(snapped.bounds, (dx, -dy))
    return _reindex(da, coords)


def clip(da: xr.DataArray, target: Extent):
    """Clip da to target, None when they do not overlap."""
    overlap = extent(da).intersection(target)
    if overlap is None:
        return None
    return fit(da, overlap)


def enlarge(da: xr.DataArray, target: Extent) -> xr.DataArray:
    """Enlarge da to at least the extent target."""
    return fit(da, extent(da).union(target))


def bounding_box(da: xr.DataArray):
    """Clip da to the cells that are not NaN, None when all cells are NaN."""
    valid = da.notnull()
    rows = np.flatnonzero(valid.any("x").values)
    cols = np.flatnonzero(valid.any("y").values)
    if rows.size == 0:
        return None
    return da.isel(y=slice(rows[0], rows[-1] + 1), x=slice(cols[0], cols[-1] + 1))


def downscale(
    da: xr.DataArray, cellsize: float, method: DownscaleMethod
) -> xr.DataArray:
    dx, dy = cellsizes(da)
    bounds = extent(da)
    ncol = _ceil((bounds.xmax - bounds.xmin) / cellsize)
    nrow = _ceil((bounds.ymax - bounds.ymin) / cellsize)
    target = Extent(
        bounds.xmin,
        bounds.ymax - nrow * cellsize,
        bounds.xmin + ncol * cellsize,
        bounds.ymax,
    )
    coords = util._xycoords(target.bounds, (cellsize, -cellsize))
    out = _reindex(da, coords)
    if method == DownscaleMethod.DIVIDE:
        out = out * (cellsize * cellsize) / (dx * dy)
    return out


@numba.njit
def _most_occurring(values, count_nan):
    """Most occurring value of a 1D array, the smallest value on a tie."""
    ordered = np.sort(values)  # NaN is sorted to the end
    best = np.nan
    best_count = 0
    i = 0
    n = ordered.size
    while i < n:
        value = ordered[i]
        if np.isnan(value):
            break
        j = i
        while j < n and ordered[j] == value:
            j += 1
        if (j - i) > best_count:
            best_count = j - i
            best = value
        i = j
    if count_nan and (n - i) > best_count:
        best = np.nan
    return best


@numba.njit
def _boundary(values):
    result = np.nan
    for value in values:
        if np.isnan(value):
            continue
        if value < 0.0:
            if np.isnan(result) or result >= 0.0 or value < result:
                result = value
        elif value > 0.0:
            if np.isnan(result) or (result >= 0.0 and value > result):
                result = value
        elif np.isnan(result):
            result = value
    return result


@numba.njit
def _reduce_blocks(blocks, method):
    nrow, _, ncol, _ = blocks.shape
    out = np.empty((nrow, ncol), dtype=np.float64)
    for i in range(nrow):
        for j in range(ncol):
            values = blocks[i, :, j, :].flatten()
            if method == 0:
                out[i, j] = _most_occurring(values, False)
            elif method == 1:
                out[i, j] = _most_occurring(values, True)
            else:
                out[i, j] = _boundary(values)
    return out


def _nansum(blocks, axis):
    total = np.nansum(blocks, axis=axis)
    return np.where(np.isnan(blocks).all(axis=axis), np.nan, total)


_UPSCALE_FUNCTIONS = {
    UpscaleMethod.MEAN: np.nanmean,
    UpscaleMethod.MEDIAN: np.nanmedian,
    UpscaleMethod.MINIMUM: np.nanmin,
    UpscaleMethod.MAXIMUM: np.nanmax,
    UpscaleMethod.SUM: _nansum,
    UpscaleMethod.MOST_OCCURRING: lambda blocks, axis: _reduce_blocks(
        blocks.astype(np.float64), 0
    ),
    UpscaleMethod.MOST_OCCURRING_NODATA: lambda blocks, axis: _reduce_blocks(
        blocks.astype(np.float64), 1
    ),
    UpscaleMethod.BOUNDARY: lambda blocks, axis: _reduce_blocks(
        blocks.astype(np.float64), 2
    ),
}


def upscale(da: xr.DataArray, cellsize: float, method: UpscaleMethod) -> xr.DataArray:
    dx, dy = cellsizes(da)
    if not (util.is_divisor(cellsize, dx) and util.is_divisor(cellsize, dy)):
        raise ValueError(
            f"Cellsize {cellsize:g} for upscaling is not a multiple of cellsize {dx:g}"
        )
    fx = int(round(cellsize / dx))
    fy = int(round(cellsize / dy))
    bounds = extent(da)

    with util.ignore_warnings():
        out = (
            da.compute()
            .coarsen(y=fy, x=fx, boundary="pad")
            .reduce(_UPSCALE_FUNCTIONS[method])
        )
    nrow, ncol = out.shape
    target = (
        bounds.xmin,
        bounds.xmin + ncol * cellsize,
        bounds.ymax - nrow * cellsize,
        bounds.ymax,
    )
    coords = util._xycoords(target, (cellsize, -cellsize))
    return out.assign_coords(coords)
