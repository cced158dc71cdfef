"""
Functions that can be called in grid expressions, e.g. ``max(a,b)``.

Every function receives its evaluated arguments, grids or constants, and the
settings of the run, and returns a grid or a constant.
"""

from dataclasses import dataclass
from typing import Callable, List

import numpy as np
import xarray as xr

from idfexp import regrid, util
from idfexp.errors import ScriptSyntaxError
from idfexp.expressions.expressiontype import ExpressionType
from idfexp.expressions.operations import fit_to_extent
from idfexp.grid import ConstantGrid, Grid, GridValue
from idfexp.logging import logger
from idfexp.settings import Extent, InterpreterSettings


@dataclass(frozen=True)
class Function:
    name: str
    evaluate: Callable
    min_args: int
    max_args: int
    kind: ExpressionType = ExpressionType.FUNCTION

    def __call__(
        self, arguments: List[GridValue], expression: str, settings: InterpreterSettings
    ) -> GridValue:
        n = len(arguments)
        if n < self.min_args or n > self.max_args:
            raise ScriptSyntaxError(
                f"Invalid number of arguments ({n}) for {self.name}-function: {expression}"
            )
        return self.evaluate(arguments, expression, settings)


def _is_constant(value: GridValue) -> bool:
    return isinstance(value, ConstantGrid)


def _constant_argument(
    value: GridValue, number: int, name: str, expression: str
) -> float:
    if not _is_constant(value):
        raise ScriptSyntaxError(
            f"Argument {number} of {name}-function should be a constant value: {expression}"
        )
    return value.value


def if_then_else(arguments, expression, settings):
    """
    ``if(cond,then,else)``: cells where cond is non-zero get the value of then,
    all other cells, NoData in cond included, get the value of else.
    """
    condition, then, otherwise = arguments
    if all(_is_constant(argument) for argument in arguments):
        if not np.isnan(condition.value) and condition.value != 0.0:
            return then.copy()
        return otherwise.copy()

    grids = [fit_to_extent(a, settings.extent) for a in arguments if not _is_constant(a)]
    if settings.extent is not None:
        extent = settings.extent
    else:
        extent = grids[0].extent
        for grid in grids[1:]:
            extent = extent.union(grid.extent)
    cellsize = min(grid.cellsize for grid in grids)
    origin = grids[0]
    target = regrid.snap(extent, origin.extent, cellsize, cellsize)
    like = util.empty_2d(
        cellsize, target.xmin, target.xmax, cellsize, target.ymin, target.ymax
    )

    def values(argument):
        if _is_constant(argument):
            return argument.value
        return regrid.match(fit_to_extent(argument, settings.extent).data, like)

    cond = values(condition)
    with util.ignore_warnings():
        is_true = (cond != 0) & ~np.isnan(cond)
        data = xr.where(is_true, values(then), values(otherwise))
    data = data.broadcast_like(like).transpose("y", "x")
    return Grid(data.assign_coords(dx=like["dx"], dy=like["dy"]), nodata=origin.nodata)


def _extreme(arguments, expression, settings, larger: bool):
    a, b = arguments
    if _is_constant(a) and _is_constant(b):
        values = [a.value, b.value]
        return ConstantGrid(max(values) if larger else min(values), nodata=a.nodata)
    if _is_constant(a):
        a, b = b, a
    a = fit_to_extent(a, settings.extent)
    b = fit_to_extent(b, settings.extent)
    bvalues = b.value if _is_constant(b) else b.match(a).data
    # NoData in b never replaces a value of a
    with util.ignore_warnings():
        if larger:
            data = xr.where(bvalues > a.data, bvalues, a.data)
        else:
            data = xr.where(bvalues < a.data, bvalues, a.data)
    return a.with_data(data)


def maximum(arguments, expression, settings):
    """``max(a,b)``: cellwise maximum on the grid of a."""
    return _extreme(arguments, expression, settings, larger=True)


def minimum(arguments, expression, settings):
    """``min(a,b)``: cellwise minimum on the grid of a."""
    return _extreme(arguments, expression, settings, larger=False)


def round_values(arguments, expression, settings):
    a, decimals = arguments
    if _is_constant(a):
        raise ScriptSyntaxError(
            f"Argument 1 of round-function should be an IDF-file: {expression}"
        )
    if not _is_constant(decimals) or not float(decimals.value).is_integer():
        raise ScriptSyntaxError(
            f"Argument 2 of round-function should be a constant integer value: {expression}"
        )
    return a.rounded(int(decimals.value))


def _dummy_grid(extent: Extent, cellsize: float, nodata) -> Grid:
    data = util.empty_2d(
        cellsize,
        extent.xmin,
        extent.xmin + cellsize,
        cellsize,
        extent.ymin,
        extent.ymin + cellsize,
    )
    return Grid(data, nodata=nodata)


def clip(arguments, expression, settings):
    """``clip(a,b)``: clip a to the extent of grid b."""
    a, b = arguments
    if _is_constant(a):
        return a.copy()
    if _is_constant(b):
        raise ScriptSyntaxError(
            f"Argument 2 of clip-function should be an IDF-file: {expression}"
        )
    if b.extent.contains(a.extent):
        return a.with_data(a.data)
    clipped = a.clip(b.extent)
    if clipped is None:
        logger.warning(
            f"Extents do not overlap, a 1x1 NoData grid is created for: {expression}",
            indent_level=1,
        )
        return _dummy_grid(b.extent, a.cellsize, a.nodata)
    return clipped


def enlarge(arguments, expression, settings):
    """``enlarge(a,b)``: enlarge a with NoData to at least the extent of grid b."""
    a, b = arguments
    if _is_constant(a):
        return a.copy()
    if _is_constant(b):
        raise ScriptSyntaxError(
            f"Argument 2 of enlarge-function should be an IDF-file: {expression}"
        )
    if a.extent.contains(b.extent):
        return a.with_data(a.data)
    return a.enlarge(b.extent)


def _method(value: float, enum, expression: str):
    try:
        return enum(int(value))
    except ValueError:
        raise ScriptSyntaxError(
            f"Invalid {enum.__name__} number {value:g} for scale-function: {expression}"
        )


def scale(arguments, expression, settings):
    """
    ``scale(a,cellsize[,downscale_method[,upscale_method]])``: change the
    cellsize of a. Without an upscale method, the downscale method argument is
    also used as upscale method.
    """
    a = arguments[0]
    if _is_constant(a):
        raise ScriptSyntaxError(
            f"Argument 1 of scale-function should be an IDF-file: {expression}"
        )
    target = arguments[1]
    cellsize = target.value if _is_constant(target) else target.cellsize
    if np.isnan(cellsize) or cellsize <= 0.0:
        raise ScriptSyntaxError(f"Invalid cellsize for scale-function: {expression}")

    downscale_method = regrid.DownscaleMethod.BLOCK
    upscale_method = regrid.UpscaleMethod.MEAN
    if len(arguments) > 2:
        value = _constant_argument(arguments[2], 3, "scale", expression)
        if cellsize < a.cellsize:
            downscale_method = _method(value, regrid.DownscaleMethod, expression)
        elif len(arguments) == 3:
            upscale_method = _method(value, regrid.UpscaleMethod, expression)
    if len(arguments) > 3:
        value = _constant_argument(arguments[3], 4, "scale", expression)
        upscale_method = _method(value, regrid.UpscaleMethod, expression)

    try:
        return a.scale(cellsize, downscale_method, upscale_method)
    except ValueError as e:
        raise ScriptSyntaxError(f"{e}: {expression}") from e


def bounding_box(arguments, expression, settings):
    """``bbox(a)``: clip a to the cells that are not NoData."""
    (a,) = arguments
    if _is_constant(a):
        return a.copy()
    clipped = a.bounding_box()
    if clipped is None:
        logger.warning(
            f"Grid has no values, bounding box is ignored: {expression}", indent_level=1
        )
        return a.with_data(a.data)
    return clipped


def cellsize(arguments, expression, settings):
    (a,) = arguments
    if _is_constant(a):
        raise ScriptSyntaxError(
            f"Argument of cellsize-function should be an IDF-file: {expression}"
        )
    return ConstantGrid(a.cellsize)


def nodata(arguments, expression, settings):
    """
    ``nd(a,v)``: cells of a with value v become NoData, and v becomes the NoData
    value of the result. When v is a grid, its NoData value is used.
    """
    a, v = arguments
    if _is_constant(v):
        value = v.value
    else:
        value = v.nodata if v.nodata is not None else settings.nodata
    if _is_constant(a):
        return ConstantGrid(np.nan if a.value == value else a.value, nodata=value)
    return Grid(a.data.where(a.data != value), nodata=value)


FUNCTIONS = {
    function.name: function
    for function in (
        Function("if", if_then_else, 3, 3, ExpressionType.IFTHENELSE),
        Function("min", minimum, 2, 2),
        Function("max", maximum, 2, 2),
        Function("round", round_values, 2, 2),
        Function("clip", clip, 2, 2),
        Function("enlarge", enlarge, 2, 2),
        Function("scale", scale, 2, 4),
        Function("bbox", bounding_box, 1, 1),
        Function("cellsize", cellsize, 1, 1),
        Function("nd", nodata, 2, 2),
    )
}
