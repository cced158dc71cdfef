"""
Binary operators of grid expressions.

Operands are grids or constants. The result of an operation on two grids is
defined on the cells of the left grid; the right grid is transferred to these
cells first. NoData (NaN) in either operand gives NoData, except for ``==``
and ``!=`` with the NoData constant, which test for NoData.
"""

from typing import Optional

import numpy as np
import xarray as xr

from idfexp import util
from idfexp.errors import ScriptSyntaxError
from idfexp.grid import ConstantGrid, Grid, GridValue
from idfexp.settings import Extent

# Action of the last operand of a (sub)expression
END = ")"

PRIORITIES = {
    "^": 4,
    "*": 3,
    "/": 3,
    "+": 2,
    "-": 2,
    "<": 1,
    "<=": 1,
    ">": 1,
    ">=": 1,
    "!=": 1,
    "==": 1,
    "&&": 0,
    "||": 0,
    END: 0,
}

# Two character actions have to be matched first
ACTIONS = sorted((action for action in PRIORITIES if action != END), key=len, reverse=True)


def _is_nan(value) -> bool:
    return not isinstance(value, xr.DataArray) and bool(np.isnan(value))


def _mask(result, left, right):
    """Convert a boolean result to 1.0/0.0, NaN where an operand is NaN."""
    invalid = np.isnan(left) | np.isnan(right)
    if isinstance(result, xr.DataArray):
        return result.astype(np.float64).where(~invalid)
    return np.nan if invalid else float(result)


def _finite(result):
    if isinstance(result, xr.DataArray):
        return result.where(np.isfinite(result))
    return result if np.isfinite(result) else np.nan


def _test_nodata(action: str, left, right):
    other = right if _is_nan(left) else left
    isnull = np.isnan(other)
    if action == "!=":
        isnull = ~isnull
    if isinstance(isnull, xr.DataArray):
        return isnull.astype(np.float64)
    return float(isnull)


def evaluate(action: str, left, right):
    """
    Apply an action to two values, each a float or a DataArray on the same
    cells.
    """
    match action:
        case "+":
            return left + right
        case "-":
            return left - right
        case "*":
            return left * right
        case "/":
            return _finite(left / right)
        case "^":
            return _finite(left**right)
        case "==" | "!=" if _is_nan(left) or _is_nan(right):
            return _test_nodata(action, left, right)
        case "==":
            return _mask(left == right, left, right)
        case "!=":
            return _mask(left != right, left, right)
        case "<":
            return _mask(left < right, left, right)
        case "<=":
            return _mask(left <= right, left, right)
        case ">":
            return _mask(left > right, left, right)
        case ">=":
            return _mask(left >= right, left, right)
        case "&&":
            return _mask((left != 0) & (right != 0), left, right)
        case "||":
            return _mask((left != 0) | (right != 0), left, right)
        case _:
            raise ScriptSyntaxError(f"Unknown operator: {action}")


def fit_to_extent(value: GridValue, extent: Optional[Extent]) -> GridValue:
    """Clip and/or enlarge a grid to extent; constants are returned as is."""
    if extent is None or isinstance(value, ConstantGrid):
        return value
    return value.fit(extent)


def apply(
    action: str, left: GridValue, right: GridValue, extent: Optional[Extent] = None
) -> GridValue:
    """
    Apply an action to two grids or constants.

    Parameters
    ----------
    action: str
        One of the keys of ``PRIORITIES``, except ``END``.
    left: Grid or ConstantGrid
    right: Grid or ConstantGrid
    extent: Extent, optional
        Extent that both grids are clipped and/or enlarged to first.

    Returns
    -------
    result: Grid or ConstantGrid
    """
    with util.ignore_warnings():
        if isinstance(left, ConstantGrid) and isinstance(right, ConstantGrid):
            value = evaluate(action, np.float64(left.value), np.float64(right.value))
            return ConstantGrid(value, nodata=left.nodata)

        left = fit_to_extent(left, extent)
        right = fit_to_extent(right, extent)
        if isinstance(left, ConstantGrid):
            base = right
            result = evaluate(action, np.float64(left.value), right.data)
        elif isinstance(right, ConstantGrid):
            base = left
            result = evaluate(action, left.data, np.float64(right.value))
        else:
            base = left
            result = evaluate(action, left.data, right.match(left).data)
    return base.with_data(result)


def negate(value: GridValue) -> GridValue:
    if isinstance(value, ConstantGrid):
        return ConstantGrid(-value.value, nodata=value.nodata)
    return value.with_data(-value.data)


def is_grid(value: GridValue) -> bool:
    return isinstance(value, Grid)
