"""
Settings of a script run.

:class:`InterpreterSettings` is passed to the interpreter at construction and
handed down to every component that needs it. It is immutable: create a new
instance with :func:`dataclasses.replace` to change a setting.
"""

import pathlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import numpy as np

from idfexp import idf
from idfexp.util.path import resolve_path

# NoData value of the NoData constant when no calculation value is configured
DEFAULT_NODATA_CALCULATION_VALUE = -9999.0


def _less_equal(a: float, b: float) -> bool:
    return a < b or bool(np.isclose(a, b))


class QuietMode(Enum):
    """
    How missing IDF files and variables are handled.
    """

    OFF = 0
    """
    A missing file or variable is an error.
    """
    SILENT_EXIT = 1
    """
    A missing file or variable stops the run quietly, without an error.
    """
    SILENT_SKIP = 2
    """
    A missing file or variable is reported with a warning; the assigned
    variable is left undefined and the run continues.
    """


@dataclass(frozen=True)
class Extent:
    """
    Rectangular extent, defined by its lower left and upper right corners.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(
                f"Invalid extent, lower left corner ({self.xmin}, {self.ymin}) should"
                f" be below and left of upper right corner ({self.xmax}, {self.ymax})"
            )

    def __str__(self) -> str:
        return f"({self.xmin:g},{self.ymin:g},{self.xmax:g},{self.ymax:g})"

    @property
    def bounds(self):
        """(xmin, xmax, ymin, ymax), the order used for IDF headers."""
        return self.xmin, self.xmax, self.ymin, self.ymax

    def contains(self, other: "Extent") -> bool:
        """Check if other lies completely within this extent."""
        return (
            _less_equal(self.xmin, other.xmin)
            and _less_equal(self.ymin, other.ymin)
            and _less_equal(other.xmax, self.xmax)
            and _less_equal(other.ymax, self.ymax)
        )

    def equals(self, other: "Extent") -> bool:
        return self.contains(other) and other.contains(self)

    def union(self, other: "Extent") -> "Extent":
        return Extent(
            min(self.xmin, other.xmin),
            min(self.ymin, other.ymin),
            max(self.xmax, other.xmax),
            max(self.ymax, other.ymax),
        )

    def intersection(self, other: "Extent") -> Optional["Extent"]:
        """Overlapping part of both extents, None if they do not overlap."""
        xmin = max(self.xmin, other.xmin)
        ymin = max(self.ymin, other.ymin)
        xmax = min(self.xmax, other.xmax)
        ymax = min(self.ymax, other.ymax)
        if xmin >= xmax or ymin >= ymax:
            return None
        return Extent(xmin, ymin, xmax, ymax)

    @classmethod
    def parse(
        cls, text: str, base_path: Optional[Union[str, pathlib.Path]] = None
    ) -> "Extent":
        """
        Parse an extent from a string with four comma separated values
        ``xll,yll,xur,yur``, or from the header of an IDF file.

        Parameters
        ----------
        text: str
            Either ``xll,yll,xur,yur`` or the path of an IDF file.
        base_path: str or pathlib.Path, optional
            Path to resolve a relative IDF path against.

        Returns
        -------
        extent: Extent
        """
        text = text.strip()
        if text.lower().endswith(".idf"):
            path = resolve_path(text, base_path)
            if not path.is_file():
                raise ValueError(f"IDF-file for extent not found: {path}")
            attrs = idf.header(path)
            return cls(attrs["xmin"], attrs["ymin"], attrs["xmax"], attrs["ymax"])

        values = text.split(",")
        if len(values) != 4:
            raise ValueError(
                f"Extent should be defined as xll,yll,xur,yur or an IDF-file: {text}"
            )
        try:
            xmin, ymin, xmax, ymax = (float(value) for value in values)
        except ValueError:
            raise ValueError(f"Invalid value in extent: {text}")
        return cls(xmin, ymin, xmax, ymax)


@dataclass(frozen=True)
class InterpreterSettings:
    """
    Settings of a script run.

    Parameters
    ----------
    base_path: pathlib.Path
        Relative paths in a script are resolved against this path, normally
        the directory of the script.
    output_path: pathlib.Path, optional
        Directory that results are written to. Defaults to ``base_path``.
    quiet_mode: QuietMode
        Handling of missing IDF files and variables.
    decimal_count: int, optional
        Round results to this number of decimals before writing them.
    add_metadata: bool
        Write a ``.MET`` metadata file next to each result.
    debug: bool
        Log remarks, skipped lines, intermediate results and released grids;
        write intermediate results and an expanded copy of the script.
    write_intermediate_results: bool
        Write the result of every sub expression to ``<output_path>/debug``.
    nodata_as_value: bool
        Use NoData cells of input grids as a value in calculations.
    nodata_value: float
        Value of NoData cells when ``nodata_as_value`` is set. NaN means the
        NoData value of each IDF file itself.
    extent: Extent, optional
        Clip or enlarge all grids in an expression to this extent.
    nodata: float
        NoData value written to result IDF files.
    dtype: type
        Precision of written IDF files, ``np.float32`` or ``np.float64``.
    """

    base_path: pathlib.Path = field(default_factory=pathlib.Path)
    output_path: Optional[pathlib.Path] = None
    quiet_mode: QuietMode = QuietMode.OFF
    decimal_count: Optional[int] = None
    add_metadata: bool = False
    debug: bool = False
    write_intermediate_results: bool = False
    nodata_as_value: bool = False
    nodata_value: float = np.nan
    extent: Optional[Extent] = None
    nodata: float = 1.0e20
    dtype: type = np.float32

    def __post_init__(self):
        # frozen dataclass, so bypass __setattr__ for normalization
        object.__setattr__(self, "base_path", pathlib.Path(self.base_path))
        if self.output_path is None:
            object.__setattr__(self, "output_path", self.base_path)
        else:
            object.__setattr__(self, "output_path", pathlib.Path(self.output_path))

        if not isinstance(self.quiet_mode, QuietMode):
            raise ValueError(f"Invalid quiet mode: {self.quiet_mode}")
        if self.decimal_count is not None and self.decimal_count < 0:
            raise ValueError(
                f"Decimal count should be zero or positive, received {self.decimal_count}"
            )
        if self.dtype not in (np.float32, np.float64):
            raise ValueError("Invalid dtype, IDF allows only np.float32 and np.float64")

    @property
    def is_rounded(self) -> bool:
        return self.decimal_count is not None

    @property
    def writes_intermediate_results(self) -> bool:
        return self.debug or self.write_intermediate_results

    @property
    def debug_path(self) -> pathlib.Path:
        return self.output_path / "debug"

    def nodata_calculation_value(self, file_nodata: float) -> float:
        """
        Value used for NoData cells when ``nodata_as_value`` is set: the
        configured value, or the NoData value of the file itself.
        """
        if np.isnan(self.nodata_value):
            return file_nodata
        return self.nodata_value
