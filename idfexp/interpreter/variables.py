"""Variables of a script run."""

import collections
import pathlib
from typing import Dict, Optional

import numpy as np

from idfexp.expressions import ExpressionType
from idfexp.grid import ConstantGrid, GridValue
from idfexp.metadata import Metadata
from idfexp.settings import DEFAULT_NODATA_CALCULATION_VALUE, InterpreterSettings


class Variable:
    """
    Binding of a variable name to a grid, a constant or nothing.

    Parameters
    ----------
    name: str
    value: Grid, ConstantGrid or None
        None when the value could not be resolved.
    kind: ExpressionType
    subpath: str, optional
        Subdirectory of the output path that a computed value is written to.
    metadata: Metadata, optional
    """

    def __init__(
        self,
        name: str,
        value: Optional[GridValue],
        kind: ExpressionType,
        subpath: str = "",
        metadata: Optional[Metadata] = None,
    ):
        self.name = name
        self.value = value
        self.kind = kind
        self.subpath = subpath
        self.metadata = metadata
        self.path: Optional[pathlib.Path] = None
        # Constants and values read from existing files never have to be written
        self.is_persisted = (
            value is None
            or isinstance(value, ConstantGrid)
            or kind
            in (ExpressionType.CONSTANT, ExpressionType.FILE, ExpressionType.UNDEFINED)
        )

    def __repr__(self) -> str:
        return f"Variable({self.name}={self.value!r}, {self.kind.name})"

    def output_path(self, settings: InterpreterSettings) -> pathlib.Path:
        """Path of the IDF file that a computed value is written to."""
        directory = settings.output_path
        if self.subpath:
            subpath = pathlib.Path(self.subpath.replace("\\", "/"))
            directory = subpath if subpath.is_absolute() else directory / subpath
        return directory / f"{self.name}.IDF"

    def persist(self, settings: InterpreterSettings) -> bool:
        """
        Write the value to its output path, unless it has been persisted
        already.

        Returns
        -------
        written: bool
        """
        if self.is_persisted or self.value is None:
            return False
        if self.path is None:
            self.path = self.output_path(settings)
        self.value.write(
            self.path, nodata=settings.nodata, dtype=settings.dtype, metadata=self.metadata
        )
        self.is_persisted = True
        return True

    def release(self) -> bool:
        """Drop the values from memory, returns False if nothing was released."""
        if self.value is None:
            return False
        return self.value.release()


def nodata_constant(settings: InterpreterSettings) -> ConstantGrid:
    """
    Value of ``NoData`` in expressions: NaN, or the calculation value when
    NoData is used as a value.
    """
    if not settings.nodata_as_value:
        return ConstantGrid(np.nan)
    if np.isnan(settings.nodata_value):
        value = DEFAULT_NODATA_CALCULATION_VALUE
    else:
        value = settings.nodata_value
    return ConstantGrid(value, nodata=value)


class VariableTable(collections.UserDict):
    """
    Variables by name. ``NoData`` and ``NaN`` are defined up front, and can be
    redefined by a script like any other variable.
    """

    def __init__(self, settings: InterpreterSettings):
        super().__init__()
        self["NoData"] = Variable("NoData", nodata_constant(settings), ExpressionType.CONSTANT)
        self["NaN"] = Variable("NaN", ConstantGrid(np.nan), ExpressionType.CONSTANT)

    def values_by_name(self) -> Dict[str, Optional[GridValue]]:
        """The value of every variable, for the expression parser."""
        return {name: variable.value for name, variable in self.data.items()}
