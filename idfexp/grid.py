"""
Grid values that variables of a script are bound to.

A :class:`Grid` wraps a 2D ``xarray.DataArray``. Grids opened from IDF files
are read lazily, and every grid that has been written can release its values
from memory: they are read again from disk when they are needed. A
:class:`ConstantGrid` has one value everywhere and no extent.
"""

import pathlib
from typing import Optional, Union

import numpy as np
import xarray as xr

from idfexp import idf, regrid
from idfexp.metadata import Metadata
from idfexp.settings import Extent


class ConstantGrid:
    """
    A grid with the same value in every cell, without an extent.

    Parameters
    ----------
    value: float
    nodata: float, optional
        NoData value, NaN by default.
    """

    path = None
    is_persisted = True
    is_loaded = True

    def __init__(self, value: float, nodata: float = np.nan):
        self.value = float(value)
        self.nodata = nodata

    def __repr__(self) -> str:
        return f"ConstantGrid({self.value:g})"

    @property
    def is_nodata(self) -> bool:
        return bool(np.isnan(self.value))

    def load(self) -> "ConstantGrid":
        return self

    def release(self) -> bool:
        return False

    def copy(self) -> "ConstantGrid":
        return ConstantGrid(self.value, self.nodata)

    def allocate(self, like: "Grid") -> "Grid":
        """Create a grid with the cells of like, filled with the constant value."""
        return like.with_data(xr.full_like(like.data, self.value, dtype=np.float64))


class Grid:
    """
    A 2D grid of values, NaN marks NoData.

    Parameters
    ----------
    data: xr.DataArray
        Values with dims ``("y", "x")``.
    path: pathlib.Path, optional
        IDF file that holds the values of this grid.
    nodata: float, optional
        NoData value written to IDF files. When None, the NoData value of the
        script settings is used.
    fill_value: float, optional
        Value for NoData cells, applied every time the values are read from
        ``path``.
    """

    def __init__(
        self,
        data: xr.DataArray,
        path: Optional[pathlib.Path] = None,
        nodata: Optional[float] = None,
        fill_value: Optional[float] = None,
    ):
        self._data = data
        self.path = None if path is None else pathlib.Path(path)
        self.nodata = nodata
        self.fill_value = fill_value
        self.is_persisted = path is not None

    def __repr__(self) -> str:
        location = self.path.name if self.path is not None else "in memory"
        return f"Grid({location}, extent={self.extent}, cellsize={self.cellsize:g})"

    @classmethod
    def open(
        cls, path: Union[str, pathlib.Path], fill_value: Optional[float] = None
    ) -> "Grid":
        """
        Open an IDF file lazily.

        Parameters
        ----------
        path: str or pathlib.Path
        fill_value: float, optional
            Use this value for NoData cells. NaN means the NoData value of the
            file itself.
        """
        path = pathlib.Path(path)
        data = idf.open(path)
        nodata = data.attrs["nodata"]
        if fill_value is not None:
            if np.isnan(fill_value):
                fill_value = nodata
            data = data.fillna(fill_value)
        return cls(data, path=path, nodata=nodata, fill_value=fill_value)

    def _read(self) -> xr.DataArray:
        data = idf.open(self.path)
        if self.fill_value is not None:
            data = data.fillna(self.fill_value)
        return data

    @property
    def data(self) -> xr.DataArray:
        """The values of this grid, read from disk again after a release."""
        if self._data is None:
            self._data = self._read()
        return self._data

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load(self) -> "Grid":
        """Compute the values and keep them in memory."""
        self._data = self.data.compute()
        return self

    def release(self) -> bool:
        """
        Drop the values from memory. Only grids that have been written can be
        released.

        Returns
        -------
        released: bool
            False if there was nothing to release.
        """
        if self._data is None or self.path is None or not self.is_persisted:
            return False
        self._data = None
        return True

    def with_data(self, data: xr.DataArray) -> "Grid":
        """New grid in memory with other values and the NoData value of this grid."""
        return Grid(data, nodata=self.nodata)

    def copy(self) -> "Grid":
        grid = Grid(self._data, path=self.path, nodata=self.nodata, fill_value=self.fill_value)
        grid.is_persisted = self.is_persisted
        return grid

    def write(
        self,
        path: Union[str, pathlib.Path],
        nodata: float = 1.0e20,
        dtype=np.float32,
        metadata: Optional[Metadata] = None,
    ) -> pathlib.Path:
        """
        Write the grid to an IDF file, and a metadata file if given. The grid
        refers to the written file afterwards.

        Parameters
        ----------
        path: str or pathlib.Path
        nodata: float
            NoData value, used when the grid has no NoData value itself.
        dtype: type, ``{np.float32, np.float64}``
        metadata: Metadata, optional
        """
        path = pathlib.Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        # The values may be read lazily from path itself, read them before writing
        data = self.data.compute()
        idf.write(
            path, data, nodata=nodata if self.nodata is None else self.nodata, dtype=dtype
        )
        if metadata is not None:
            metadata.write(path)
        self._data = data
        self.path = path
        self.fill_value = None
        self.is_persisted = True
        return path

    def rounded(self, decimals: int) -> "Grid":
        """New grid with values rounded to a number of decimals."""
        return self.with_data(self.data.round(decimals))

    @property
    def extent(self) -> Extent:
        return regrid.extent(self.data)

    @property
    def cellsize(self) -> float:
        dx, _ = regrid.cellsizes(self.data)
        return dx

    @property
    def ycellsize(self) -> float:
        _, dy = regrid.cellsizes(self.data)
        return dy

    def match(self, like: "Grid") -> "Grid":
        """Transfer this grid to the cells of like."""
        return self.with_data(regrid.match(self.data, like.data))

    def fit(self, extent: Extent) -> "Grid":
        """Clip and/or enlarge this grid to extent, keeping its cellsize."""
        if self.extent.equals(extent):
            return self
        return self.with_data(regrid.fit(self.data, extent))

    def clip(self, extent: Extent) -> Optional["Grid"]:
        clipped = regrid.clip(self.data, extent)
        if clipped is None:
            return None
        return self.with_data(clipped)

    def enlarge(self, extent: Extent) -> "Grid":
        return self.with_data(regrid.enlarge(self.data, extent))

    def bounding_box(self) -> Optional["Grid"]:
        clipped = regrid.bounding_box(self.data)
        if clipped is None:
            return None
        return self.with_data(clipped)

    def scale(
        self,
        cellsize: float,
        downscale_method: regrid.DownscaleMethod = regrid.DownscaleMethod.BLOCK,
        upscale_method: regrid.UpscaleMethod = regrid.UpscaleMethod.MEAN,
    ) -> "Grid":
        """Change the cellsize of this grid."""
        if np.isclose(cellsize, self.cellsize):
            return self.with_data(self.data)
        elif cellsize < self.cellsize:
            return self.with_data(regrid.downscale(self.data, cellsize, downscale_method))
        else:
            return self.with_data(regrid.upscale(self.data, cellsize, upscale_method))


GridValue = Union[Grid, ConstantGrid]
