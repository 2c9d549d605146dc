# src/geotiffkit/adapters/rasterio_raster_reader.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import rasterio
from rasterio.errors import RasterioError
from rasterio.transform import Affine
from rasterio.windows import Window

from ..contracts.core import BandInfo, DatasetInfo
from ..contracts.errors import InvalidDatasetError, RasterOpenError, RasterReadError
from ..contracts.geo import DTypeStr, GeoTransform
from ..ports.raster_read import RasterDatasetPort, RasterOpenerPort

logger = logging.getLogger(__name__)

# dtype numpy -> nombre GDAL (para el volcado informativo)
_DTYPE_TO_GDAL_NAME = {
    "uint8": "Byte",
    "uint16": "UInt16",
    "int16": "Int16",
    "uint32": "UInt32",
    "int32": "Int32",
    "float32": "Float32",
    "float64": "Float64",
}


def _np_to_dtype_str(dt: str) -> Optional[DTypeStr]:
    # rasterio reporta dtypes como texto (incluye complex_int16, int8, ...)
    s = str(dt)
    return s if s in _DTYPE_TO_GDAL_NAME else None  # type: ignore[return-value]


def _affine_to_gt(a: Affine) -> GeoTransform:
    return (a.c, a.a, a.b, a.f, a.d, a.e)


def _stored_min_max(tags: dict) -> tuple[Optional[float], Optional[float]]:
    mn = tags.get("STATISTICS_MINIMUM")
    mx = tags.get("STATISTICS_MAXIMUM")
    if mn is None or mx is None:
        return None, None
    return float(mn), float(mx)


class RasterioDataset(RasterDatasetPort):
    """Dataset rasterio abierto en modo 'r'."""

    def __init__(self, ds: "rasterio.io.DatasetReader"):
        self._ds = ds
        self._uri = str(ds.name)

    def _dataset(self) -> "rasterio.io.DatasetReader":
        if self._ds is None:
            raise InvalidDatasetError(f"Dataset rasterio cerrado: {self._uri}")
        return self._ds

    # --------------- RasterDatasetPort ---------------
    @property
    def uri(self) -> str:
        return self._uri

    @property
    def width(self) -> int:
        return self._dataset().width

    @property
    def height(self) -> int:
        return self._dataset().height

    @property
    def count(self) -> int:
        return self._dataset().count

    def data_type(self, band: int) -> Optional[DTypeStr]:
        return _np_to_dtype_str(self._dataset().dtypes[int(band) - 1])

    def read_window(self, band: int, col_off: int, row_off: int, width: int, height: int) -> np.ndarray:
        ds = self._dataset()
        try:
            return ds.read(int(band), window=Window(col_off, row_off, width, height))
        except RasterioError as e:
            raise RasterReadError(self._uri, band, row_off, str(e)) from e

    def geotransform(self) -> GeoTransform:
        return _affine_to_gt(self._dataset().transform)

    def projection(self) -> str:
        crs = self._dataset().crs
        return crs.to_wkt() if crs else ""

    def nodata(self, band: int) -> Optional[float]:
        v = self._dataset().nodatavals[int(band) - 1]
        return float(v) if v is not None else None

    def _compute_min_max(self, bidx: int) -> tuple[Optional[float], Optional[float]]:
        ds = self._dataset()
        if ds.width * ds.height == 0:
            return None, None
        # enmascarado: excluye nodata igual que GDALComputeRasterMinMax
        arr = ds.read(bidx, masked=True)
        if arr.count() == 0:
            return None, None
        return float(arr.min()), float(arr.max())

    def describe(self) -> DatasetInfo:
        ds = self._dataset()
        bands = []
        for i in range(1, ds.count + 1):
            rows, cols = ds.block_shapes[i - 1]
            mn, mx = _stored_min_max(ds.tags(i))
            if mn is None:
                mn, mx = self._compute_min_max(i)
            try:
                n_colors: Optional[int] = len(ds.colormap(i))
            except ValueError:
                n_colors = None
            dt = str(ds.dtypes[i - 1])
            bands.append(BandInfo(
                index=i,
                block_size=(cols, rows),
                data_type=_DTYPE_TO_GDAL_NAME.get(dt, dt),
                color_interp=ds.colorinterp[i - 1].name.capitalize(),
                minimum=mn,
                maximum=mx,
                overview_count=len(ds.overviews(i)),
                color_table_entries=n_colors,
                units=ds.units[i - 1] or "",
            ))
        return DatasetInfo(
            driver=ds.driver,
            width=ds.width,
            height=ds.height,
            count=ds.count,
            projection=self.projection(),
            geotransform=_affine_to_gt(ds.transform),
            bands=tuple(bands),
        )

    def close(self) -> None:
        if self._ds is not None:
            self._ds.close()
            self._ds = None


@dataclass(frozen=True)
class RasterioRasterOpener(RasterOpenerPort):
    """Abre rasters con rasterio (backend preferido)."""

    def open(self, uri: str) -> RasterioDataset:
        try:
            ds = rasterio.open(str(uri), "r")
        except RasterioError as e:
            raise RasterOpenError(uri, str(e)) from e
        logger.debug("rasterio %s abrió %s (driver=%s)", rasterio.__version__, uri, ds.driver)
        return RasterioDataset(ds)


__all__ = ["RasterioRasterOpener", "RasterioDataset"]
