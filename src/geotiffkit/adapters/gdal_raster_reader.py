# src/geotiffkit/adapters/gdal_raster_reader.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np
from osgeo import gdal  # type: ignore

from ..contracts.core import BandInfo, DatasetInfo
from ..contracts.errors import InvalidDatasetError, RasterOpenError, RasterReadError
from ..contracts.geo import DTypeStr, GeoTransform, as_geotransform
from ..ports.raster_read import RasterDatasetPort, RasterOpenerPort

logger = logging.getLogger(__name__)

_GDT_TO_DTYPE = {
    gdal.GDT_Byte: "uint8",
    gdal.GDT_UInt16: "uint16",
    gdal.GDT_Int16: "int16",
    gdal.GDT_UInt32: "uint32",
    gdal.GDT_Int32: "int32",
    gdal.GDT_Float32: "float32",
    gdal.GDT_Float64: "float64",
}

_REGISTER_LOCK = threading.Lock()
_REGISTERED = False


def register_drivers(cache_max_mb: Optional[int] = None) -> bool:
    """Registro global de drivers GDAL, una sola vez por proceso.

    Devuelve True sólo en la llamada que efectivamente registró.
    Las llamadas siguientes son no-op.
    """
    global _REGISTERED
    with _REGISTER_LOCK:
        if _REGISTERED:
            return False
        gdal.UseExceptions()
        gdal.AllRegister()
        if cache_max_mb is not None:
            gdal.SetCacheMax(int(cache_max_mb) * 1024 * 1024)
        _REGISTERED = True
        logger.debug("GDAL %s: drivers registrados (%d)", gdal.__version__, gdal.GetDriverCount())
        return True


def _gdal_datatype_to_dtype_str(dt_code: int) -> Optional[DTypeStr]:
    return _GDT_TO_DTYPE.get(dt_code)  # type: ignore[return-value]


class GdalDataset(RasterDatasetPort):
    """Dataset GDAL abierto en GA_ReadOnly."""

    def __init__(self, ds: "gdal.Dataset", uri: str):
        self._ds = ds
        self._uri = str(uri)

    # --------------- helpers ---------------
    def _dataset(self) -> "gdal.Dataset":
        if self._ds is None:
            raise InvalidDatasetError(f"Dataset GDAL cerrado: {self._uri}")
        return self._ds

    def _band(self, band: int) -> "gdal.Band":
        return self._dataset().GetRasterBand(int(band))

    # --------------- RasterDatasetPort ---------------
    @property
    def uri(self) -> str:
        return self._uri

    @property
    def width(self) -> int:
        return self._dataset().RasterXSize

    @property
    def height(self) -> int:
        return self._dataset().RasterYSize

    @property
    def count(self) -> int:
        return self._dataset().RasterCount

    def data_type(self, band: int) -> Optional[DTypeStr]:
        return _gdal_datatype_to_dtype_str(self._band(band).DataType)

    def read_window(self, band: int, col_off: int, row_off: int, width: int, height: int) -> np.ndarray:
        b = self._band(band)
        dt = _gdal_datatype_to_dtype_str(b.DataType)
        if dt is None:
            raise RasterReadError(self._uri, band, row_off, f"tipo GDAL no soportado: {gdal.GetDataTypeName(b.DataType)}")
        try:
            buf = b.ReadRaster(col_off, row_off, width, height,
                               buf_xsize=width, buf_ysize=height, buf_type=b.DataType)
        except RuntimeError as e:
            raise RasterReadError(self._uri, band, row_off, str(e)) from e
        if buf is None:
            raise RasterReadError(self._uri, band, row_off, gdal.GetLastErrorMsg() or None)
        return np.frombuffer(buf, dtype=np.dtype(dt)).reshape(height, width)

    def geotransform(self) -> GeoTransform:
        return as_geotransform(self._dataset().GetGeoTransform())

    def projection(self) -> str:
        return self._dataset().GetProjection() or ""

    def nodata(self, band: int) -> Optional[float]:
        v = self._band(band).GetNoDataValue()
        return float(v) if v is not None else None

    def describe(self) -> DatasetInfo:
        ds = self._dataset()
        drv = ds.GetDriver()
        bands = []
        for i in range(1, ds.RasterCount + 1):
            b = ds.GetRasterBand(i)
            bx, by = b.GetBlockSize()
            mn, mx = b.GetMinimum(), b.GetMaximum()
            if (mn is None or mx is None) and ds.RasterXSize * ds.RasterYSize > 0:
                try:
                    mn, mx = b.ComputeRasterMinMax(False)
                except RuntimeError as e:
                    # banda enteramente nodata
                    logger.debug("ComputeRasterMinMax falló en banda %d: %s", i, e)
                    mn = mx = None
            ct = b.GetColorTable()
            bands.append(BandInfo(
                index=i,
                block_size=(bx, by),
                data_type=gdal.GetDataTypeName(b.DataType),
                color_interp=gdal.GetColorInterpretationName(b.GetColorInterpretation()),
                minimum=mn,
                maximum=mx,
                overview_count=b.GetOverviewCount(),
                color_table_entries=ct.GetCount() if ct is not None else None,
                units=b.GetUnitType() or "",
            ))
        return DatasetInfo(
            driver=drv.ShortName,
            driver_long_name=drv.LongName or "",
            width=ds.RasterXSize,
            height=ds.RasterYSize,
            count=ds.RasterCount,
            projection=ds.GetProjection() or "",
            geotransform=as_geotransform(ds.GetGeoTransform()),
            bands=tuple(bands),
        )

    def close(self) -> None:
        self._ds = None  # cierre explícito


@dataclass(frozen=True)
class GdalRasterOpener(RasterOpenerPort):
    """Abre rasters con GDAL. Registra drivers la primera vez que se usa."""
    cache_max_mb: Optional[int] = None

    def open(self, uri: str) -> GdalDataset:
        register_drivers(self.cache_max_mb)
        try:
            ds = gdal.Open(str(uri), gdal.GA_ReadOnly)
        except RuntimeError as e:
            raise RasterOpenError(uri, str(e)) from e
        if ds is None:
            raise RasterOpenError(uri, gdal.GetLastErrorMsg() or None)
        return GdalDataset(ds, str(uri))


__all__ = ["GdalRasterOpener", "GdalDataset", "register_drivers"]
