# src/geotiffkit/ports/raster_read.py
from __future__ import annotations

from typing import Protocol, runtime_checkable, Optional

import numpy as np

from ..contracts.core import DatasetInfo
from ..contracts.geo import DTypeStr, GeoTransform

URI = str

@runtime_checkable
class RasterDatasetPort(Protocol):
    """
    Dataset raster abierto en sólo lectura (GeoTIFF/COG, etc.).
    Reglas:
      - bandas 1-based.
      - read_window devuelve SIEMPRE el dtype nativo de la banda, shape (height, width).
      - errores de lectura -> RasterReadError, nunca None.
    """
    @property
    def uri(self) -> URI: ...
    @property
    def width(self) -> int: ...
    @property
    def height(self) -> int: ...
    @property
    def count(self) -> int: ...
    def data_type(self, band: int) -> Optional[DTypeStr]: ...  # None = codificación no soportada
    def read_window(self, band: int, col_off: int, row_off: int, width: int, height: int) -> np.ndarray: ...
    def geotransform(self) -> GeoTransform: ...
    def projection(self) -> str: ...
    def nodata(self, band: int) -> Optional[float]: ...
    def describe(self) -> DatasetInfo: ...
    def close(self) -> None: ...


@runtime_checkable
class RasterOpenerPort(Protocol):
    """Abre un recurso raster. Falla con RasterOpenError (no devuelve None)."""
    def open(self, uri: URI) -> RasterDatasetPort: ...


__all__ = ["RasterDatasetPort", "RasterOpenerPort", "URI"]
