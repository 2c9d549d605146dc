# src/geotiffkit/services/band_materializer.py
from __future__ import annotations

"""
Materializador de bandas (contracts-first, sin dependencia del backend)

Lee una banda completa en su codificación nativa y la devuelve como float32:
  • read_band_2d(): una scanline por petición -> ndarray (rows, cols).
  • read_band_1d(): una sola petición masiva -> ndarray (rows*cols,).

Notas:
  - Ambos caminos producen exactamente los mismos valores
    (read_band_2d(...).ravel() == read_band_1d(...)).
  - Cast numérico directo a float32: sin clip, sin máscara de nodata.
  - Codificación desconocida -> None (nunca un buffer parcial).
  - Fallo de lectura -> RasterReadError, el proceso sigue vivo.
"""

import logging
import operator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import numpy as np

from ..contracts.errors import BandIndexError, RasterReadError
from ..contracts.geo import DTypeStr
from ..ports.raster_read import RasterDatasetPort

logger = logging.getLogger(__name__)

OUTPUT_DTYPE = np.dtype("float32")


# ----------------------
# Estrategias de lectura
# ----------------------

@dataclass(frozen=True)
class SampleReader:
    """Estrategia por codificación nativa: ancho de muestra + cast a float32."""
    encoding: DTypeStr
    native: np.dtype

    def to_float(self, samples: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        if samples.dtype != self.native:
            raise TypeError(f"Se esperaban muestras {self.native}, llegaron {samples.dtype}")
        if out is None:
            return samples.astype(OUTPUT_DTYPE, copy=True)
        # casting="unsafe": float64 -> float32 estrecha como un cast directo
        np.copyto(out, samples, casting="unsafe")
        return out


def _reader(encoding: DTypeStr) -> SampleReader:
    return SampleReader(encoding=encoding, native=np.dtype(encoding))


# conjunto cerrado; cualquier otra codificación -> None
SAMPLE_READERS: Mapping[str, SampleReader] = MappingProxyType({
    e: _reader(e)  # type: ignore[arg-type]
    for e in ("uint8", "uint16", "int16", "uint32", "int32", "float32", "float64")
})


def reader_for(encoding: Optional[str]) -> Optional[SampleReader]:
    if encoding is None:
        return None
    return SAMPLE_READERS.get(encoding)


# ----------------------
# Servicio
# ----------------------

@dataclass(frozen=True)
class BandMaterializer:
    """Convierte una banda de un RasterDatasetPort a float32 en memoria."""
    dataset: RasterDatasetPort

    def _check_band(self, band: int) -> int:
        count = self.dataset.count
        # sólo enteros: una banda 1.7 no se trunca a 1
        try:
            b = operator.index(band)
        except TypeError:
            raise BandIndexError(band, count) from None
        if b < 1 or b > count:
            raise BandIndexError(b, count)
        return b

    def _resolve(self, band: int) -> Tuple[int, Optional[SampleReader]]:
        b = self._check_band(band)
        enc = self.dataset.data_type(b)
        r = reader_for(enc)
        if r is None:
            logger.warning("Banda %d de %s: codificación no soportada (%s)", b, self.dataset.uri, enc)
        return b, r

    def read_band_2d(self, band: int) -> Optional[np.ndarray]:
        b, r = self._resolve(band)
        if r is None:
            return None
        rows, cols = self.dataset.height, self.dataset.width
        out = np.empty((rows, cols), dtype=OUTPUT_DTYPE)
        if out.size == 0:
            return out
        logger.debug("Leyendo banda %d (%s) por scanlines: %dx%d", b, r.encoding, cols, rows)
        for row in range(rows):
            scan = self.dataset.read_window(b, 0, row, cols, 1)
            if scan.shape != (1, cols):
                raise RasterReadError(self.dataset.uri, b, row,
                                      f"scanline con shape {scan.shape}, se esperaba {(1, cols)}")
            r.to_float(scan[0], out=out[row])
        return out

    def read_band_1d(self, band: int) -> Optional[np.ndarray]:
        b, r = self._resolve(band)
        if r is None:
            return None
        rows, cols = self.dataset.height, self.dataset.width
        if rows * cols == 0:
            return np.empty(0, dtype=OUTPUT_DTYPE)
        logger.debug("Leyendo banda %d (%s) en bloque: %dx%d", b, r.encoding, cols, rows)
        block = self.dataset.read_window(b, 0, 0, cols, rows)
        if block.size != rows * cols:
            raise RasterReadError(self.dataset.uri, b, None,
                                  f"bloque con {block.size} muestras, se esperaban {rows * cols}")
        return r.to_float(block.reshape(rows * cols))


__all__ = ["BandMaterializer", "SampleReader", "SAMPLE_READERS", "OUTPUT_DTYPE", "reader_for"]
