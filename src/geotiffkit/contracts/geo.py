# src/geotiffkit/contracts/geo.py

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Literal, Tuple, Optional

import numpy.typing as npt

GeoTransform = Tuple[float, float, float, float, float, float]
DTypeStr = Literal["uint8","uint16","int16","uint32","int32","float32","float64"]

# ---------- Índices del geotransform ----------
class ParamID(IntEnum):
    """Posición de cada coeficiente dentro del geotransform de 6 elementos."""
    ORIGIN_X = 0
    PIXEL_WIDTH = 1
    ROW_ROTATION = 2
    ORIGIN_Y = 3
    COLUMN_ROTATION = 4
    PIXEL_HEIGHT = 5

# alias cortos (centro/escala en X e Y)
GEOTIFF_PARAM_CX = ParamID.ORIGIN_X
GEOTIFF_PARAM_SX = ParamID.PIXEL_WIDTH
GEOTIFF_PARAM_CY = ParamID.ORIGIN_Y
GEOTIFF_PARAM_SY = ParamID.PIXEL_HEIGHT

# ---------- CRS (puro dominio, sin GDAL) ----------
@dataclass(frozen=True)
class CRSRef:
    """Descriptor de referencia espacial: el WKT del dataset tal cual (None si no tiene)."""
    wkt: Optional[str] = None

    @staticmethod
    def from_wkt(wkt: str) -> "CRSRef":
        return CRSRef(wkt=wkt)

# ---------- Perfil y Raster (puro dominio) ----------
@dataclass(frozen=True)
class GeoProfile:
    count: int
    dtype: DTypeStr
    width: int
    height: int
    transform: GeoTransform
    crs: CRSRef
    nodata: Optional[float] = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0 or self.count < 0:
            raise ValueError("width/height/count no pueden ser negativos")
        if len(self.transform) != 6:
            raise ValueError(f"GeoTransform debe tener 6 coeficientes, no {len(self.transform)}")

@dataclass(frozen=True)
class GeoRaster:
    data: "npt.NDArray[Any]"  # type: ignore[valid-type]
    profile: GeoProfile

    def __post_init__(self):
        # Bloquea mutaciones accidentales sobre los datos
        if hasattr(self.data, "setflags"):
            self.data.setflags(write=False)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.data.shape  # type: ignore[no-any-return]

# ---------- GeoTransform helpers (afines a GDAL pero sin dependencia) ----------
def as_geotransform(values) -> GeoTransform:
    """Normaliza cualquier secuencia de 6 números a tupla de floats."""
    gt = tuple(float(v) for v in values)
    if len(gt) != 6:
        raise ValueError(f"GeoTransform debe tener 6 coeficientes, no {len(gt)}")
    return gt  # type: ignore[return-value]


def pixel_to_world(col: float, row: float, gt: GeoTransform) -> Tuple[float, float]:
    x0, px, rx, y0, ry, py = gt
    x = x0 + col * px + row * rx
    y = y0 + col * ry + row * py
    return x, y


def format_nodata(nodata: Optional[float]) -> str:
    if nodata is None:
        return "None"
    if math.isnan(nodata):
        return "NaN"
    return repr(float(nodata))

__all__ = [
    "GeoTransform","CRSRef","GeoProfile","GeoRaster","ParamID",
    "GEOTIFF_PARAM_CX","GEOTIFF_PARAM_SX","GEOTIFF_PARAM_CY","GEOTIFF_PARAM_SY",
    "as_geotransform","pixel_to_world",
    "format_nodata","DTypeStr",
]
