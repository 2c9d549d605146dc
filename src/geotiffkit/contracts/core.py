# src/geotiffkit/contracts/core.py
from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, field_validator

from .geo import GeoTransform

# -------------------------
# Descripción de bandas
# -------------------------
class BandInfo(BaseModel):
    """Resumen diagnóstico de una banda (sólo lectura, no se parsea)."""
    model_config = ConfigDict(frozen=True)
    index: PositiveInt
    block_size: Tuple[NonNegativeInt, NonNegativeInt]
    data_type: str
    color_interp: str = "Undefined"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    overview_count: NonNegativeInt = 0
    color_table_entries: Optional[NonNegativeInt] = None
    units: str = ""

    @field_validator("data_type", "color_interp")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("nombre no puede ser vacío")
        return v2

# -------------------------
# Descripción del dataset
# -------------------------
class DatasetInfo(BaseModel):
    model_config = ConfigDict(frozen=True)
    driver: str
    driver_long_name: str = ""
    width: NonNegativeInt
    height: NonNegativeInt
    count: NonNegativeInt
    projection: str = ""
    geotransform: Optional[GeoTransform] = None
    bands: Tuple[BandInfo, ...] = Field(default_factory=tuple)

    @field_validator("bands")
    @classmethod
    def _ordered(cls, v: Tuple[BandInfo, ...]) -> Tuple[BandInfo, ...]:
        idx = [b.index for b in v]
        if idx != sorted(idx):
            raise ValueError("bands debe venir ordenado por índice")
        return v

    @property
    def origin(self) -> Optional[Tuple[float, float]]:
        if self.geotransform is None:
            return None
        return (self.geotransform[0], self.geotransform[3])

    @property
    def pixel_size(self) -> Optional[Tuple[float, float]]:
        if self.geotransform is None:
            return None
        return (self.geotransform[1], self.geotransform[5])
