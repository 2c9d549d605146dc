# src/geotiffkit/config.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Backend = Literal["auto", "rasterio", "gdal"]


class Settings(BaseSettings):
    """
    Config unificada del paquete. No toca disco.
    Debe ser construida y provista por composition/di.py (CLI/adapters).
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GEOTIFFKIT_",
        extra="ignore",  # claves ajenas del .env se descartan
        frozen=True,
    )

    # --- backend raster ---
    backend: Backend = "auto"
    gdal_cache_max_mb: Optional[int] = Field(default=None, ge=1)

    # --- CLI ---
    default_input: Path = Path("input.tif")
    build_id: Optional[str] = None  # p.ej. hash git inyectado por CI

    # --- logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # ----------------------------
    # Normalizadores / validadores
    # ----------------------------
    @field_validator("backend", mode="before")
    @classmethod
    def _lower_backend(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def _valid_level(cls, v: str | int) -> str:
        if isinstance(v, int):
            name = logging.getLevelName(v)
        else:
            name = str(v).strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"log_level inválido: {v}")
        return name

    @field_validator("build_id", mode="before")
    @classmethod
    def _blank_build_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v2 = str(v).strip()
        return v2 or None

    def log_level_int(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Instancia cacheada. Úsala SOLO desde composition/di.py o CLI.
    Prohibido usarla en services/. Para tests, recuerda limpiar:
        get_settings.cache_clear()
    """
    return Settings()
