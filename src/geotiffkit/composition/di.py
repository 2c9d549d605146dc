# src/geotiffkit/composition/di.py
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..config import Settings, get_settings
from ..contracts.errors import BackendNotAvailableError
from ..ports.raster_read import RasterOpenerPort
from ..services.dataset_handle import DatasetHandle, PathLike

logger = logging.getLogger(__name__)


def load_settings_from_yaml(path: Path) -> Settings:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    # en el YAML propio una clave desconocida es un error de escritura
    unknown = sorted(set(data) - set(Settings.model_fields))
    if unknown:
        raise ValueError(f"Claves desconocidas en {path}: {unknown}")
    return Settings(**data)


def _rasterio_opener(settings: Settings) -> RasterOpenerPort:
    from ..adapters.rasterio_raster_reader import RasterioRasterOpener
    return RasterioRasterOpener()


def _gdal_opener(settings: Settings) -> RasterOpenerPort:
    from ..adapters.gdal_raster_reader import GdalRasterOpener
    return GdalRasterOpener(cache_max_mb=settings.gdal_cache_max_mb)


_FACTORIES = {
    "rasterio": _rasterio_opener,
    "gdal": _gdal_opener,
}


def build_opener(settings: Settings) -> RasterOpenerPort:
    """Elige el backend. 'auto' prefiere rasterio; si no está, GDAL."""
    order = ("rasterio", "gdal") if settings.backend == "auto" else (settings.backend,)
    errors = []
    for name in order:
        try:
            opener = _FACTORIES[name](settings)
        except ImportError as e:
            logger.debug("Backend %s no disponible: %s", name, e)
            errors.append(f"{name}: {e}")
            continue
        logger.debug("Backend raster: %s", name)
        return opener
    raise BackendNotAvailableError(
        "No hay backend para leer rasters (instala rasterio o GDAL). " + "; ".join(errors)
    )


def open_geotiff(path: PathLike, settings: Settings | None = None) -> DatasetHandle:
    """Abre `path` con el backend configurado. Comprueba is_valid() antes de usarlo."""
    st = settings if settings is not None else get_settings()
    return DatasetHandle(path, build_opener(st))
