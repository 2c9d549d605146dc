# src/geotiffkit/contracts/errors.py
from __future__ import annotations

"""
Jerarquía de errores del paquete.

Todas heredan de GeotiffError y además de la excepción estándar más cercana
(OSError, IndexError, RuntimeError) para que el código cliente pueda capturar
por cualquiera de las dos vías.
"""


class GeotiffError(Exception):
    """Raíz de los errores de geotiffkit."""


class RasterOpenError(GeotiffError, OSError):
    """No se pudo abrir el recurso raster (inexistente, formato no soportado, corrupto)."""

    def __init__(self, uri: str, reason: str | None = None):
        self.uri = str(uri)
        self.reason = reason
        msg = f"No se pudo abrir el raster: {self.uri}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class RasterReadError(GeotiffError, OSError):
    """Fallo de lectura de una scanline o del bloque completo de una banda."""

    def __init__(self, uri: str, band: int, row: int | None = None, reason: str | None = None):
        self.uri = str(uri)
        self.band = band
        self.row = row
        self.reason = reason
        where = f"banda {band}" if row is None else f"banda {band}, fila {row}"
        msg = f"No se pudo leer {where} de {self.uri}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidDatasetError(GeotiffError, RuntimeError):
    """Operación sobre un handle que no abrió correctamente o ya fue cerrado."""


class BandIndexError(GeotiffError, IndexError):
    def __init__(self, band: int, count: int):
        self.band = band
        self.count = count
        super().__init__(f"Índice de banda fuera de rango: {band} (válido 1..{count})")


class GeoTransformParamError(GeotiffError, IndexError):
    def __init__(self, param_id: int):
        self.param_id = param_id
        super().__init__(f"paramID inválido: [{param_id}]. Debe cumplir 0 <= paramID <= 5")


class BackendNotAvailableError(GeotiffError, RuntimeError):
    """No hay librería raster importable para el backend configurado."""


__all__ = [
    "GeotiffError", "RasterOpenError", "RasterReadError", "InvalidDatasetError",
    "BandIndexError", "GeoTransformParamError", "BackendNotAvailableError",
]
