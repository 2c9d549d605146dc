# src/geotiffkit/services/dataset_handle.py
from __future__ import annotations

"""
DatasetHandle: acceso a un GeoTIFF abierto en sólo lectura.

Ciclo de vida:
  • El constructor NUNCA lanza si el fichero no abre: deja is_valid() == False
    y los metadatos sin poblar.
  • Si abre, cachea dimensiones, nodata de la banda 1, geotransform y CRS.
  • close() libera el dataset una sola vez; es seguro tras un open fallido
    y se puede llamar varias veces. También funciona como context manager.

Cualquier consulta sobre un handle inválido o cerrado lanza InvalidDatasetError.
El opener (backend) se inyecta; para construirlo desde Settings usa
composition.di.open_geotiff().
"""

import logging
import operator
import sys
from pathlib import Path
from typing import Optional, TextIO, Tuple, Union

import numpy as np

from ..contracts.errors import GeoTransformParamError, InvalidDatasetError, RasterOpenError
from ..contracts.geo import CRSRef, GeoProfile, GeoRaster, GeoTransform, ParamID
from ..ports.raster_read import RasterDatasetPort, RasterOpenerPort
from .band_materializer import BandMaterializer
from .info_service import render_information

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DatasetHandle:
    """Accesor a un raster (GeoTIFF) y a sus bandas como float32."""

    def __init__(self, path: PathLike, opener: RasterOpenerPort):
        self._path = str(path)
        self._ds: Optional[RasterDatasetPort] = None
        self._valid = False
        self._closed = False

        self._rows = self._cols = self._bands = 0
        self._nodata: Optional[float] = None
        self._has_nodata = False
        self._geotransform: Optional[GeoTransform] = None
        self._spatial_ref: Optional[CRSRef] = None

        try:
            self._ds = opener.open(self._path)
        except RasterOpenError as e:
            logger.error("Error leyendo fichero %s: %s", self._path, e)
            return

        self._valid = True
        self._load_metadata()

    # --------------- apertura ---------------
    def _load_metadata(self) -> None:
        ds = self._dataset()
        self._rows = ds.height
        self._cols = ds.width
        self._bands = ds.count
        if self._bands < 1:
            logger.warning("Número de bandas inválido en %s (%d)", self._path, self._bands)
        if self._bands > 1:
            logger.warning("%s tiene %d bandas: sólo se usa el nodata de la primera "
                           "(importación multibanda no soportada)", self._path, self._bands)
        if self._bands >= 1:
            self._nodata = ds.nodata(1)
            self._has_nodata = self._nodata is not None
        self._geotransform = ds.geotransform()
        proj = ds.projection()
        self._spatial_ref = CRSRef.from_wkt(proj) if proj else CRSRef()
        logger.info("Abierto %s: %dx%d, %d banda(s), nodata=%s",
                    self._path, self._cols, self._rows, self._bands, self._nodata)

    def _dataset(self) -> RasterDatasetPort:
        if not self._valid or self._ds is None:
            state = "cerrado" if self._closed else "inválido"
            raise InvalidDatasetError(f"Dataset {state}: {self._path}")
        return self._ds

    # --------------- context manager ---------------
    def __enter__(self) -> "DatasetHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DatasetHandle({self._path!r}, valid={self._valid})"

    def close(self) -> None:
        """Libera CRS y dataset exactamente una vez."""
        if self._closed:
            return
        self._closed = True
        self._spatial_ref = None
        ds, self._ds = self._ds, None
        self._valid = False
        if ds is not None:
            ds.close()
            logger.debug("Cerrado %s", self._path)

    # --------------- estado ---------------
    def is_valid(self) -> bool:
        return self._valid

    @property
    def closed(self) -> bool:
        return self._closed

    def get_file_name(self) -> str:
        return self._path

    def get_dataset(self) -> RasterDatasetPort:
        """Acceso directo al dataset del backend (rompe la abstracción a propósito)."""
        return self._dataset()

    # --------------- metadatos ---------------
    def get_dimensions(self) -> Tuple[int, int, int]:
        """(columnas, filas, bandas)."""
        self._dataset()
        return (self._cols, self._rows, self._bands)

    def get_geotransform(self) -> GeoTransform:
        # se relee del dataset en cada llamada
        self._geotransform = self._dataset().geotransform()
        return self._geotransform

    def get_geotransform_param(self, param_id: int) -> float:
        # sólo enteros: 5.9 o "1" no se truncan ni se convierten
        try:
            i = operator.index(param_id)
        except TypeError:
            i = None
        if i is None or not 0 <= i <= ParamID.PIXEL_HEIGHT:
            logger.error("get_geotransform_param: paramID inválido [%s]", param_id)
            raise GeoTransformParamError(param_id)
        return self.get_geotransform()[i]

    def get_projection(self) -> str:
        return self._dataset().projection()

    @property
    def spatial_ref(self) -> CRSRef:
        self._dataset()
        return self._spatial_ref  # type: ignore[return-value]

    def has_no_data(self) -> bool:
        self._dataset()
        return self._has_nodata

    def get_no_data_value(self) -> Optional[float]:
        """Nodata de la banda 1, sea cual sea la banda que se vaya a leer."""
        self._dataset()
        return self._nodata

    def profile(self) -> GeoProfile:
        """Perfil de la salida float32 de una banda."""
        self._dataset()
        return GeoProfile(
            count=1,
            dtype="float32",
            width=self._cols,
            height=self._rows,
            transform=self.get_geotransform(),
            crs=self._spatial_ref or CRSRef(),
            nodata=self._nodata,
        )

    # --------------- bandas ---------------
    def read_band_2d(self, band: int) -> Optional[np.ndarray]:
        return BandMaterializer(self._dataset()).read_band_2d(band)

    def read_band_1d(self, band: int) -> Optional[np.ndarray]:
        return BandMaterializer(self._dataset()).read_band_1d(band)

    def read_raster(self, band: int = 1) -> Optional[GeoRaster]:
        data = self.read_band_2d(band)
        if data is None:
            return None
        return GeoRaster(data=data, profile=self.profile())

    # --------------- diagnóstico ---------------
    def show_information(self, stream: Optional[TextIO] = None) -> None:
        text = render_information(self._dataset().describe(), self._has_nodata, self._nodata)
        (stream or sys.stdout).write(text)


__all__ = ["DatasetHandle"]
