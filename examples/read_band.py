# =============================
# FILE: examples/read_band.py
# =============================
"""
Uso mínimo: DatasetHandle detrás del backend configurado.
Abre un GeoTIFF, imprime metadatos y lee la banda 1 por los dos caminos.
"""
import sys
from pathlib import Path

from geotiffkit.composition.di import open_geotiff
from geotiffkit.contracts.geo import ParamID


if __name__ == "__main__":
    path = Path(sys.argv[1] if len(sys.argv) > 1 else "input.tif").resolve()
    with open_geotiff(path) as geo:
        if not geo.is_valid():
            raise SystemExit(f"No se pudo abrir {path}")

        cols, rows, bands = geo.get_dimensions()
        print("Dimensiones:", cols, rows, bands)
        print("Origen:", geo.get_geotransform_param(ParamID.ORIGIN_X), geo.get_geotransform_param(ParamID.ORIGIN_Y))
        print("Pixel:", geo.get_geotransform_param(ParamID.PIXEL_WIDTH), geo.get_geotransform_param(ParamID.PIXEL_HEIGHT))
        print("NoData:", geo.get_no_data_value() if geo.has_no_data() else "(sin definir)")

        grid = geo.read_band_2d(1)
        flat = geo.read_band_1d(1)
        if grid is None:
            raise SystemExit("Tipo de dato de la banda 1 no soportado")
        print("2D:", grid.shape, "1D:", flat.shape, "iguales:", bool((grid.ravel() == flat).all()))
