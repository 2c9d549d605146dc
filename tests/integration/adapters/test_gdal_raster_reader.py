# tests/integration/adapters/test_gdal_raster_reader.py
import math
import numpy as np
import pytest
from pathlib import Path

gdal = pytest.importorskip("osgeo.gdal")

from geotiffkit.adapters import gdal_raster_reader as gr
from geotiffkit.adapters.gdal_raster_reader import GdalRasterOpener
from geotiffkit.contracts.errors import RasterOpenError
from geotiffkit.services.dataset_handle import DatasetHandle
from tests.factories import GT, SUPPORTED

pytestmark = pytest.mark.gdal  # corre sólo si hay GDAL

_NP2GDAL = {
    "uint8": "GDT_Byte", "uint16": "GDT_UInt16", "int16": "GDT_Int16",
    "uint32": "GDT_UInt32", "int32": "GDT_Int32", "float32": "GDT_Float32",
    "float64": "GDT_Float64",
}


def _write(path: Path, arr: np.ndarray, nodata=None) -> Path:
    gdal.UseExceptions()
    h, w = arr.shape
    drv = gdal.GetDriverByName("GTiff")
    ds = drv.Create(str(path), w, h, 1, getattr(gdal, _NP2GDAL[str(arr.dtype)]))
    ds.SetGeoTransform(GT)
    from osgeo import osr
    srs = osr.SpatialReference(); srs.ImportFromEPSG(4326)
    ds.SetProjection(srs.ExportToWkt())
    band = ds.GetRasterBand(1)
    band.WriteRaster(0, 0, w, h, np.ascontiguousarray(arr).tobytes())
    if nodata is not None:
        band.SetNoDataValue(float(nodata))
    ds.FlushCache(); ds = None
    return path


def _open(path: Path) -> DatasetHandle:
    return DatasetHandle(path, GdalRasterOpener())


def test_register_drivers_is_idempotent(monkeypatch):
    monkeypatch.setattr(gr, "_REGISTERED", False)
    assert gr.register_drivers() is True
    assert gr.register_drivers() is False
    assert gdal.GetDriverByName("GTiff") is not None


def test_read_small_geotiff(tmp_path: Path):
    p = _write(tmp_path / "tiny.tif", np.array([[1, 2], [3, 4]], dtype=np.uint16))
    with _open(p) as h:
        assert h.get_dimensions() == (2, 2, 1)
        np.testing.assert_array_equal(h.read_band_2d(1), [[1.0, 2.0], [3.0, 4.0]])
        assert h.spatial_ref.wkt


@pytest.mark.parametrize("dtype", SUPPORTED)
def test_both_read_paths_agree(tmp_path: Path, dtype):
    arr = (np.arange(15).reshape(3, 5) * 11).astype(dtype)
    p = _write(tmp_path / f"{dtype}.tif", arr)
    with _open(p) as h:
        two, one = h.read_band_2d(1), h.read_band_1d(1)
    np.testing.assert_array_equal(two.ravel(), one)
    np.testing.assert_array_equal(two, arr.astype(np.float32))


def test_geotransform_and_nodata(tmp_path: Path):
    p = _write(tmp_path / "gt.tif", np.zeros((2, 3), np.float32), nodata=math.nan)
    with _open(p) as h:
        assert h.get_geotransform() == pytest.approx(GT)
        assert h.get_geotransform_param(5) == pytest.approx(-0.01)
        assert h.has_no_data() and math.isnan(h.get_no_data_value())


def test_missing_file(tmp_path: Path):
    h = _open(tmp_path / "nope.tif")
    assert h.is_valid() is False
    h.close()
    with pytest.raises(RasterOpenError):
        GdalRasterOpener().open(str(tmp_path / "nope.tif"))


def test_describe(tmp_path: Path):
    p = _write(tmp_path / "d.tif", np.array([[0, 5], [7, 9]], dtype=np.uint16), nodata=0)
    with _open(p) as h:
        info = h.get_dataset().describe()
    assert (info.driver, info.driver_long_name) == ("GTiff", "GeoTIFF")
    b = info.bands[0]
    assert b.data_type == "UInt16" and b.color_interp == "Gray"
    assert (b.minimum, b.maximum) == (5.0, 9.0)
