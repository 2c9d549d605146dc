import numpy as np
from geotiffkit.contracts.core import BandInfo, DatasetInfo
from geotiffkit.contracts.errors import RasterOpenError, RasterReadError

GT = (-20.3066, 0.01, 0.0, -24.7095, 0.0, -0.01)
WKT_4326 = 'GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],AUTHORITY["EPSG","4326"]]'

SUPPORTED = ("uint8", "uint16", "int16", "uint32", "int32", "float32", "float64")


class FakeDataset:
    """Dataset en memoria que cumple RasterDatasetPort."""

    def __init__(self, bands, uri="mem://fake.tif", gt=GT, wkt=WKT_4326, nodata=None,
                 dtype_override=None, fail_row=None, shape=None):
        self.bands = [np.asarray(b) for b in bands]
        self._uri = uri
        self._gt = gt
        self._wkt = wkt
        self._nodata = nodata
        self._dtype_override = dtype_override or {}
        self.fail_row = fail_row
        if shape is not None:
            self._h, self._w = shape
        elif self.bands:
            self._h, self._w = self.bands[0].shape
        else:
            self._h = self._w = 0
        self.reads = []
        self.close_calls = 0

    @property
    def uri(self):
        return self._uri

    @property
    def width(self):
        return self._w

    @property
    def height(self):
        return self._h

    @property
    def count(self):
        return len(self.bands)

    def data_type(self, band):
        if band in self._dtype_override:
            return self._dtype_override[band]
        dt = str(self.bands[band - 1].dtype)
        return dt if dt in SUPPORTED else None

    def read_window(self, band, col_off, row_off, width, height):
        self.reads.append((band, col_off, row_off, width, height))
        if self.fail_row is not None and row_off <= self.fail_row < row_off + height:
            raise RasterReadError(self._uri, band, row_off, "fallo simulado")
        return self.bands[band - 1][row_off:row_off + height, col_off:col_off + width].copy()

    def geotransform(self):
        return tuple(self._gt)

    def projection(self):
        return self._wkt

    def nodata(self, band):
        if isinstance(self._nodata, dict):
            return self._nodata.get(band)
        return self._nodata

    def describe(self):
        return DatasetInfo(
            driver="MEM", driver_long_name="In Memory raster",
            width=self._w, height=self._h, count=self.count,
            projection=self._wkt, geotransform=self._gt,
            bands=tuple(
                BandInfo(index=i + 1, block_size=(self._w, 1), data_type=str(b.dtype),
                         minimum=float(b.min()), maximum=float(b.max()))
                for i, b in enumerate(self.bands)
            ),
        )

    def close(self):
        self.close_calls += 1


class FakeOpener:
    def __init__(self, datasets=None):
        self.datasets = dict(datasets or {})
        self.opened = []

    def open(self, uri):
        uri = str(uri)
        if uri not in self.datasets:
            raise RasterOpenError(uri, "no existe")
        self.opened.append(uri)
        return self.datasets[uri]


def make_dataset(values=None, dtype=np.uint16, **kw):
    arr = np.array(values if values is not None else [[1, 2], [3, 4]], dtype=dtype)
    return FakeDataset([arr], **kw)


def open_fake(ds, uri="mem://fake.tif"):
    from geotiffkit.services.dataset_handle import DatasetHandle
    return DatasetHandle(uri, FakeOpener({uri: ds}))


def write_geotiff(path, bands, gt=GT, epsg=4326, nodata=None):
    """Escribe un GeoTIFF pequeño con rasterio (tests de integración)."""
    import rasterio
    from rasterio.transform import Affine

    bands = [np.asarray(b) for b in bands]
    h, w = bands[0].shape
    with rasterio.open(
        path, "w", driver="GTiff", height=h, width=w, count=len(bands),
        dtype=bands[0].dtype, crs=f"EPSG:{epsg}", transform=Affine.from_gdal(*gt),
        nodata=nodata,
    ) as dst:
        for i, b in enumerate(bands, start=1):
            dst.write(b, i)
    return path
