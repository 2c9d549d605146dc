import pytest

from geotiffkit.composition import di
from geotiffkit.config import Settings
from geotiffkit.contracts.errors import BackendNotAvailableError
from tests.factories import FakeOpener, make_dataset


def _missing(settings):
    raise ImportError("No module named 'x'")


def test_auto_prefers_rasterio(monkeypatch):
    a, b = FakeOpener(), FakeOpener()
    monkeypatch.setitem(di._FACTORIES, "rasterio", lambda s: a)
    monkeypatch.setitem(di._FACTORIES, "gdal", lambda s: b)
    assert di.build_opener(Settings(_env_file=None)) is a


def test_auto_falls_back_to_gdal(monkeypatch):
    b = FakeOpener()
    monkeypatch.setitem(di._FACTORIES, "rasterio", _missing)
    monkeypatch.setitem(di._FACTORIES, "gdal", lambda s: b)
    assert di.build_opener(Settings(_env_file=None)) is b


def test_explicit_backend_does_not_fall_back(monkeypatch):
    monkeypatch.setitem(di._FACTORIES, "gdal", _missing)
    monkeypatch.setitem(di._FACTORIES, "rasterio", lambda s: FakeOpener())
    with pytest.raises(BackendNotAvailableError):
        di.build_opener(Settings(_env_file=None, backend="gdal"))


def test_open_geotiff_uses_configured_backend(monkeypatch):
    ds = make_dataset()
    opener = FakeOpener({"a.tif": ds})
    monkeypatch.setitem(di._FACTORIES, "rasterio", lambda s: opener)
    with di.open_geotiff("a.tif", Settings(_env_file=None, backend="rasterio")) as h:
        assert h.is_valid()
        assert h.get_dimensions() == (2, 2, 1)
    assert ds.close_calls == 1
