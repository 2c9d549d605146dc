import pytest
from pydantic import ValidationError
from geotiffkit.contracts.core import BandInfo, DatasetInfo

def _band(i=1, **kw):
    return BandInfo(index=i, block_size=(256, 256), data_type="Float32", **kw)

def test_band_info_defaults_and_frozen():
    b = _band()
    assert b.color_interp == "Undefined"
    assert b.overview_count == 0 and b.color_table_entries is None
    with pytest.raises(ValidationError):
        b.index = 2  # type: ignore[misc]

def test_band_info_rejects_bad_values():
    with pytest.raises(ValidationError):
        BandInfo(index=0, block_size=(1, 1), data_type="Byte")
    with pytest.raises(ValidationError):
        BandInfo(index=1, block_size=(1, 1), data_type="  ")

def test_dataset_info_origin_and_pixel_size():
    info = DatasetInfo(driver="GTiff", width=3, height=2, count=1,
                       geotransform=(10.0, 2.0, 0.0, 50.0, 0.0, -2.0), bands=(_band(),))
    assert info.origin == (10.0, 50.0)
    assert info.pixel_size == (2.0, -2.0)
    assert DatasetInfo(driver="MEM", width=0, height=0, count=0).origin is None

def test_dataset_info_bands_must_be_ordered():
    with pytest.raises(ValidationError):
        DatasetInfo(driver="GTiff", width=1, height=1, count=2, bands=(_band(2), _band(1)))
