# tests/integration/test_cli_end_to_end.py
import numpy as np
import pytest
from pathlib import Path

pytest.importorskip("rasterio")

from geotiffkit.cli import main
from tests.factories import write_geotiff

pytestmark = pytest.mark.integration


def test_info_on_real_file(tmp_path: Path, capsys):
    p = write_geotiff(tmp_path / "input.tif", [np.full((4, 6), 3, np.int16)], nodata=-1)
    assert main(["--backend", "rasterio", "info", str(p)]) == 0
    out = capsys.readouterr().out
    assert "Driver:\t\tGTiff" in out
    assert "Size is\tX: 6\tY: 4\tC: 1" in out
    assert "NoData value: -1.0" in out


def test_info_missing_default(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--backend", "rasterio", "info"]) == -1
    assert "input.tif" in capsys.readouterr().err


def test_read_to_npy(tmp_path: Path):
    arr = np.arange(6, dtype=np.uint8).reshape(2, 3)
    p = write_geotiff(tmp_path / "b.tif", [arr])
    out = tmp_path / "b.npy"
    assert main(["--backend", "rasterio", "read", str(p), "--out", str(out)]) == 0
    np.testing.assert_array_equal(np.load(out), arr.astype(np.float32))
