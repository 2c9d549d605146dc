# src/geotiffkit/services/info_service.py
from __future__ import annotations

"""
Volcado informativo (estilo gdalinfo) de un DatasetInfo.

Sólo lectura e impresión; nadie debe parsear esta salida.
"""

import math
from typing import List, Optional

from ..contracts.core import BandInfo, DatasetInfo
from ..contracts.geo import format_nodata, pixel_to_world


def _fmt(v: Optional[float]) -> str:
    return "?" if v is None else f"{v:g}"


def _corner_lines(info: DatasetInfo) -> List[str]:
    gt = info.geotransform
    corners = (
        ("Upper Left", 0, 0),
        ("Lower Left", 0, info.height),
        ("Upper Right", info.width, 0),
        ("Lower Right", info.width, info.height),
        ("Center", info.width / 2.0, info.height / 2.0),
    )
    out = ["Corner Coordinates:"]
    for name, col, row in corners:
        x, y = pixel_to_world(col, row, gt)
        out.append(f"{name:<12}({x:14.7f}, {y:14.7f})")
    return out


def _nodata_line(has_nodata: bool, nodata: Optional[float]) -> str:
    if not has_nodata or nodata is None:
        return "Current band does not provide explicit no-data field definition"
    if math.isnan(nodata):
        return f"NoData value: NaN --> {nodata}"
    return f"NoData value: {format_nodata(nodata)}"


def _band_lines(b: BandInfo, has_nodata: bool, nodata: Optional[float]) -> List[str]:
    bx, by = b.block_size
    out = [
        f"Band {b.index} Block={bx}x{by} Type={b.data_type}, ColorInterp={b.color_interp}",
        f"Min = {_fmt(b.minimum)},\tMax = {_fmt(b.maximum)}",
    ]
    if b.overview_count > 0:
        out.append(f"Band has {b.overview_count} overviews")
    if b.color_table_entries is not None:
        out.append(f"Band has a color table with {b.color_table_entries} entries")
    out.append(f"Units:\t\t{b.units}")
    # OJO: el nodata es el de la banda 1 para todas las bandas
    out.append(_nodata_line(has_nodata, nodata))
    return out


def render_information(info: DatasetInfo, has_nodata: bool, nodata: Optional[float]) -> str:
    driver = info.driver if not info.driver_long_name else f"{info.driver}/{info.driver_long_name}"
    lines = [
        f"Driver:\t\t{driver}",
        f"Size is\tX: {info.width}\tY: {info.height}\tC: {info.count}",
    ]
    if info.projection:
        lines.append(f"Projection is {info.projection}")
    if info.geotransform is not None:
        ox, oy = info.origin  # type: ignore[misc]
        px, py = info.pixel_size  # type: ignore[misc]
        lines.append(f"Origin =\t{ox:g}, {oy:g}")
        lines.append(f"Pixel Size =\t{px:g}, {py:g}")
        lines.extend(_corner_lines(info))
    for b in info.bands:
        lines.extend(_band_lines(b, has_nodata, nodata))
    return "\n".join(lines) + "\n"


__all__ = ["render_information"]
