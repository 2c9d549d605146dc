# src/geotiffkit/cli.py
from __future__ import annotations

"""
CLI de geotiffkit (demo, minimal).

Comandos:
  - info: abre un GeoTIFF (por defecto input.tif) e imprime su resumen.
  - read: lee una banda como float32 y la guarda en .npy.

Ejemplos rápidos:
  python -m geotiffkit info ./dem.tif
  python -m geotiffkit --backend gdal read ./dem.tif --band 1 --out dem.npy
"""

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import numpy as np

from .composition.di import load_settings_from_yaml, open_geotiff
from .config import Settings, get_settings
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "geotiffkit - acceso simple a metadatos y bandas GeoTIFF "
    "(rasterio/GDAL -> numpy float32)"
)


# ----------------------
# Utilidades locales
# ----------------------

def _build_id(s: Settings) -> str:
    """Versión del paquete, más el build id (p.ej. commit git) si está configurado."""
    try:
        v = version("geotiffkit")
    except PackageNotFoundError:
        v = "unknown"
    return f"{v} ({s.build_id})" if s.build_id else v


def _settings_from_args(args: argparse.Namespace) -> Settings:
    s = load_settings_from_yaml(Path(args.config)) if args.config else get_settings()
    upd: dict = {}
    if args.backend:
        upd["backend"] = args.backend
    if args.log_level:
        upd["log_level"] = args.log_level.upper()
    if args.log_file:
        upd["log_file"] = Path(args.log_file)
    if upd:
        s = s.model_copy(update=upd)
    return s


# ----------------------
# Comandos
# ----------------------

def cmd_info(args: argparse.Namespace, s: Settings) -> int:
    path = Path(args.path) if args.path else s.default_input
    print(DESCRIPTION)
    print("geotiffkit")
    print(f"\tBuild:\t{_build_id(s)}")

    with open_geotiff(path, s) as geo:
        if not geo.is_valid():
            print(f"Error abriendo GeoTIFF: {path}", file=sys.stderr)
            return -1
        print(f"Fichero válido: {geo.get_file_name()}")
        geo.show_information()
    return 0


def cmd_read(args: argparse.Namespace, s: Settings) -> int:
    with open_geotiff(args.path, s) as geo:
        if not geo.is_valid():
            print(f"Error abriendo GeoTIFF: {args.path}", file=sys.stderr)
            return -1
        arr = geo.read_band_1d(args.band) if args.flat else geo.read_band_2d(args.band)
    if arr is None:
        print(f"Banda {args.band}: tipo de dato no soportado", file=sys.stderr)
        return 1
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        np.save(out, arr)
        print(str(out))
    else:
        finite = arr[np.isfinite(arr)]
        mn = float(finite.min()) if finite.size else float("nan")
        mx = float(finite.max()) if finite.size else float("nan")
        print(f"shape={arr.shape} dtype={arr.dtype} min={mn:g} max={mx:g}")
    return 0


# ----------------------
# Parser
# ----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="geotiffkit", description=DESCRIPTION)
    p.add_argument("--config", help="YAML de Settings (si no, entorno GEOTIFFKIT_*)")
    p.add_argument("--backend", choices=("auto", "rasterio", "gdal"), help="backend raster")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING...")
    p.add_argument("--log-file", help="duplica el log en este fichero")
    sub = p.add_subparsers(dest="cmd", required=True)

    # info
    pi = sub.add_parser("info", help="resumen del GeoTIFF")
    pi.add_argument("path", nargs="?", default=None, help="GeoTIFF (por defecto Settings.default_input)")
    pi.set_defaults(func=cmd_info)

    # read
    pr = sub.add_parser("read", help="lee una banda como float32")
    pr.add_argument("path", help="GeoTIFF de entrada")
    pr.add_argument("-b", "--band", type=int, default=1, help="índice de banda 1-based")
    pr.add_argument("--flat", action="store_true", help="lectura en bloque, salida 1-D")
    pr.add_argument("--out", help="ruta .npy de salida (si no, imprime resumen)")
    pr.set_defaults(func=cmd_read)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        s = _settings_from_args(args)
        setup_logging(s.log_level_int(), s.log_file, stream=sys.stderr)
        return int(args.func(args, s))
    except KeyboardInterrupt:
        return 130
    except Exception as ex:
        logger.debug("Fallo en comando %s", args.cmd, exc_info=True)
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
