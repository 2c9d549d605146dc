# src/geotiffkit/logging_config.py
"""
Configuración de logging para el namespace 'geotiffkit'.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

LOGGER_NAME = "geotiffkit"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configura el logger del paquete.

    Args:
        level: nivel (logging.DEBUG, logging.INFO, ...)
        log_file: ruta opcional para duplicar los logs en fichero.
        stream: destino de consola (por defecto sys.stdout).
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # evita handlers duplicados si se llama más de una vez
    if logger.hasHandlers():
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging inicializado.")
    return logger
