"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : colorée, niveau configurable
- Sortie fichier : JSON avec rotation, incluant les HIT/MISS en DEBUG
- Redirection des loggers standards (uvicorn, httpx) vers loguru
"""

import logging
import sys
from pathlib import Path

from loguru import logger

# Loggers standards redirigés vers loguru
_STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "pymongo")


class InterceptHandler(logging.Handler):
    """Transmet les enregistrements du module logging à loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Remonte la pile jusqu'à l'appelant réel, hors module logging
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/trakt-proxy.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Fichier de log JSON
        rotation_size : Taille avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés

    Les HIT/MISS du cache sont journalisés en DEBUG : ils n'apparaissent que
    dans le fichier tant que la console reste en INFO.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in _STDLIB_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
    # httpx journalise chaque requête en INFO, déjà couvert par les logs du proxy
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
