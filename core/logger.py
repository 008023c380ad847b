import logging
import os
from pathlib import Path
from typing import Optional

LOGGER_NAME = "kubectl_guard"
FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(level: str = "WARNING", log_path: Optional[Path] = None) -> logging.Logger:
    """Configure the shared logger; repeated calls only add a file handler for a new path."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    formatter = logging.Formatter(FORMAT)
    if not any(type(handler) is logging.StreamHandler for handler in logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    if log_path is not None:
        target = os.path.abspath(log_path)
        known = {h.baseFilename for h in logger.handlers if isinstance(h, logging.FileHandler)}
        if target not in known:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
    return logger
