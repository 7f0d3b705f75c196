"""
Logging setup for the PRS Online server.

``setup_logging`` builds a ``logging.config.dictConfig`` dictionary from the
``PRS_ONLINE_LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_FILE_DIR`` and
``ENABLE_FILE_LOGGING`` settings. The notice workflow and account services log
every state change at debug level, so their loggers are opened up further than
the framework and SDK loggers.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from prs_online.server.core.config import settings

LOG_FILE_NAME = "prs_online.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
}

MODULE_LOG_LEVELS = {
    "prs_online": "INFO",
    "prs_online.server.graphql": "DEBUG",
    "prs_online.server.services": "DEBUG",
    "sqlalchemy.engine": "WARNING",
    "strawberry": "WARNING",
    "azure": "WARNING",
    "uvicorn.access": "WARNING",
}


def build_logging_config(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> Dict[str, Any]:
    """Return the ``dictConfig`` dictionary for the given options.

    Unset options fall back to the settings. An unknown format name falls back
    to the detailed format. The root logger passes everything through; the
    console handler filters at ``log_level`` and the file handler, when a
    ``log_file`` is given, keeps debug records.
    """
    level = (log_level or settings.log_level).upper()
    fmt = LOG_FORMATS.get(log_format or settings.log_format, LOG_FORMATS["detailed"])

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level, "formatter": "default"},
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_file),
            "encoding": "utf-8",
            "level": "DEBUG",
            "formatter": "default",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": fmt, "datefmt": DATE_FORMAT}},
        "handlers": handlers,
        "root": {"level": "DEBUG", "handlers": list(handlers)},
        "loggers": {name: {"level": module_level} for name, module_level in MODULE_LOG_LEVELS.items()},
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: Optional[bool] = None,
) -> None:
    """Configure the root logger. Calling it again replaces the previous handlers."""
    if enable_file is None:
        enable_file = settings.enable_file_logging

    log_file = None
    if enable_file:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

    logging.config.dictConfig(build_logging_config(log_level, log_format, log_file))
    logging.getLogger(__name__).debug(f"Logging configured (file: {log_file or 'off'})")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
