"""Logging configuration: console output plus an optional rotating log file."""

import logging
from logging.handlers import RotatingFileHandler

from .config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(cfg: Config):
    """Configure the root logger from ``cfg``."""
    log_formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    handlers = [console_handler]

    # Rotating file handler (auto-compaction)
    if cfg.log_file:
        file_handler = RotatingFileHandler(
            cfg.log_file,
            maxBytes=cfg.log_max_bytes,
            backupCount=cfg.log_backup_count,
        )
        file_handler.setFormatter(log_formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        handlers=handlers,
        force=True,
    )
