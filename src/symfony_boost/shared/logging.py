from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import LoggingConfig
from .errors import ConfigError

ROOT_LOGGER = "symfony_boost"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# SQLAlchemy echoes every statement at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name}")
    return level


def configure_logging(config: LoggingConfig) -> None:
    """Send log records to stderr, or to ``config.file``. Never to stdout, which carries the protocol."""
    level = resolve_level(config.level)
    if config.file:
        handler: logging.Handler = logging.FileHandler(config.file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)
    logging.captureWarnings(True)

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or ROOT_LOGGER)
