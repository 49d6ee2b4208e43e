from __future__ import annotations

import logging
import sys

from loguru import logger

_CONFIGURED = False

_QUIET_LOGGERS = {
    "openai": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "stripe": "WARNING",
    "urllib3": "WARNING",
}


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    logger.remove()
    logger.configure(
        handlers=[  # type: ignore
            {
                "sink": sys.stdout,
                "level": level,
                "format": (
                    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                    "<level>{level}</level> | "
                    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                    "<level>{message}</level>"
                ),
                "colorize": False,
            },
        ]
    )
    for logger_name, logger_level in _QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(logger_level)
    _CONFIGURED = True
