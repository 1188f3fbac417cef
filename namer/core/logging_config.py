# /namer/core/logging_config.py

import logging
import sys

from .config import LOG_LEVEL


def setup_logging() -> None:
    """Configures the root logger once for the whole application."""
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Avoid stacking handlers when the app is reloaded in-process.
    if not any(getattr(handler, "_namer_handler", False) for handler in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._namer_handler = True
        root_logger.addHandler(console_handler)

    # Noisy third-party loggers
    for logger_name, level in {
        "sqlalchemy.engine": logging.WARNING,
        "httpx": logging.WARNING,
        "uvicorn.access": logging.WARNING,
    }.items():
        logging.getLogger(logger_name).setLevel(level)
