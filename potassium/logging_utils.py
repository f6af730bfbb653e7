"""Logging helpers for Potassium."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


def _build_formatter() -> logging.Formatter:
    return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def setup_logging(
    log_dir: str | Path | None = None,
    log_name: str = "potassium",
    level: int = logging.INFO,
) -> logging.Logger:
    """Initialize console and (optionally) file logging.

    Parameters
    ----------
    log_dir:
        Directory where log files will be stored. When ``None`` only the
        console handler is attached.
    log_name:
        Base name of the log file without extension.
    level:
        Level applied to the ``potassium`` logger.

    Returns
    -------
    logging.Logger
        Configured package logger instance.
    """

    logger = logging.getLogger("potassium")
    logger.setLevel(level)

    # Avoid attaching duplicate handlers in case of repeated initialization.
    existing_handlers = {type(handler) for handler in logger.handlers}

    formatter = _build_formatter()

    if logging.StreamHandler not in existing_handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir is not None and logging.FileHandler not in existing_handlers:
        log_directory = Path(log_dir)
        log_directory.mkdir(parents=True, exist_ok=True)
        log_file = log_directory / f"{log_name}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug("Logging initialized", extra={"log_file": str(log_file)})

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger under the ``potassium`` hierarchy."""

    base = logging.getLogger("potassium")
    if not name:
        return base
    if name == "potassium":
        return base
    if name.startswith("potassium."):
        name = name[len("potassium."):]
    return base.getChild(name)
