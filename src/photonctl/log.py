"""Logging setup for the CLI.

The package logger stays silent unless ``--log-file`` is given.
"""

from __future__ import annotations

import logging
from pathlib import Path

from photonctl.constants import LOG_PREFIX

_PACKAGE_LOGGER = "photonctl"

logging.getLogger(_PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(log_file: str | Path | None) -> logging.Handler | None:
    """Attach a file handler to the package logger and return it."""

    if not log_file:
        return None

    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(f"{LOG_PREFIX} %(asctime)s %(name)s %(levelname)s: %(message)s"))

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


def cleanup_logging(handler: logging.Handler | None) -> None:
    if handler is None:
        return
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.removeHandler(handler)
    handler.close()
