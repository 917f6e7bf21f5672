from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Root logger of this package, whatever import path it was loaded under.
PACKAGE_LOGGER_NAME = __name__.rsplit(".core.", 1)[0]


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger.

    Safe to call more than once (e.g. app factory used by tests).
    """

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    package_logger.setLevel(level)

    if not any(getattr(h, "_hr_platform", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hr_platform = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
