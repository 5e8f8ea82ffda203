"""Logging setup for the API process and the Celery worker."""

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: str | int = logging.INFO) -> None:
    """Route the root logger through a single Rich console handler.

    ``level`` accepts either a logging constant or a name such as ``"DEBUG"``
    (as found in ``Settings.log_level``). Unknown names fall back to INFO.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = RichHandler(show_time=True, show_path=False, rich_tracebacks=True)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


__all__ = ["setup_logging"]
