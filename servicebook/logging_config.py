"""
Logging setup for the ServiceBook application factory.

``setup_logging(app)`` reads the ``LOG_*`` settings from the app config
and attaches ServiceBook's own handlers to the root logger: one console
handler and, when ``LOG_FILE`` is set, one size-rotated file handler per
path. Handlers added here are tagged so repeated ``create_app`` calls
(tests, CLI commands) neither duplicate them nor mistake a handler
installed by someone else (pytest capture, gunicorn) for ours.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MARKER = "_servicebook_handler"


def _owned(handler: logging.Handler) -> bool:
    return getattr(handler, _MARKER, False)


def _add(root: logging.Logger, handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _MARKER, True)
    root.addHandler(handler)
    return handler


def setup_logging(app) -> None:
    """Configure logging from ``app.config``.

    Reads ``LOG_LEVEL`` (unknown names fall back to ``INFO``),
    ``LOG_FILE``, ``LOG_MAX_BYTES`` and ``LOG_BACKUP_COUNT``. The level
    is applied to both the root logger and ``app.logger``.
    """
    root = logging.getLogger()
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)
    app.logger.setLevel(level)

    ours = [h for h in root.handlers if _owned(h)]
    if not any(type(h) is logging.StreamHandler for h in ours):
        _add(root, logging.StreamHandler())

    logfile = app.config.get("LOG_FILE")
    if not logfile:
        return
    log_path = Path(logfile).resolve()
    if any(isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_path) for h in ours):
        return
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _add(
        root,
        RotatingFileHandler(
            log_path,
            maxBytes=int(app.config.get("LOG_MAX_BYTES", 0)),
            backupCount=int(app.config.get("LOG_BACKUP_COUNT", 0)),
            encoding="utf-8",
        ),
    )
