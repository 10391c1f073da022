# cleanops/utils/logging_config.py

"""
Logging setup for the Flask application.

Console and rotating-file handlers are attached to ``app.logger`` and to the
``cleanops`` package logger so pipeline modules using ``logging.getLogger``
share the same output.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from flask import has_request_context, request
from flask.logging import default_handler

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_MARKER = "_cleanops_handler"


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(self, app_name="cleanops"):
        super().__init__()
        self.app_name = app_name

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "app": self.app_name,
            "message": record.getMessage(),
        }
        if has_request_context():
            payload["path"] = request.path
            payload["method"] = request.method
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_formatter(app):
    if str(app.config.get("LOG_FORMAT", "text")).lower() == "json":
        return JsonFormatter(app.config.get("APP_NAME", "cleanops"))
    return logging.Formatter(TEXT_FORMAT)


def _clear_handlers(logger):
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(app):
    """Configure application logging from the app config. Safe to call repeatedly."""
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = _build_formatter(app)

    handlers = []
    if app.config.get("ENABLE_CONSOLE_LOGGING", True):
        handlers.append(logging.StreamHandler())

    if app.config.get("ENABLE_FILE_LOGGING", False):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{app.config.get('APP_NAME', 'cleanops')}.log")
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=int(app.config.get("LOG_FILE_MAX_BYTES", 10485760)),
                backupCount=int(app.config.get("LOG_FILE_BACKUP_COUNT", 10)),
            )
        )

    app.logger.removeHandler(default_handler)
    package_logger = logging.getLogger("cleanops")
    for logger in (app.logger, package_logger):
        _clear_handlers(logger)
        logger.setLevel(level)
        for handler in handlers:
            handler.setFormatter(formatter)
            setattr(handler, _HANDLER_MARKER, True)
            logger.addHandler(handler)

    # Keep SQLAlchemy quiet unless explicitly debugging
    if level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    app.logger.debug("Logging configured (level=%s, handlers=%d)", level_name, len(handlers))
