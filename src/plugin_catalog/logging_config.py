"""
Logging configuration for the plugin catalog.

Sets up console and rotating file handlers on the package logger based on
the logging settings. Safe to call more than once; handlers installed by a
previous call are replaced.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from typing import Optional

from plugin_catalog.config import Settings, settings as default_settings

PACKAGE_LOGGER = "plugin_catalog"

STANDARD_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker attribute so repeated setup only removes our own handlers
_HANDLER_MARKER = "_plugin_catalog_handler"


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    return logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    context: str = "app", config: Optional[Settings] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        context: Name of the running component (e.g. 'cli'); used as the
                 log file name
        config: Settings to use (defaults to the global settings)

    Returns:
        The configured package logger

    Raises:
        PermissionError: If the log directory cannot be created
    """
    config = config or default_settings
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.log_level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = _build_formatter(config.log_format)

    if config.log_console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        setattr(console_handler, _HANDLER_MARKER, True)
        logger.addHandler(console_handler)

    if config.log_file_enabled:
        log_dir = config.log_directory
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{context}.log",
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
