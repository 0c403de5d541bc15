"""
Logging setup for scripts that use the PMR engine.

The library itself only creates module-level loggers; the application decides
where they go. configure_logging() installs a single stream handler on the
"pmr" logger using the level and format from Settings.
"""

import json
import logging
from typing import Optional

from pmr.config import Settings, get_settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the "pmr" logger from settings.

    Calling it again replaces the handler instead of adding a second one.

    Returns:
        The configured "pmr" logger
    """
    if settings is None:
        settings = get_settings()

    logger = logging.getLogger("pmr")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    return logger
