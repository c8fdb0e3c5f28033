"""Logger configuration for the beyondcdn package."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from beyondcdn.config import Config

PACKAGE_LOGGER = "beyondcdn"

# Set through ``extra=`` by the client and the adapter
CONTEXT_FIELDS = ("storage_zone", "path")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        context = " ".join(f"{key}={value}" for key, value in record_context(record).items())
        line = f"{record.levelname} | {record.name} | {record.getMessage()}"
        return f"{line} | {context}" if context else line


def _build_handlers(config: Config) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if config.log_format == "json" else TextFormatter())
    handlers: List[logging.Handler] = [console]

    if config.log_file_path:
        rotating = RotatingFileHandler(config.log_file_path, maxBytes=10 * 1024 * 1024, backupCount=3)
        rotating.setFormatter(JSONFormatter())
        handlers.append(rotating)
    return handlers


def setup_logger(config: Config, name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Configure a logger from the logging fields of a Config.

    Handlers are attached only once per logger; later calls just update the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(config.log_level)

    if not logger.handlers:
        logger.propagate = False
        for handler in _build_handlers(config):
            logger.addHandler(handler)
    return logger
