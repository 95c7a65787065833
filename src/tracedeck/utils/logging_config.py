"""Logging setup for the command-line entry point.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are installed here, once, from :class:`config.settings.LoggingSettings`.
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

from config.settings import LoggingSettings


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(log_data, ensure_ascii=False, default=str)


def _formatter(config: LoggingSettings) -> logging.Formatter:
    if config.json_logging:
        return JsonFormatter()
    return logging.Formatter(config.log_format)


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: Optional[LoggingSettings] = None, level: Optional[str] = None) -> None:
    """Install console and optional rotating-file handlers on the ``tracedeck`` logger.

    Args:
        config: Logging settings (defaults to the global settings)
        level: Console level override, e.g. ``"DEBUG"`` for ``--verbose``
    """
    if config is None:
        from config.settings import settings
        config = settings.logging

    logger = logging.getLogger("tracedeck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_level = _level(level or config.log_level)
    levels = []

    if config.console_logging:
        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(_formatter(config))
        logger.addHandler(console)
        levels.append(console_level)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_log_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_level = _level(config.log_file_level)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(_formatter(config))
        logger.addHandler(file_handler)
        levels.append(file_level)

    logger.setLevel(min(levels) if levels else logging.WARNING)
    logger.propagate = False

    # pdfminer logs every malformed object at DEBUG/WARNING
    logging.getLogger("pdfminer").setLevel(logging.ERROR)
