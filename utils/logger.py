"""
Centralized logging configuration for the Grok search server.

This module provides structured JSON logging with:
- JSON lines on stderr (stdout carries the MCP protocol stream)
- Optional rotating file handlers with separate files per level
- Environment-based configuration (LOG_LEVEL, LOG_DIR, LOG_TO_CONSOLE, LOG_TO_FILE)
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class JsonFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.
    Outputs one JSON object per record.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Structured fields passed as extra={"extra_fields": {...}}
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data["data"] = extra_fields

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Centralized logger configuration and management.
    """

    LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "true").lower() == "true"
    LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    MAX_BYTES = 10 * 1024 * 1024  # 10MB per file
    BACKUP_COUNT = 5

    _initialized = False

    @classmethod
    def _file_handler(cls, filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            cls.LOG_DIR / filename,
            maxBytes=cls.MAX_BYTES,
            backupCount=cls.BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(JsonFormatter())
        return handler

    @classmethod
    def setup_logging(cls) -> None:
        """
        Set up logging for the whole process.
        Called once, on first import of this module.
        """
        if cls._initialized:
            return

        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # 1. stderr - JSON lines, never stdout
        if cls.LOG_TO_CONSOLE:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(JsonFormatter())
            root_logger.addHandler(console_handler)

        # 2. Rotating files: app.log (INFO+), error.log (ERROR+), debug.log when DEBUG
        if cls.LOG_TO_FILE:
            cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
            root_logger.addHandler(cls._file_handler("app.log", logging.INFO))
            root_logger.addHandler(cls._file_handler("error.log", logging.ERROR))
            if cls.LOG_LEVEL == "DEBUG":
                root_logger.addHandler(cls._file_handler("debug.log", logging.DEBUG))

        # Keep SDK transport chatter out of the stream
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("openai").setLevel(logging.WARNING)

        cls._initialized = True

        logging.getLogger(__name__).debug(
            "Logging system initialized",
            extra={
                "extra_fields": {
                    "log_level": cls.LOG_LEVEL,
                    "console_logging": cls.LOG_TO_CONSOLE,
                    "file_logging": cls.LOG_TO_FILE,
                }
            },
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger instance with the specified name.

        Args:
            name: The name of the logger (typically __name__)

        Returns:
            Configured logger instance
        """
        if not cls._initialized:
            cls.setup_logging()

        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.warning("Retrying", extra={"extra_fields": {"attempt": 2}})
    """
    return LoggerConfig.get_logger(name)


# Initialize logging on module import
LoggerConfig.setup_logging()
