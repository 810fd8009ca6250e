"""
Structured JSON Logging Configuration for Entity Resolution

Provides consistent, parseable logging for resolution turns.
Logs can be viewed with jq for easy filtering and analysis.
"""
import json
import logging
import os
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import config

# Structured fields the dispatcher and context attach via extra={}
TURN_FIELDS = [
    'turn_id', 'variable_name', 'entity_name', 'event_name', 'event_item',
    'handler_path', 'result', 'events_count', 'error_type',
]

_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'getMessage',
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as single-line JSON objects so turn traces can be
    filtered per handler path or event with jq.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for field in TURN_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Any other extra={} attribute that serializes cleanly
        for attr_name, attr_value in record.__dict__.items():
            if attr_name in _STANDARD_ATTRS or attr_name in log_data:
                continue
            if isinstance(attr_value, (str, int, float, bool, type(None), dict, list)):
                log_data[attr_name] = attr_value

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyJSONFormatter(logging.Formatter):
    """
    Readable console formatter for development.

    Same fields as JSONFormatter, rendered on one colored line.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a colored line."""
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        timestamp = datetime.now(timezone.utc).strftime('%H:%M:%S.%f')[:-3]

        parts = [
            f"{color}[{record.levelname}]{reset}",
            timestamp,
            f"{record.name}:",
            record.getMessage(),
        ]

        extra_parts = []
        for field in TURN_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                extra_parts.append(f"{field}={value}")
        if extra_parts:
            parts.append(f"({', '.join(extra_parts)})")

        result = ' '.join(parts)
        if record.exc_info:
            result += '\n' + self.formatException(record.exc_info)
        return result


def setup_logging(
    app_name: str = 'entity_resolution',
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure structured logging for the package.

    Args:
        app_name: Name of the logger to configure (package loggers are its children)
        log_level: Logging level, defaults to config.LOG_LEVEL
        log_format: 'json' or 'pretty', defaults to config.LOG_FORMAT
        log_file: Optional file path, defaults to config.LOG_FILE

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging('entity_resolution', 'DEBUG', 'pretty')
        >>> logger.debug('Invoking handler', extra={'handler_path': 'entity.validate'})
    """
    log_level = log_level or config.LOG_LEVEL
    log_format = log_format or config.LOG_FORMAT
    log_file = log_file or config.LOG_FILE

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(app_name)
    logger.setLevel(numeric_level)
    logger.handlers = []

    formatter = PrettyJSONFormatter() if log_format == 'pretty' else JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            # Always use JSON for file logs
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Failed to setup file logging: {e}")

    logger.propagate = False
    return logger


def generate_turn_id() -> str:
    """
    Generate a short turn ID for tracing one resolution request.

    Returns:
        8-character unique identifier
    """
    return str(uuid.uuid4())[:8]


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    turn_id: Optional[str] = None,
    **kwargs
):
    """
    Log with additional context fields.

    Example:
        >>> log_with_context(
        ...     logger, logging.DEBUG, "Invoking event handler",
        ...     turn_id="abc123", handler_path="city.validate"
        ... )
    """
    extra = {}
    if turn_id:
        extra['turn_id'] = turn_id
    extra.update(kwargs)
    logger.log(level, message, extra=extra)
