"""
Thesis Archive - Centralized Logging Configuration
Plain contextual text while developing, one JSON object per line in production.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional
from contextvars import ContextVar

from thesis_archive.core.config import settings


LOGGER_NAME = "thesis_archive"

# Per-request tracing context
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

# LogRecord attributes that are not user supplied "extra" fields
_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'exc_info', 'exc_text',
    'thread', 'threadName', 'message', 'taskName', 'request_id', 'user_id',
})


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Short random id attached to every log line of one request"""
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """Structured formatter used when ENVIRONMENT=production"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if get_request_id():
            payload["request_id"] = get_request_id()
        if get_user_id():
            payload["user_id"] = get_user_id()

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            payload[key] = value

        return json.dumps(payload, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable formatter that stamps request/user ids onto each record"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class ArchiveLogger(logging.Logger):
    """
    Logger with helpers for the events this service cares about.
    Every helper attaches an ``event_type`` so the JSON output can be filtered.
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        level = logging.WARNING if status_code >= 500 else logging.INFO
        self.log(
            level,
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, username: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Login attempts, credential changes and rejected tokens"""
        message = f"Auth {event}: {'success' if success else 'failed'}"
        if username:
            message += f" - {username}"
        if reason:
            message += f" - {reason}"
        self.log(
            logging.INFO if success else logging.WARNING,
            message,
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "username": username,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_thesis_event(self, event: str, thesis_id: str,
                         actor_id: Optional[str] = None, **kwargs) -> None:
        """Create / submit / approve / reject / update / delete of a thesis row"""
        self.info(
            f"Thesis {event}: {thesis_id}" + (f" by {actor_id}" if actor_id else ""),
            extra={
                "event_type": "thesis",
                "thesis_event": event,
                "thesis_id": thesis_id,
                "actor_id": actor_id,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        self.error(
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


def _build_handlers(is_production: bool) -> List[logging.Handler]:
    if is_production:
        console_formatter: logging.Formatter = JSONFormatter()
        file_formatter: logging.Formatter = console_formatter
        backups = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        backups = 5

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    handlers: List[logging.Handler] = [console_handler]

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=backups
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    return handlers


def setup_logging() -> ArchiveLogger:
    """Configure the package logger from settings and return it"""
    logging.setLoggerClass(ArchiveLogger)

    log = logging.getLogger(LOGGER_NAME)
    log.__class__ = ArchiveLogger
    log.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    log.handlers.clear()
    log.propagate = False

    is_production = settings.ENVIRONMENT == "production"
    for handler in _build_handlers(is_production):
        log.addHandler(handler)

    # Quiet down chatty libraries
    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "botocore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    log.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": is_production}
    )
    return log


logger: ArchiveLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'ArchiveLogger',
]
