"""
Logging configuration for the playground workflow

Two output styles share one set of context variables:
- JSON lines (StructuredFormatter) for files and log shippers
- Colored single-line output (DevelopmentFormatter) for a terminal

The job id and the workflow generation token are carried in context variables
so every log line emitted while a job is being polled can be correlated.
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization", "signature")

job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)
generation_var: ContextVar[Optional[int]] = ContextVar("generation", default=None)

# Attributes every LogRecord has; anything else arrived through `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime", "taskName"}


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def _redact(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {
            child_key: "***REDACTED***" if _is_sensitive_key(str(child_key)) else _redact(str(child_key), child_value)
            for child_key, child_value in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(key, item) for item in value]
    if isinstance(value, str) and _is_sensitive_key(key):
        return "***REDACTED***"
    return value


def _context_fields() -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    job_id = job_id_var.get()
    if job_id:
        fields["job_id"] = job_id
    generation = generation_var.get()
    if generation is not None:
        fields["generation"] = generation
    return fields


class StructuredFormatter(logging.Formatter):
    """JSON formatter, one object per line"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(_context_fields())

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_") and not callable(value)
        }
        # Context fields are already top level
        for key in ("job_id", "generation"):
            extra.pop(key, None)
        if extra:
            payload["extra"] = _redact("extra", extra)

        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for a terminal"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        context_parts = []
        job_id = job_id_var.get()
        if job_id:
            context_parts.append(f"job:{job_id[:8]}")
        generation = generation_var.get()
        if generation is not None:
            context_parts.append(f"gen:{generation}")
        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        line = (
            f"{color}{timestamp}{reset} "
            f"{color}{record.levelname:8s}{reset} "
            f"{record.name:32s}{context} "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Merges the adapter's fixed context with per-call `extra`"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        extra = dict(self.extra or {})
        extra.update(_context_fields())
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "multipart")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path for a rotating JSON log file
        use_json: Emit JSON lines on the console instead of colored text
        stream: Console stream, stdout by default. The CLI passes stderr so
            log lines stay apart from its own output.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = []
    console = logging.StreamHandler(stream or sys.stdout)
    console.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    handlers.append(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "3")),
            encoding="utf-8",
        )
        rotating.setFormatter(StructuredFormatter())
        handlers.append(rotating)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Get a logger that attaches `extra` to every record

    Example:
        logger = get_logger(__name__, component="transport")
        logger.info("Upload slot granted", extra={"file_name": name})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_job_id(job_id: Optional[str]) -> None:
    job_id_var.set(job_id)


def set_generation(generation: Optional[int]) -> None:
    generation_var.set(generation)


def clear_context() -> None:
    job_id_var.set(None)
    generation_var.set(None)


class LogTimer:
    """Logs `Starting:` / `Completed:` around a block, or `Failed:` with the error"""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self._started: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self._started = time.perf_counter()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = round(time.perf_counter() - self._started, 4)
        if exc_type is None:
            self.logger.log(
                self.level,
                f"Completed: {self.operation}",
                extra={"duration_seconds": self.duration},
            )
            return
        self.logger.warning(
            f"Failed: {self.operation}",
            extra={"duration_seconds": self.duration, "error": str(exc_val)},
        )
