"""
Logging setup for the employee service.

Production writes one JSON object per line; every other environment gets
a short colored console line.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from employee_service.core.config import settings

# Attribute names every LogRecord carries; anything else came in via `extra=`
_STANDARD_RECORD_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")
_UNLOGGED_PATHS = frozenset({"/health", "/metrics"})


def _extra_fields(record: logging.LogRecord) -> dict:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_RECORD_KEYS}


class JSONFormatter(logging.Formatter):
    """One JSON document per record, tagged with service and environment."""

    def __init__(self, service_name: str = "employee-service"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": settings.ENVIRONMENT,
            "source": f"{record.filename}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra
        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that tints each line by level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{super().format(record)}{self.RESET}"


def setup_logging(
    service_name: str = "employee-service",
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        service_name: Value of the "service" field in JSON output
        log_level: Level name; defaults to DEBUG when settings.DEBUG is on, else INFO
        json_logs: Force JSON (True) or colored (False) output; defaults to JSON in production
    """
    level = (log_level or ("DEBUG" if settings.DEBUG else "INFO")).upper()
    if json_logs is None:
        json_logs = settings.ENVIRONMENT.lower() == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service_name) if json_logs else ColoredFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("employee_service.logging").info(
        "Logging ready (level=%s, json=%s, environment=%s)",
        level, json_logs, settings.ENVIRONMENT,
    )


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestLoggingMiddleware:
    """
    Pure ASGI middleware: tags each HTTP request with a request id
    (exposed as `request.state.request_id`) and logs one line when it ends.
    Client and server errors are logged at WARNING.
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("employee_service.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = generate_request_id()
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_code = 500

        async def capture_status(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            path = scope.get("path", "/")
            if path not in _UNLOGGED_PATHS:
                self._log(request_id, scope.get("method", "-"), path, status_code, started)

    def _log(self, request_id: str, method: str, path: str, status_code: int, started: float) -> None:
        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        self.logger.log(
            logging.WARNING if status_code >= 400 else logging.INFO,
            "%s %s -> %s (%.1fms)",
            method, path, status_code, duration_ms,
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status": status_code,
                "duration_ms": duration_ms,
            },
        )
