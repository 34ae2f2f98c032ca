"""
Logging context and repository metrics.

The calling application sets the correlation id and acting user once per
unit of work; every log line emitted by the repositories then carries them,
and soft deletes record the acting user. Repository round trips are counted
and timed in a private Prometheus registry.

Usage:
    from league_data.core.observability import configure_structured_logging, set_user_id

    configure_structured_logging("INFO")
    set_user_id("commissioner@league.example")
"""

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

# ============================================================================
# Caller Context
# ============================================================================

_request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
_user_id_ctx: ContextVar[str] = ContextVar("user_id", default="")


def get_request_id() -> str:
    """Correlation id of the caller's current unit of work, or ""."""
    return _request_id_ctx.get()


def set_correlation_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def get_user_id() -> str:
    """Acting user of the caller's current unit of work, or ""."""
    return _user_id_ctx.get()


def set_user_id(user_id: str) -> None:
    _user_id_ctx.set(user_id)


# ============================================================================
# Structured Logging
# ============================================================================

# Attributes every LogRecord has; anything else arrived through extra=
_LOG_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """
    Render log records as one JSON object per line.

    Keys: timestamp, level, logger, message, source (file/line/function),
    plus service, request_id and user_id when known, exception when the
    record carries one, and extra for fields passed through extra=.
    """

    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            entry["service"] = self.service

        for key, value in (("request_id", get_request_id()), ("user_id", get_user_id())):
            if value:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {"type": exc_type.__name__, "message": str(exc_value)}

        entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _LOG_RECORD_ATTRIBUTES
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def configure_structured_logging(
    level: str = "INFO", structured: bool = True, service: str | None = None
) -> None:
    """
    Replace the root logger's handlers with a single stream handler.

    Args:
        level: Log level name, case-insensitive; unknown names fall back to INFO
        structured: JSON lines when True, plain text otherwise
        service: Service name added to every structured line
    """
    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter(service))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))


def configure_logging_from_settings(app_settings: Any) -> None:
    """
    Configure logging from application settings.

    Args:
        app_settings: Settings providing app_log_level,
            observability_structured_logs, app_name and app_env
    """
    configure_structured_logging(
        app_settings.app_log_level,
        app_settings.observability_structured_logs,
        service=app_settings.app_name,
    )
    logging.getLogger(__name__).info(
        f"Logging configured for {app_settings.app_name}",
        extra={"app_env": str(app_settings.app_env.value)},
    )


# ============================================================================
# Repository Metrics
# ============================================================================

# Private registry; the process-wide default registry is left untouched
_registry = CollectorRegistry()


class Metrics:
    """Round-trip count, latency and result size per repository operation and entity."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

        self.db_queries_total = Counter(
            "db_queries_total",
            "Repository round trips to the store",
            ["operation", "entity", "status"],
            registry=registry,
        )
        self.db_query_duration_seconds = Histogram(
            "db_query_duration_seconds",
            "Repository round-trip latency in seconds",
            ["operation", "entity"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=registry,
        )
        self.db_rows_returned = Histogram(
            "db_rows_returned",
            "Records returned by a repository read",
            ["operation", "entity"],
            buckets=(0, 1, 5, 10, 25, 50, 100, 250, 1000),
            registry=registry,
        )


metrics = Metrics(_registry)


class DBMetricsWrapper:
    """
    Records repository round trips into a Metrics instance.

    Usage in repos:
        with db_metrics.track("get_teams_by_league_id", "Team"):
            result = await self.db.execute(stmt)
    """

    def __init__(self, metrics_instance: Metrics | None = None) -> None:
        self.metrics = metrics_instance or metrics

    @contextmanager
    def track(self, operation: str, entity: str) -> Iterator[None]:
        """
        Time the enclosed block and count it as success or error.

        Cancellation counts as an error; the exception always propagates.
        """
        started = time.perf_counter()
        status = "error"
        try:
            yield
            status = "success"
        finally:
            elapsed = time.perf_counter() - started
            self.metrics.db_query_duration_seconds.labels(operation, entity).observe(elapsed)
            self.metrics.db_queries_total.labels(operation, entity, status).inc()

    def rows(self, operation: str, entity: str, count: int) -> None:
        """Record how many records a read returned."""
        self.metrics.db_rows_returned.labels(operation, entity).observe(count)


db_metrics = DBMetricsWrapper()


def render_metrics() -> bytes:
    """Repository metrics in Prometheus text exposition format."""
    return generate_latest(_registry)
