"""Logging, call metrics and correlation ids for the curriculum MCP server.

Everything here writes to stderr or to files; stdout is reserved for the
MCP stdio transport.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from threading import Lock
import time
from typing import Any
import uuid

from curriculum_mcp.audit import CallAuditWriter
from curriculum_mcp.config import ObservabilityConfig

ROOT_LOGGER = "curriculum-mcp"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# LogRecord attribute -> JSON key, for the ``extra=`` fields the server attaches
_RECORD_KEYS = (
    ("tool", "tool"),
    ("latency_ms", "latency_ms"),
    ("status", "status"),
    ("error", "error"),
    ("kind", "kind"),
)


def generate_correlation_id() -> str:
    """Short id used to tie together the log lines of one tool call."""
    return uuid.uuid4().hex[:8]


class JsonLogFormatter(logging.Formatter):
    """One compact JSON object per log line."""

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.include_correlation_id = include_correlation_id

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        cid = getattr(record, "correlation_id", None)
        if self.include_correlation_id and cid is not None:
            entry["cid"] = cid
        entry.update(
            {key: getattr(record, attr) for attr, key in _RECORD_KEYS if hasattr(record, attr)}
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, separators=(",", ":"), default=str)


@dataclass
class CallStats:
    """Running totals for one tool."""

    calls: int = 0
    errors: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float = 0.0

    def observe(self, latency_ms: float, success: bool) -> None:
        self.calls += 1
        if not success:
            self.errors += 1
        self.total_ms += latency_ms
        self.min_ms = latency_ms if self.min_ms is None else min(self.min_ms, latency_ms)
        self.max_ms = max(self.max_ms, latency_ms)

    def snapshot(self) -> dict[str, Any]:
        avg = self.total_ms / self.calls if self.calls else 0.0
        return {
            "calls": self.calls,
            "errors": self.errors,
            "avg_ms": round(avg, 2),
            "min_ms": round(self.min_ms or 0.0, 2),
            "max_ms": round(self.max_ms, 2),
        }


@dataclass
class MetricsCollector:
    """In-memory call metrics for the life of the server process."""

    tools: dict[str, CallStats] = field(default_factory=dict)
    errors_by_kind: Counter[str] = field(default_factory=Counter)
    started: float = field(default_factory=time.time)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def record_call(
        self,
        tool: str,
        latency_ms: float,
        success: bool,
        error_kind: str | None = None,
    ) -> None:
        with self._lock:
            self.tools.setdefault(tool, CallStats()).observe(latency_ms, success)
            if not success:
                self.errors_by_kind[error_kind or "InternalError"] += 1

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            total = sum(stats.calls for stats in self.tools.values())
            errors = sum(stats.errors for stats in self.tools.values())
            return {
                "uptime_s": round(time.time() - self.started, 1),
                "total_requests": total,
                "total_errors": errors,
                "error_rate": round(errors / max(1, total), 4),
                "errors_by_kind": dict(self.errors_by_kind),
                "tools": {name: stats.snapshot() for name, stats in self.tools.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self.tools.clear()
            self.errors_by_kind.clear()
            self.started = time.time()


class ObservabilityContext:
    """Per-server metrics plus the optional CSV audit; inert when disabled."""

    def __init__(self, config: ObservabilityConfig):
        self.config = config
        self.enabled = config.enabled
        self.metrics = MetricsCollector()
        self.audit = CallAuditWriter(
            csv_path=config.csv_path,
            enabled=config.enabled and config.csv_audit_enabled,
        )

    def correlation_id(self) -> str:
        return generate_correlation_id()

    def record(
        self,
        correlation_id: str,
        tool: str,
        latency_ms: float,
        success: bool,
        error_kind: str | None = None,
    ) -> None:
        if not self.enabled:
            return
        self.metrics.record_call(tool, latency_ms, success, error_kind)
        self.audit.record(correlation_id, tool, latency_ms, success, error_kind)

    def get_stats(self) -> dict[str, Any]:
        return self.metrics.get_stats()


def setup_logging(config: ObservabilityConfig, logger_name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Point ``logger_name`` at a single stderr handler using the configured format.

    The logger stops propagating so records are not duplicated by a root
    handler installed elsewhere.
    """
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if config.log_format == "json":
        handler.setFormatter(JsonLogFormatter(config.include_correlation_id))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger(logger_name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
