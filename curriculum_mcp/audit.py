"""Per-call CSV audit trail for curriculum tool calls."""

from __future__ import annotations

import csv
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class CallRow:
    """One audited tool call."""

    correlation_id: str
    tool: str
    latency_ms: float
    status: str  # "ok" | "error"
    error_kind: str = ""
    timestamp: str = ""

    @classmethod
    def from_call(
        cls,
        correlation_id: str,
        tool: str,
        latency_ms: float,
        success: bool,
        error_kind: str | None = None,
    ) -> CallRow:
        return cls(
            correlation_id=correlation_id,
            tool=tool,
            latency_ms=round(latency_ms, 2),
            status="ok" if success else "error",
            error_kind=error_kind or "",
            timestamp=_utc_now(),
        )


class CallAuditWriter:
    """Appends CallRow entries to a CSV file, writing the header on first use."""

    CSV_HEADERS = [
        "timestamp",
        "correlation_id",
        "tool",
        "latency_ms",
        "status",
        "error_kind",
    ]

    def __init__(self, csv_path: str | Path, enabled: bool = True):
        self.csv_path = Path(csv_path)
        self.enabled = enabled
        self._lock = Lock()
        self._header_checked = False

    def _needs_header(self) -> bool:
        if self._header_checked:
            return False
        self._header_checked = True
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        return not self.csv_path.exists() or self.csv_path.stat().st_size == 0

    def write(self, row: CallRow) -> None:
        if not self.enabled:
            return
        with self._lock:
            header = self._needs_header()
            with open(self.csv_path, "a", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=self.CSV_HEADERS)
                if header:
                    writer.writeheader()
                writer.writerow(asdict(row))

    def record(
        self,
        correlation_id: str,
        tool: str,
        latency_ms: float,
        success: bool,
        error_kind: str | None = None,
    ) -> None:
        """Audit one call."""
        self.write(CallRow.from_call(correlation_id, tool, latency_ms, success, error_kind))
