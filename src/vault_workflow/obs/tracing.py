"""Execution tracing and cost accounting for block runs."""

from __future__ import annotations

import time
import uuid
from collections import OrderedDict, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from vault_workflow.types import ToolTrace


@dataclass(slots=True)
class ExecutionRecord:
    trace_id: str
    timestamp_utc: str
    block_id: str
    block_name: str | None
    tool_id: str
    success: bool
    error: str | None
    latency_ms: float
    cost_total: float = 0.0


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self, *, max_tool_traces: int = 200, max_records: int = 500) -> None:
        self._max_records = max_records
        self._records: OrderedDict[str, ExecutionRecord] = OrderedDict()
        self._tool_traces: deque[ToolTrace] = deque(maxlen=max_tool_traces)

    def record_tool_trace(self, trace: ToolTrace) -> None:
        """Observer hook for `ToolRegistry.set_observer`."""
        self._tool_traces.append(trace)

    def recent_tool_traces(self, limit: int = 20) -> list[ToolTrace]:
        return list(self._tool_traces)[-limit:]

    def create_record(
        self,
        *,
        block_id: str,
        block_name: str | None,
        tool_id: str,
        success: bool,
        latency_ms: float,
        error: str | None = None,
        output: dict[str, Any] | None = None,
    ) -> ExecutionRecord:
        trace_id = str(uuid.uuid4())
        record = ExecutionRecord(
            trace_id=trace_id,
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            block_id=block_id,
            block_name=block_name,
            tool_id=tool_id,
            success=success,
            error=error,
            latency_ms=latency_ms,
            cost_total=_cost_total(output),
        )
        self._records[trace_id] = record
        while len(self._records) > self._max_records:
            self._records.popitem(last=False)
        return record

    def get(self, trace_id: str) -> ExecutionRecord:
        record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[ExecutionRecord]:
        return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate core observability metrics for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_executions": 0,
                "failed_executions": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "total_cost": 0.0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))

        return {
            "total_executions": total,
            "failed_executions": sum(1 for record in records if not record.success),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "total_cost": sum(record.cost_total for record in records),
        }


class Timer:
    """Simple context timer used by the block executor."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0


def _cost_total(output: dict[str, Any] | None) -> float:
    cost = (output or {}).get("cost")
    if not isinstance(cost, dict):
        return 0.0
    total = cost.get("total")
    return float(total) if isinstance(total, (int, float)) else 0.0
