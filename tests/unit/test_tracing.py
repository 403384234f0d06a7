import pytest

from vault_workflow.obs.tracing import Timer, TraceStore
from vault_workflow.types import ToolTrace


def test_summary_counts_failures_and_cost() -> None:
    store = TraceStore()
    store.create_record(
        block_id="b1",
        block_name="Create case",
        tool_id="google_vault_create_matters",
        success=True,
        latency_ms=10.0,
        output={"cost": {"input": 0.1, "output": 0.2, "total": 0.3}},
    )
    failed = store.create_record(
        block_id="b2",
        block_name=None,
        tool_id="google_vault_create_matters",
        success=False,
        latency_ms=30.0,
        error="rate limit exceeded",
    )

    summary = store.summary()

    assert summary["total_executions"] == 2
    assert summary["failed_executions"] == 1
    assert summary["avg_latency_ms"] == pytest.approx(20.0)
    assert summary["total_cost"] == pytest.approx(0.3)
    assert store.get(failed.trace_id).error == "rate limit exceeded"


def test_empty_summary_and_missing_trace() -> None:
    store = TraceStore()

    assert store.summary()["total_executions"] == 0
    with pytest.raises(KeyError):
        store.get("missing")


def test_tool_traces_are_bounded() -> None:
    store = TraceStore(max_tool_traces=2)
    for index in range(3):
        store.record_tool_trace(
            ToolTrace(name=f"tool-{index}", input_payload={}, output_preview="", latency_ms=1.0)
        )

    assert [trace.name for trace in store.recent_tool_traces()] == ["tool-1", "tool-2"]


def test_execution_records_are_bounded_oldest_first() -> None:
    store = TraceStore(max_records=2)
    records = [
        store.create_record(
            block_id=f"b{index}",
            block_name=None,
            tool_id="google_vault_create_matters",
            success=True,
            latency_ms=float(index),
        )
        for index in range(3)
    ]

    assert [record.block_id for record in store.list_recent()] == ["b1", "b2"]
    assert store.summary()["total_executions"] == 2
    with pytest.raises(KeyError):
        store.get(records[0].trace_id)
    assert store.get(records[2].trace_id) is records[2]


def test_timer_measures_elapsed_time() -> None:
    with Timer() as timer:
        sum(range(1000))

    assert timer.elapsed_ms >= 0.0
