"""Routes serialized blocks to the handler that can execute them."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from vault_workflow.errors import ErrorKind, WorkflowError
from vault_workflow.executor.handlers.base import BlockHandler
from vault_workflow.obs.tracing import Timer, TraceStore
from vault_workflow.types import ExecutionContext, SerializedBlock

logger = logging.getLogger(__name__)


class BlockExecutor:
    """Picks the first handler accepting a block and records the run."""

    def __init__(
        self,
        handlers: Sequence[BlockHandler],
        *,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.handlers = list(handlers)
        self.trace_store = trace_store or TraceStore()

    def handler_for(self, block: SerializedBlock) -> BlockHandler:
        for handler in self.handlers:
            if handler.can_handle(block):
                return handler
        raise WorkflowError(ErrorKind.CONFIG, f"No handler for block type: {block.metadata.id}")

    async def execute(
        self,
        context: ExecutionContext,
        block: SerializedBlock,
        inputs: dict[str, Any],
    ) -> tuple[dict[str, Any], str]:
        """Execute `block` and return its output with the trace id of the run.

        Errors propagate unchanged after the failed run has been recorded.
        """
        handler = self.handler_for(block)
        output: dict[str, Any] | None = None
        error: str | None = None
        timer = Timer()
        try:
            with timer:
                output = await handler.execute(context, block, inputs)
        except Exception as exc:
            error = str(exc)
            logger.warning("Block %s failed: %s", block.id, error)
            raise
        finally:
            record = self.trace_store.create_record(
                block_id=block.id,
                block_name=block.metadata.name,
                tool_id=block.config.tool,
                success=error is None and output is not None,
                error=error,
                latency_ms=timer.elapsed_ms,
                output=output,
            )
        return output, record.trace_id
