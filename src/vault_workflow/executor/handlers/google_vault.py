"""Google Vault block handler.

Dispatches Google Vault blocks to their tool and rewrites credential errors
caused by Google Workspace reauthentication policies into guidance an
administrator can act on.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from vault_workflow.blocks.registry import STRUCTURED_INPUT_TYPES, BlockConfig, BlockRegistry
from vault_workflow.errors import (
    BlockExecutionError,
    ErrorKind,
    ToolNotFoundError,
    WorkflowError,
)
from vault_workflow.executor.credentials import enhance_credential_error
from vault_workflow.executor.handlers.base import BlockHandler
from vault_workflow.tools.registry import ToolConfig, ToolRegistry
from vault_workflow.types import ExecutionContext, Outcome, SerializedBlock

logger = logging.getLogger(__name__)

BLOCK_TYPE = "google_vault"
UNNAMED_BLOCK = "Unnamed Block"

# Messages produced upstream when an error carried neither text nor status.
_PLACEHOLDER_MESSAGES = frozenset({"", "undefined (undefined)"})


class GoogleVaultBlockHandler(BlockHandler):
    def __init__(self, tool_registry: ToolRegistry, block_registry: BlockRegistry) -> None:
        self.tool_registry = tool_registry
        self.block_registry = block_registry

    def can_handle(self, block: SerializedBlock) -> bool:
        return block.metadata.id == BLOCK_TYPE

    async def execute(
        self,
        context: ExecutionContext,
        block: SerializedBlock,
        inputs: dict[str, Any],
    ) -> dict[str, Any]:
        tool_id = block.config.tool
        tool = self.tool_registry.get_tool(tool_id)
        if tool is None:
            raise ToolNotFoundError.for_tool(tool_id)

        final_inputs = self._prepare_inputs(block, inputs)

        try:
            result = await self.tool_registry.execute_tool(
                tool_id,
                {**final_inputs, "_context": context.as_tool_context()},
                False,
                False,
                context,
            )
            if not result.success:
                if result.error:
                    message = enhance_credential_error(result.error)
                else:
                    message = f"Block execution of {tool.name} failed with no error message"
                raise BlockExecutionError(
                    ErrorKind.TOOL,
                    message,
                    tool_id=tool_id,
                    tool_name=tool.name,
                    block_id=block.id,
                    block_name=block.metadata.name or UNNAMED_BLOCK,
                    output=dict(result.output or {}),
                    status=result.status,
                )
            return _surface_cost(result.output)
        except BlockExecutionError as exc:
            _normalize_block_error(exc, tool, block)
            raise
        except Exception as exc:
            raise _wrap_error(exc, tool, block) from exc

    def _prepare_inputs(self, block: SerializedBlock, inputs: dict[str, Any]) -> dict[str, Any]:
        final_inputs = dict(inputs)
        block_type = block.metadata.id
        if not block_type:
            return final_inputs
        block_config = self.block_registry.get_block(block_type)
        if block_config is None:
            return final_inputs

        transformed = _transform_params(block_config, inputs)
        if transformed.ok:
            final_inputs = {**inputs, **transformed.value}
        else:
            logger.warning(
                "Failed to apply parameter transformation for block type %s",
                block_type,
                extra={"error": transformed.error},
            )

        for key in block_config.inputs:
            input_type = block_config.input_type(key)
            value = final_inputs.get(key)
            if input_type not in STRUCTURED_INPUT_TYPES:
                continue
            if not isinstance(value, str) or not value.strip():
                continue
            parsed = _parse_structured(value)
            if parsed.ok:
                final_inputs[key] = parsed.value
            else:
                logger.warning(
                    'Failed to parse %s field "%s"', input_type, key, extra={"error": parsed.error}
                )
        return final_inputs


def _transform_params(block_config: BlockConfig, inputs: dict[str, Any]) -> Outcome:
    if block_config.params_transform is None:
        return Outcome(value={})
    try:
        return Outcome(value=dict(block_config.params_transform(inputs)))
    except Exception as exc:
        return Outcome(error=str(exc))


def _parse_structured(value: str) -> Outcome:
    try:
        return Outcome(value=json.loads(value.strip()))
    except ValueError as exc:
        return Outcome(error=str(exc))


def _surface_cost(output: dict[str, Any]) -> dict[str, Any]:
    cost = output.get("cost") if output else None
    if not isinstance(cost, dict):
        return output
    return {
        **output,
        "cost": {
            "input": cost.get("input"),
            "output": cost.get("output"),
            "total": cost.get("total"),
        },
        "tokens": cost.get("tokens"),
        "model": cost.get("model"),
    }


def _error_status(exc: BaseException) -> int | None:
    status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def _fallback_message(tool: ToolConfig, block: SerializedBlock, status: int | None) -> str:
    message = f"Block execution of {tool.name or block.config.tool} failed"
    if block.metadata.name:
        message += f": {block.metadata.name}"
    if status:
        message += f" (Status: {status})"
    return message


def _normalize_message(
    message: str,
    tool: ToolConfig,
    block: SerializedBlock,
    status: int | None,
) -> str:
    message = enhance_credential_error(message)
    if message.strip() in _PLACEHOLDER_MESSAGES:
        return _fallback_message(tool, block, status)
    return message


def _normalize_block_error(
    exc: BlockExecutionError,
    tool: ToolConfig,
    block: SerializedBlock,
) -> None:
    exc.message = _normalize_message(exc.message, tool, block, exc.status)
    if not exc.tool_id:
        exc.tool_id = block.config.tool
    if not exc.block_name:
        exc.block_name = block.metadata.name or UNNAMED_BLOCK


def _wrap_error(exc: Exception, tool: ToolConfig, block: SerializedBlock) -> BlockExecutionError:
    status = _error_status(exc)
    if isinstance(exc, WorkflowError):
        kind, message = exc.kind, exc.message
    else:
        kind, message = ErrorKind.UNKNOWN, str(exc)
    return BlockExecutionError(
        kind,
        _normalize_message(message, tool, block, status),
        tool_id=block.config.tool,
        tool_name=tool.name,
        block_id=block.id,
        block_name=block.metadata.name or UNNAMED_BLOCK,
        status=status,
        cause=exc,
    )
