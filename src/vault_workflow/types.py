"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ExecutionContext:
    """Identifiers of the workflow run a block executes in."""

    workflow_id: str | None = None
    workspace_id: str | None = None
    execution_id: str | None = None

    def as_tool_context(self) -> dict[str, str | None]:
        return {
            "workflowId": self.workflow_id,
            "workspaceId": self.workspace_id,
            "executionId": self.execution_id,
        }


@dataclass(slots=True)
class BlockMetadata:
    id: str | None = None
    name: str | None = None


@dataclass(slots=True)
class BlockToolConfig:
    tool: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SerializedBlock:
    """A workflow block as handed to block handlers."""

    id: str
    config: BlockToolConfig
    metadata: BlockMetadata = field(default_factory=BlockMetadata)


@dataclass(slots=True)
class ToolResult:
    """Outcome of a single tool invocation."""

    success: bool
    output: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    status: int | None = None


@dataclass(slots=True)
class ToolTrace:
    """Trace record for an executed tool call."""

    name: str
    input_payload: dict[str, Any]
    output_preview: str
    latency_ms: float
    success: bool = True


@dataclass(slots=True)
class Outcome:
    """Result of a best-effort step: either a value or an error message."""

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
