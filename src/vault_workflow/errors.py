"""Error definitions for block and tool execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable error kinds for caller decisions."""

    CONFIG = "config"
    TOOL = "tool"
    REQUEST = "request"
    UNKNOWN = "unknown"


@dataclass
class WorkflowError(Exception):
    """Base error raised by the workflow executor.

    Attributes:
        kind: Stable, actionable error kind.
        message: Human-readable description.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message

    @property
    def retryable(self) -> bool:
        return self.kind is not ErrorKind.CONFIG


@dataclass
class ToolNotFoundError(WorkflowError):
    """A block references a tool that is not registered."""

    tool_id: str = ""

    @classmethod
    def for_tool(cls, tool_id: str) -> ToolNotFoundError:
        return cls(ErrorKind.CONFIG, f"Tool not found: {tool_id}", tool_id=tool_id)


@dataclass
class ToolRequestError(WorkflowError):
    """A tool's upstream API answered with a failure."""

    status: int | None = None

    @classmethod
    def from_response(cls, message: str, status: int | None) -> ToolRequestError:
        return cls(ErrorKind.REQUEST, message, status=status)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class BlockExecutionError(WorkflowError):
    """A block's tool failed; carries the diagnostics the engine reports."""

    tool_id: str | None = None
    tool_name: str | None = None
    block_id: str | None = None
    block_name: str | None = None
    output: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=_utc_now)
    status: int | None = None
    cause: BaseException | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "tool_id": self.tool_id,
            "tool_name": self.tool_name,
            "block_id": self.block_id,
            "block_name": self.block_name,
            "output": self.output,
            "timestamp": self.timestamp,
            "status": self.status,
        }
