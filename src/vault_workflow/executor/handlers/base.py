"""Block handler interface used by the block executor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vault_workflow.types import ExecutionContext, SerializedBlock


class BlockHandler(ABC):
    """Executes blocks of the types it accepts."""

    @abstractmethod
    def can_handle(self, block: SerializedBlock) -> bool:
        """Return whether this handler executes `block`."""

    @abstractmethod
    async def execute(
        self,
        context: ExecutionContext,
        block: SerializedBlock,
        inputs: dict[str, Any],
    ) -> dict[str, Any]:
        """Run the block and return its output."""
