"""Block type registry."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

InputType = Literal["string", "number", "boolean", "json", "array"]
STRUCTURED_INPUT_TYPES: frozenset[str] = frozenset({"json", "array"})


class InputSpec(BaseModel):
    """Declared input of a block type."""

    type: InputType = "string"
    description: str = ""


class BlockConfig(BaseModel):
    """Static definition of a block type and the tools it may call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: str
    name: str
    description: str = ""
    access: list[str] = Field(default_factory=list)
    inputs: dict[str, InputSpec | InputType] = Field(default_factory=dict)
    tool_selector: Callable[[dict[str, Any]], str] | None = None
    params_transform: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    def input_type(self, key: str) -> str | None:
        spec = self.inputs.get(key)
        if spec is None:
            return None
        return spec.type if isinstance(spec, InputSpec) else spec

    def select_tool(self, params: dict[str, Any]) -> str:
        if self.tool_selector is not None:
            return self.tool_selector(params)
        if len(self.access) != 1:
            raise ValueError(f"Block type {self.type} needs a tool selector")
        return self.access[0]


class BlockRegistry:
    """Stores block type definitions keyed by block type id."""

    def __init__(self) -> None:
        self._blocks: dict[str, BlockConfig] = {}

    def register(self, block: BlockConfig) -> None:
        if block.type in self._blocks:
            raise ValueError(f"Block already registered: {block.type}")
        self._blocks[block.type] = block

    def get_block(self, block_type: str) -> BlockConfig | None:
        return self._blocks.get(block_type)

    def blocks(self) -> list[BlockConfig]:
        return list(self._blocks.values())
