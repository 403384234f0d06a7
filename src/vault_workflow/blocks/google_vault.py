"""Google Vault block definition."""

from __future__ import annotations

from typing import Any

from vault_workflow.blocks.registry import BlockConfig, BlockRegistry, InputSpec

BLOCK_TYPE = "google_vault"

_OPERATION_TOOLS = {
    "create_matters": "google_vault_create_matters",
    "list_matters": "google_vault_list_matters",
}


def _select_tool(params: dict[str, Any]) -> str:
    operation = params.get("operation", "create_matters")
    tool_id = _OPERATION_TOOLS.get(operation)
    if tool_id is None:
        raise ValueError(f"Invalid Google Vault operation: {operation}")
    return tool_id


def _transform_params(params: dict[str, Any]) -> dict[str, Any]:
    # UI fields arrive as strings; the API wants typed values and trimmed ids.
    transformed: dict[str, Any] = {}
    if params.get("credential"):
        transformed["credential"] = params["credential"]
    page_size = params.get("pageSize")
    if page_size not in (None, ""):
        transformed["pageSize"] = int(page_size)
    matter_id = params.get("matterId")
    if isinstance(matter_id, str):
        transformed["matterId"] = matter_id.strip()
    return transformed


GOOGLE_VAULT_BLOCK = BlockConfig(
    type=BLOCK_TYPE,
    name="Google Vault",
    description="Create, list and inspect Google Vault matters",
    access=list(_OPERATION_TOOLS.values()),
    inputs={
        "operation": InputSpec(type="string", description="Operation to perform"),
        "credential": InputSpec(type="string", description="Google Vault OAuth credential"),
        "name": InputSpec(type="string", description="Matter name"),
        "description": InputSpec(type="string", description="Matter description"),
        "matterId": InputSpec(type="string", description="Matter ID"),
        "pageSize": "number",
        "pageToken": "string",
        "holdConfig": InputSpec(type="json", description="Hold configuration"),
        "accounts": InputSpec(type="array", description="Account emails"),
    },
    tool_selector=_select_tool,
    params_transform=_transform_params,
)


def register_builtin_blocks(registry: BlockRegistry) -> None:
    registry.register(GOOGLE_VAULT_BLOCK)
