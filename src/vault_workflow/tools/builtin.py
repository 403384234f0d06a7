"""Built-in tool set served by the workflow executor."""

from __future__ import annotations

from vault_workflow.config import VaultApiConfig
from vault_workflow.tools.google_vault.create_matters import build_create_matters_tool
from vault_workflow.tools.google_vault.list_matters import build_list_matters_tool
from vault_workflow.tools.registry import ToolRegistry


def register_builtin_tools(
    registry: ToolRegistry,
    api_config: VaultApiConfig | None = None,
) -> None:
    """Register the default tool set.

    Tools:
    - `google_vault_create_matters`: create a matter (`POST /v1/matters`).
    - `google_vault_list_matters`: list matters or fetch one by id.
    """

    config = api_config or VaultApiConfig()
    registry.register(build_create_matters_tool(config))
    registry.register(build_list_matters_tool(config))
