"""Tool that creates a new matter in Google Vault."""

from __future__ import annotations

from typing import Any

import httpx

from vault_workflow.config import VaultApiConfig
from vault_workflow.errors import ToolRequestError
from vault_workflow.tools.google_vault.params import GoogleVaultCreateMattersParams
from vault_workflow.tools.google_vault.utils import (
    bearer_headers,
    enhance_google_vault_error,
    error_message_from_response,
)
from vault_workflow.tools.registry import ToolConfig, ToolParam, ToolRequest
from vault_workflow.types import ToolResult

TOOL_ID = "google_vault_create_matters"


def _body(params: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"name": params["name"]}
    if params.get("description"):
        body["description"] = params["description"]
    return body


async def _transform_response(response: httpx.Response, params: dict[str, Any]) -> ToolResult:
    del params
    if not response.is_success:
        message = error_message_from_response(response, "Failed to create matter")
        raise ToolRequestError.from_response(
            enhance_google_vault_error(message), response.status_code
        )
    return ToolResult(success=True, output={"matter": response.json()})


def build_create_matters_tool(api_config: VaultApiConfig | None = None) -> ToolConfig:
    base_url = (api_config or VaultApiConfig()).base_url
    return ToolConfig(
        id=TOOL_ID,
        name="Vault Create Matter",
        description="Create a new matter in Google Vault",
        oauth_provider="google-vault",
        params={
            "accessToken": ToolParam(type="string", required=True, visibility="hidden"),
            "name": ToolParam(
                type="string",
                required=True,
                visibility="user-only",
                description="Name of the matter",
            ),
            "description": ToolParam(
                type="string",
                required=False,
                visibility="user-only",
                description="Optional description of the matter",
            ),
        },
        request=ToolRequest(
            url=lambda params: f"{base_url}/v1/matters",
            method="POST",
            headers=bearer_headers,
            body=_body,
        ),
        transform_response=_transform_response,
        outputs={"matter": "Created matter object"},
        args_schema=GoogleVaultCreateMattersParams,
    )
