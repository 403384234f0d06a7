"""Tool that lists Google Vault matters or fetches a single one."""

from __future__ import annotations

from typing import Any

import httpx

from vault_workflow.config import VaultApiConfig
from vault_workflow.errors import ToolRequestError
from vault_workflow.tools.google_vault.params import GoogleVaultListMattersParams
from vault_workflow.tools.google_vault.utils import (
    bearer_headers,
    enhance_google_vault_error,
    error_message_from_response,
)
from vault_workflow.tools.registry import ToolConfig, ToolParam, ToolRequest
from vault_workflow.types import ToolResult

TOOL_ID = "google_vault_list_matters"


def _query(params: dict[str, Any]) -> dict[str, Any]:
    if params.get("matterId"):
        return {}
    query: dict[str, Any] = {}
    if params.get("pageSize"):
        query["pageSize"] = int(params["pageSize"])
    if params.get("pageToken"):
        query["pageToken"] = params["pageToken"]
    return query


async def _transform_response(response: httpx.Response, params: dict[str, Any]) -> ToolResult:
    if not response.is_success:
        message = error_message_from_response(response, "Failed to list matters")
        raise ToolRequestError.from_response(
            enhance_google_vault_error(message), response.status_code
        )
    data = response.json()
    if params.get("matterId"):
        return ToolResult(success=True, output={"matter": data})
    return ToolResult(
        success=True,
        output={
            "matters": data.get("matters", []),
            "nextPageToken": data.get("nextPageToken"),
        },
    )


def build_list_matters_tool(api_config: VaultApiConfig | None = None) -> ToolConfig:
    base_url = (api_config or VaultApiConfig()).base_url

    def _url(params: dict[str, Any]) -> str:
        matter_id = params.get("matterId")
        if matter_id:
            return f"{base_url}/v1/matters/{str(matter_id).strip()}"
        return f"{base_url}/v1/matters"

    return ToolConfig(
        id=TOOL_ID,
        name="Vault List Matters",
        description="List matters, or get a specific matter if matterId is provided",
        oauth_provider="google-vault",
        params={
            "accessToken": ToolParam(type="string", required=True, visibility="hidden"),
            "pageSize": ToolParam(
                type="number",
                visibility="user-only",
                description="Number of matters to return per page",
            ),
            "pageToken": ToolParam(
                type="string",
                visibility="hidden",
                description="Token for pagination",
            ),
            "matterId": ToolParam(
                type="string",
                visibility="user-only",
                description="Optional matter ID to fetch a specific matter",
            ),
        },
        request=ToolRequest(url=_url, method="GET", headers=bearer_headers, query=_query),
        transform_response=_transform_response,
        outputs={
            "matters": "Array of matter objects",
            "matter": "Single matter object (when matterId is provided)",
            "nextPageToken": "Token for fetching next page of results",
        },
        args_schema=GoogleVaultListMattersParams,
    )
