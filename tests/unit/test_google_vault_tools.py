import json

import httpx
import pytest

from vault_workflow.config import VaultApiConfig
from vault_workflow.tools.google_vault.create_matters import build_create_matters_tool
from vault_workflow.tools.google_vault.utils import enhance_google_vault_error


def _error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


@pytest.mark.asyncio
async def test_create_matter_posts_bearer_authenticated_json(make_registry, matter_payload) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=matter_payload)

    registry = make_registry(_handler)
    result = await registry.execute_tool(
        "google_vault_create_matters",
        {"accessToken": "ya29.token", "name": "Acme litigation", "description": "Preserve"},
    )

    assert result.success
    assert result.output == {"matter": matter_payload}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://vault.googleapis.com/v1/matters"
    assert request.headers["Authorization"] == "Bearer ya29.token"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"name": "Acme litigation", "description": "Preserve"}


@pytest.mark.asyncio
async def test_create_matter_omits_missing_description(make_registry, matter_payload) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=matter_payload)

    registry = make_registry(_handler)
    await registry.execute_tool("google_vault_create_matters", {"accessToken": "t", "name": "Case"})

    assert json.loads(seen[0].content) == {"name": "Case"}


@pytest.mark.asyncio
async def test_create_matter_error_message_is_extracted_and_enhanced(make_registry) -> None:
    registry = make_registry(lambda request: _error(403, "The caller does not have permission"))

    result = await registry.execute_tool("google_vault_create_matters", {"accessToken": "t", "name": "Case"})

    assert not result.success
    assert result.error is not None
    assert result.error.startswith("The caller does not have permission")
    assert "eDiscovery privileges" in result.error
    assert result.status == 403


@pytest.mark.asyncio
async def test_create_matter_default_error_message(make_registry) -> None:
    registry = make_registry(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

    result = await registry.execute_tool("google_vault_create_matters", {"accessToken": "t", "name": "Case"})

    assert result.error == "Failed to create matter"


@pytest.mark.asyncio
async def test_create_matter_reauthentication_error(make_registry) -> None:
    registry = make_registry(lambda request: _error(400, "invalid_grant: invalid_rapt"))

    result = await registry.execute_tool("google_vault_create_matters", {"accessToken": "t", "name": "Case"})

    assert "Reauthentication policy" in (result.error or "")


@pytest.mark.asyncio
async def test_list_matters_builds_page_query(make_registry, matter_payload) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"matters": [matter_payload], "nextPageToken": "p2"})

    registry = make_registry(_handler)
    result = await registry.execute_tool(
        "google_vault_list_matters",
        {"accessToken": "t", "pageSize": 10, "pageToken": "p1"},
    )

    assert result.output == {"matters": [matter_payload], "nextPageToken": "p2"}
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/v1/matters"
    assert seen[0].url.params["pageSize"] == "10"
    assert seen[0].url.params["pageToken"] == "p1"


@pytest.mark.asyncio
async def test_list_matters_fetches_single_matter(make_registry, matter_payload) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=matter_payload)

    registry = make_registry(_handler)
    result = await registry.execute_tool(
        "google_vault_list_matters", {"accessToken": "t", "matterId": "m-123", "pageSize": 5}
    )

    assert result.output == {"matter": matter_payload}
    assert seen[0].url.path == "/v1/matters/m-123"
    assert "pageSize" not in seen[0].url.params


def test_base_url_is_configurable() -> None:
    tool = build_create_matters_tool(VaultApiConfig(base_url="http://vault.local"))

    request = tool.build_request({"accessToken": "t", "name": "Case"})

    assert str(request.url) == "http://vault.local/v1/matters"


def test_enhance_google_vault_error_leaves_unknown_errors() -> None:
    assert enhance_google_vault_error("rate limit exceeded") == "rate limit exceeded"
    assert "matter ID is correct" in enhance_google_vault_error("Requested entity was not found.")
