import httpx
from fastapi.testclient import TestClient


def _vault(request: httpx.Request) -> httpx.Response:
    if request.headers.get("Authorization") == "Bearer expired":
        return httpx.Response(
            400, json={"error": {"message": "invalid_grant: reauth related error (invalid_rapt)"}}
        )
    return httpx.Response(200, json={"matterId": "m-42", "name": "Acme", "state": "OPEN"})


def test_api_execute_tags_trace_metrics(monkeypatch) -> None:
    from vault_workflow.api import main

    monkeypatch.setattr(
        main._tool_registry,
        "_client",
        httpx.AsyncClient(transport=httpx.MockTransport(_vault)),
    )
    client = TestClient(main.app)

    health_resp = client.get("/health")
    assert health_resp.status_code == 200
    assert health_resp.json()["block_types"] == ["google_vault"]

    tools_resp = client.get("/tools")
    assert {item["id"] for item in tools_resp.json()["items"]} == {
        "google_vault_create_matters",
        "google_vault_list_matters",
    }

    execute_resp = client.post(
        "/blocks/execute",
        json={
            "block_id": "block-1",
            "block_name": "Open matter",
            "inputs": {"operation": "create_matters", "accessToken": "ok", "name": "Acme"},
            "context": {"workflow_id": "wf-1"},
        },
    )
    assert execute_resp.status_code == 200
    payload = execute_resp.json()
    assert payload["output"]["matter"]["matterId"] == "m-42"

    trace_resp = client.get(f"/traces/{payload['trace_id']}")
    assert trace_resp.status_code == 200
    assert trace_resp.json()["success"] is True

    failed_resp = client.post(
        "/blocks/execute",
        json={
            "block_id": "block-2",
            "tool": "google_vault_create_matters",
            "inputs": {"accessToken": "expired", "name": "Acme"},
        },
    )
    assert failed_resp.status_code == 502
    detail = failed_resp.json()["detail"]
    assert "Reauthentication policy" in detail["message"]
    assert detail["tool_id"] == "google_vault_create_matters"
    assert detail["block_name"] == "Unnamed Block"

    missing_resp = client.post(
        "/blocks/execute",
        json={"block_id": "block-3", "tool": "nope", "inputs": {}},
    )
    assert missing_resp.status_code == 404

    invalid_resp = client.post(
        "/blocks/execute",
        json={"block_id": "block-4", "inputs": {"operation": "delete_everything"}},
    )
    assert invalid_resp.status_code == 400

    tags_resp = client.post(
        "/knowledge/tags-cell",
        json={
            "document": {"tag1": "Legal", "tag2": "Q3", "boolean1": True},
            "tag_definitions": [
                {"tag_slot": "boolean1", "display_name": "Privileged", "field_type": "boolean"}
            ],
        },
    )
    assert tags_resp.status_code == 200
    view = tags_resp.json()["view"]
    assert view["overflow"]["label"] == "+1"
    assert view["overflow"]["tooltip"] == "Privileged"
    assert "stopPropagation" in tags_resp.json()["html"]

    metrics_resp = client.get("/metrics")
    assert metrics_resp.status_code == 200
    assert metrics_resp.json()["total_executions"] >= 2
    assert metrics_resp.json()["failed_executions"] >= 1
