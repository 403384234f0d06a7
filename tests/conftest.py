from collections.abc import Callable

import httpx
import pytest

from vault_workflow.tools.builtin import register_builtin_tools
from vault_workflow.tools.registry import ToolRegistry

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_registry() -> Callable[..., ToolRegistry]:
    """Build a registry with the built-in tools talking to a fake Vault API."""

    def _make(handler: Handler, **kwargs: object) -> ToolRegistry:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        registry = ToolRegistry(client=client, **kwargs)
        register_builtin_tools(registry)
        return registry

    return _make


@pytest.fixture
def matter_payload() -> dict[str, object]:
    return {
        "matterId": "m-123",
        "name": "Acme litigation",
        "description": "Preserve mail for the Acme case",
        "state": "OPEN",
    }
