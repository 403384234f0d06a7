"""Helpers shared by the Google Vault tools."""

from __future__ import annotations

from typing import Any

import httpx

from vault_workflow.executor.credentials import enhance_credential_error, is_credential_refresh_error

_PERMISSION_HINT = (
    " Make sure the connected Google account has Vault access and the "
    "eDiscovery privileges required for this operation."
)
_NOT_FOUND_HINT = " Check that the matter ID is correct and that the matter has not been deleted."


def enhance_google_vault_error(message: str) -> str:
    """Append remediation guidance for well-known Vault API failures."""
    if is_credential_refresh_error(message):
        return enhance_credential_error(message)

    lowered = message.lower()
    if "permission" in lowered or "403" in lowered or "forbidden" in lowered:
        return message + _PERMISSION_HINT
    if "not found" in lowered or "404" in lowered:
        return message + _NOT_FOUND_HINT
    return message


def error_message_from_response(response: httpx.Response, default: str) -> str:
    """Extract `error.message` from a Google API error body."""
    try:
        data: Any = response.json()
    except ValueError:
        return default
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return default


def bearer_headers(params: dict[str, Any]) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {params['accessToken']}",
        "Content-Type": "application/json",
    }
