import pytest

from vault_workflow.executor.credentials import (
    CREDENTIAL_REMEDIATION_MESSAGE,
    enhance_credential_error,
    is_credential_refresh_error,
)


@pytest.mark.parametrize(
    "message",
    [
        "invalid_rapt",
        "Token refresh rejected: INVALID_RAPT",
        "Reauth related error (invalid_rapt)",
        "invalid_grant: rapt_required",
        "Failed to refresh token for credential cred-1",
        "Failed to fetch access token: 401 Unauthorized",
    ],
)
def test_reauthentication_failures_detected(message: str) -> None:
    assert is_credential_refresh_error(message)
    assert enhance_credential_error(message) == CREDENTIAL_REMEDIATION_MESSAGE


@pytest.mark.parametrize(
    "message",
    [
        "rate limit exceeded",
        "invalid_grant",
        "Failed to fetch access token: 500",
        "",
    ],
)
def test_unrelated_errors_pass_through(message: str) -> None:
    assert not is_credential_refresh_error(message)
    assert enhance_credential_error(message) == message


def test_remediation_mentions_reauthentication_policy() -> None:
    enhanced = enhance_credential_error("invalid_rapt")

    assert "Reauthentication policy" in enhanced
    assert "reconnecting your Google Vault credential" in enhanced
