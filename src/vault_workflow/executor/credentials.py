"""Detection and rewriting of Google credential reauthentication failures.

Google Workspace admins can enforce a "Reauthentication policy" that forces
users to re-prove their identity periodically. Refresh tokens issued to Sim
Studio then stop working and the token endpoint answers with RAPT
(reauthentication proof token) errors, often wrapped by our own token refresh
layer as a generic "failed to refresh token".

Detection is substring based because Google does not expose a structured
error code for this case.
"""

from __future__ import annotations

CREDENTIAL_REMEDIATION_MESSAGE = (
    "Google Vault authentication failed (likely due to reauthentication policy). "
    "To resolve this, try disconnecting and reconnecting your Google Vault credential "
    "in the Credentials settings. If the issue persists, ask your Google Workspace "
    'administrator to disable "Reauthentication policy" for Sim Studio in the Google '
    "Admin Console (Security > Access and data control > Context-Aware Access > "
    "Reauthentication policy), or exempt Sim Studio from reauthentication requirements. "
    "Learn more: https://support.google.com/a/answer/9368756"
)

_SINGLE_MARKERS = ("invalid_rapt", "reauth related error", "failed to refresh token")
_PAIRED_MARKERS = (("invalid_grant", "rapt"), ("failed to fetch access token", "401"))


def is_credential_refresh_error(message: str | None) -> bool:
    if not message:
        return False
    lowered = message.lower()
    if any(marker in lowered for marker in _SINGLE_MARKERS):
        return True
    return any(first in lowered and second in lowered for first, second in _PAIRED_MARKERS)


def enhance_credential_error(message: str) -> str:
    """Replace reauthentication failures with actionable guidance.

    Any other message is returned unchanged.
    """
    if is_credential_refresh_error(message):
        return CREDENTIAL_REMEDIATION_MESSAGE
    return message
