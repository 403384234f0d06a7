"""Configuration models for the Vault workflow service."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


class TagCellConfig(BaseModel):
    """Configures how document tags are laid out in a table cell."""

    max_visible_tags: int = Field(default=2, ge=1, le=2)
    badge_max_chars: int = Field(default=14, ge=4)
    detail_value_max_chars: int = Field(default=18, ge=4)
    placeholder: str = "—"


class VaultApiConfig(BaseModel):
    """Configures outbound calls to the Google Vault REST API."""

    base_url: str = "https://vault.googleapis.com"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class ExecutorConfig(BaseModel):
    """Configures block execution bookkeeping."""

    max_output_preview: int = Field(default=320, ge=32)


def load_vault_api_config() -> VaultApiConfig:
    defaults = VaultApiConfig()
    return VaultApiConfig(
        base_url=os.getenv("VAULT_API_BASE_URL", defaults.base_url).rstrip("/"),
        timeout_seconds=float(os.getenv("VAULT_API_TIMEOUT", str(defaults.timeout_seconds))),
    )
