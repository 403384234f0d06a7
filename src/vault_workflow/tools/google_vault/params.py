"""Parameter models for Google Vault tools."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GoogleVaultCreateMattersParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken", min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None


class GoogleVaultListMattersParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken", min_length=1)
    page_size: int | None = Field(default=None, alias="pageSize", ge=1, le=100)
    page_token: str | None = Field(default=None, alias="pageToken")
    matter_id: str | None = Field(default=None, alias="matterId")
