"""API request/response models for the browser-facing REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NspConnectRequest(BaseModel):
    """Request model for POST /nsp/connect."""

    model_config = ConfigDict(populate_by_name=True)

    ip: str = Field(default="", description="NSP host name or address")
    user: str = Field(default="", description="NSP user name")
    password: str = Field(default="", alias="pass", description="NSP password")


class NspStatusResponse(BaseModel):
    """Response model for GET /nsp/status. Never carries the token."""

    ip: str
    user: str


class ListEntry(BaseModel):
    """One entry of GET /list/{kind}: a repo with its files, or an intent type."""

    name: str
    files: list[str] | None = None


__all__ = ["NspConnectRequest", "NspStatusResponse", "ListEntry"]
