"""Internal Pydantic models for CouchDB API responses.

These models are only used inside the couch client to parse raw JSON
responses. They are never returned to callers, which get plain mappings,
Document or ViewResult objects instead.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class _CreateResponse(BaseModel):
    id: str
    rev: str


class _UpdateResponse(BaseModel):
    rev: str


class _AllDocsResponse(BaseModel):
    total_rows: int | None = None
    offset: int | None = None
    rows: list[dict[str, Any]] = []


class _ViewRowResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: Any = None
    value: Any = None
    id: str | None = None
    doc: dict[str, Any] | None = None


class _ViewResponse(BaseModel):
    total_rows: int | None = None
    offset: int | None = None
    rows: list[_ViewRowResponse] = []
