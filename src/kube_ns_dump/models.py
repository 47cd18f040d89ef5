"""Pydantic v2 models for namespace snapshots and the dump report."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class NamespaceSnapshot(BaseModel):
    """Objects collected from a single namespace, grouped by resource plural."""

    name: str
    types: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    not_found: list[str] = Field(default_factory=list)

    @property
    def object_count(self) -> int:
        return sum(len(items) for items in self.types.values())


class NamespaceResult(BaseModel):
    """Outcome of dumping one namespace."""

    namespace: str
    path: str | None = None
    object_count: int = 0
    not_found: list[str] = Field(default_factory=list)
    error: str | None = None


class DumpReport(BaseModel):
    """Outcome of a whole dump run."""

    output: str
    results: list[NamespaceResult] = Field(default_factory=list)
    skipped_namespaces: list[str] = Field(default_factory=list)
    timestamp: str

    @property
    def failed(self) -> list[NamespaceResult]:
        return [r for r in self.results if r.error is not None]
