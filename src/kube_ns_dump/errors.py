"""Exception hierarchy for the dump tool."""

from __future__ import annotations


class DumpToolError(Exception):
    """Base class for all errors raised by kube-ns-dump."""


class ConfigError(DumpToolError):
    """The settings file or environment is malformed."""


class ClusterConnectionError(DumpToolError):
    """The API client could not be built from the connection parameters."""


class ResourceTypeNotFound(DumpToolError):
    """The API server has no list endpoint for a kind in the given namespace."""

    def __init__(self, plural: str, namespace: str) -> None:
        self.plural = plural
        self.namespace = namespace
        super().__init__(f"there is no object of type {plural} in namespace {namespace}")


class DumpError(DumpToolError):
    """Dumping a single namespace failed."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"unexpected error dumping namespace ({namespace}) content: {reason}")
