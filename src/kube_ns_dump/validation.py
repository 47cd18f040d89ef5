"""Input validation helpers for command-line and config-file parameters."""

from __future__ import annotations

import re
from collections.abc import Iterable

# RFC 1123 label: lowercase alphanumeric and hyphens, 1-63 chars, starts/ends with alphanumeric
_NAMESPACE_RE = re.compile(r"[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?")

# Resource plurals are lowercase and never contain separators
_PLURAL_RE = re.compile(r"[a-z][a-z0-9]*")

# DNS subdomain, or empty for the core group
_GROUP_RE = re.compile(r"([a-z0-9]([a-z0-9\-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]*[a-z0-9])?)*)?")

_VERSION_RE = re.compile(r"v[0-9]+((alpha|beta)[0-9]+)?")

_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


def validate_namespace(namespace: str | None) -> None:
    """Validate a Kubernetes namespace name against RFC 1123."""
    if namespace is None:
        return
    if not _NAMESPACE_RE.fullmatch(namespace):
        msg = f"Invalid namespace: {namespace!r}. Must be a valid RFC 1123 label."
        raise ValueError(msg)


def validate_skip_types(skip_types: Iterable[str]) -> None:
    """Validate that every skipped type is a lowercase resource plural."""
    bad = [t for t in skip_types if not _PLURAL_RE.fullmatch(t)]
    if bad:
        msg = f"Invalid skip types: {', '.join(repr(t) for t in bad)}. Use lowercase plurals such as 'secrets'."
        raise ValueError(msg)


def validate_kind(plural: str, group: str, version: str) -> None:
    """Validate the coordinates of a user-supplied resource kind."""
    if not _PLURAL_RE.fullmatch(plural):
        msg = f"Invalid resource plural: {plural!r}."
        raise ValueError(msg)
    if not _GROUP_RE.fullmatch(group):
        msg = f"Invalid API group: {group!r}."
        raise ValueError(msg)
    if not _VERSION_RE.fullmatch(version):
        msg = f"Invalid API version: {version!r}. Expected e.g. 'v1' or 'v1beta1'."
        raise ValueError(msg)


def validate_log_level(level: str) -> None:
    if level.lower() not in _LOG_LEVELS:
        valid = ", ".join(sorted(_LOG_LEVELS))
        msg = f"Invalid log level: {level!r}. Must be one of: {valid}"
        raise ValueError(msg)
