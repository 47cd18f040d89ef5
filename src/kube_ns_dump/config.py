"""Dump settings, settings-file loading, and environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from kube_ns_dump.errors import ConfigError
from kube_ns_dump.resources import DEFAULT_SKIP_TYPES, ResourceKind
from kube_ns_dump.validation import validate_kind, validate_log_level, validate_namespace, validate_skip_types


def split_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated list, dropping blanks and surrounding whitespace."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _env(name: str) -> str | None:
    return os.environ.get(name) or None


@dataclass(frozen=True)
class DumpConfig:
    """Everything needed to connect to a cluster and dump it."""

    apiserver_host: str | None = field(default_factory=lambda: _env("KUBE_NS_DUMP_APISERVER_HOST"))
    # None defers to the client library, which honours $KUBECONFIG and ~/.kube/config
    kubeconfig: str | None = None
    context: str | None = field(default_factory=lambda: _env("KUBE_NS_DUMP_CONTEXT"))
    output: Path = field(default_factory=lambda: Path(os.environ.get("KUBE_NS_DUMP_OUTPUT", ".")))
    namespace: str | None = field(default_factory=lambda: _env("KUBE_NS_DUMP_NAMESPACE"))
    skip_types: tuple[str, ...] = field(
        default_factory=lambda: split_csv(os.environ.get("KUBE_NS_DUMP_SKIP_TYPES")) or DEFAULT_SKIP_TYPES
    )
    extra_kinds: tuple[ResourceKind, ...] = ()
    log_level: str = field(default_factory=lambda: os.environ.get("KUBE_NS_DUMP_LOG_LEVEL", "info"))


_FILE_KEYS = {"output", "namespace", "skip_types", "extra_kinds"}
_KIND_REQUIRED_FIELDS = ("plural", "version")


def _parse_kind(index: int, entry: Any) -> ResourceKind:
    if not isinstance(entry, dict):
        msg = f"extra_kinds[{index}] must be a mapping, got {type(entry).__name__}."
        raise ConfigError(msg)

    missing = [f for f in _KIND_REQUIRED_FIELDS if f not in entry]
    if missing:
        msg = f"extra_kinds[{index}] is missing required fields: {', '.join(missing)}."
        raise ConfigError(msg)

    plural = str(entry["plural"])
    group = str(entry.get("group") or "")
    version = str(entry["version"])
    try:
        validate_kind(plural, group, version)
    except ValueError as e:
        raise ConfigError(f"extra_kinds[{index}]: {e}") from None

    namespaced = entry.get("namespaced", True)
    if not isinstance(namespaced, bool):
        msg = f"extra_kinds[{index}]: namespaced must be true or false, got {namespaced!r}."
        raise ConfigError(msg)

    return ResourceKind(plural=plural, group=group, version=version, namespaced=namespaced)


def load_settings_file(path: Path) -> dict[str, Any]:
    """Parse a YAML settings file into DumpConfig field overrides.

    Args:
        path: Path to the YAML settings file.

    Returns:
        A dict holding only the keys present in the file, converted to
        DumpConfig field types.

    Raises:
        ConfigError: If the file is missing or unreadable, is not a mapping,
            has unknown keys, or holds invalid values.
    """
    if not path.exists():
        msg = f"Settings file not found: {path}."
        raise ConfigError(msg)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from None

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Settings file {path} is not valid YAML: {e}") from None

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"Settings file {path} must contain a mapping, got {type(raw).__name__}."
        raise ConfigError(msg)

    unknown = sorted(set(raw) - _FILE_KEYS)
    if unknown:
        msg = f"Settings file {path} has unknown keys: {', '.join(unknown)}."
        raise ConfigError(msg)

    overrides: dict[str, Any] = {}
    if raw.get("output") is not None:
        overrides["output"] = Path(str(raw["output"]))
    if raw.get("namespace") is not None:
        overrides["namespace"] = str(raw["namespace"])

    if "skip_types" in raw:
        skip = raw["skip_types"]
        if isinstance(skip, str):
            overrides["skip_types"] = split_csv(skip)
        elif isinstance(skip, list):
            overrides["skip_types"] = tuple(str(s) for s in skip)
        elif skip is None:
            overrides["skip_types"] = ()
        else:
            msg = f"Settings file {path}: skip_types must be a list or comma-separated string."
            raise ConfigError(msg)

    if "extra_kinds" in raw:
        kinds_raw = raw["extra_kinds"] or []
        if not isinstance(kinds_raw, list):
            msg = f"Settings file {path}: extra_kinds must be a list."
            raise ConfigError(msg)
        overrides["extra_kinds"] = tuple(_parse_kind(i, entry) for i, entry in enumerate(kinds_raw))

    return overrides


def build_config(settings_file: Path | None = None, **cli_overrides: Any) -> DumpConfig:
    """Resolve the effective configuration.

    Precedence, highest first: command-line values, the settings file,
    environment variables, built-in defaults. ``None`` command-line values
    mean "not given".

    Raises:
        ConfigError: If the settings file or any resolved value is invalid.
    """
    config = DumpConfig()
    if settings_file is not None:
        config = replace(config, **load_settings_file(settings_file))
    given = {k: v for k, v in cli_overrides.items() if v is not None}
    if given:
        config = replace(config, **given)

    try:
        validate_namespace(config.namespace)
        validate_skip_types(config.skip_types)
        validate_log_level(config.log_level)
    except ValueError as e:
        raise ConfigError(str(e)) from None
    return config
