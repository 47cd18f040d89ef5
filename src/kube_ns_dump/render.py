"""Render a namespace snapshot as a multi-document YAML file."""

from __future__ import annotations

import re
from typing import Any

import yaml

from kube_ns_dump.models import NamespaceSnapshot

DOCUMENT_SEPARATOR = "---"

# Leading whitespace is consumed too, so the whole line disappears.
_RESOURCE_VERSION_RE = re.compile(r"""(\s*)resourceVersion: (['"])(\d+)\2""")


def object_to_yaml(obj: dict[str, Any]) -> str:
    """Serialize one API object as block-style YAML with sorted keys."""
    return yaml.safe_dump(obj, default_flow_style=False, sort_keys=True, allow_unicode=True)


def strip_resource_version(text: str) -> str:
    """Remove every ``resourceVersion`` entry so snapshots diff cleanly between runs."""
    return _RESOURCE_VERSION_RE.sub("", text)


def namespace_document(name: str) -> dict[str, Any]:
    return {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": name}}


def render_snapshot(snapshot: NamespaceSnapshot) -> str:
    """Build the snapshot file body.

    The file opens with a comment block listing the types that were not
    found, then the Namespace object itself, then one commented section per
    non-empty type in alphabetical order. Every object is its own YAML
    document.
    """
    lines: list[str] = ["# errors:"]
    lines.extend(f"# {message}" for message in snapshot.not_found)
    lines.append("")
    lines.append("# namespace")
    lines.append(object_to_yaml(namespace_document(snapshot.name)).rstrip("\n"))
    lines.append(DOCUMENT_SEPARATOR)

    for plural in sorted(snapshot.types):
        items = snapshot.types[plural]
        if not items:
            continue
        lines.append(f"# {plural}")
        for item in items:
            lines.append(object_to_yaml(item).rstrip("\n"))
            lines.append(DOCUMENT_SEPARATOR)

    return "\n".join(lines) + "\n"
