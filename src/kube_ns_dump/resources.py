"""Registry of the resource kinds captured in every namespace snapshot."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog

log = structlog.get_logger()

CORE_GROUP = ""


@dataclass(frozen=True)
class ResourceKind:
    """A listable Kubernetes resource type, addressed by its plural name."""

    plural: str
    group: str = CORE_GROUP
    version: str = "v1"
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def list_path(self, namespace: str | None = None) -> str:
        """Return the REST path that lists this kind.

        Namespaced kinds are scoped to ``namespace`` when one is given;
        cluster-scoped kinds always use the cluster-wide path.
        """
        prefix = f"/apis/{self.group}/{self.version}" if self.group else f"/api/{self.version}"
        if self.namespaced and namespace:
            return f"{prefix}/namespaces/{namespace}/{self.plural}"
        return f"{prefix}/{self.plural}"


DEFAULT_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind("configmaps"),
    ResourceKind("cronjobs", "batch", "v1"),
    ResourceKind("daemonsets", "apps", "v1"),
    ResourceKind("deployments", "apps", "v1"),
    ResourceKind("endpoints"),
    ResourceKind("horizontalpodautoscalers", "autoscaling", "v1"),
    ResourceKind("ingresses", "networking.k8s.io", "v1"),
    ResourceKind("jobs", "batch", "v1"),
    ResourceKind("limitranges"),
    ResourceKind("networkpolicies", "networking.k8s.io", "v1"),
    ResourceKind("persistentvolumeclaims"),
    ResourceKind("persistentvolumes", namespaced=False),
    ResourceKind("poddisruptionbudgets", "policy", "v1"),
    # Removed in 1.25; older clusters still serve it.
    ResourceKind("podsecuritypolicies", "policy", "v1beta1", namespaced=False),
    ResourceKind("podtemplates"),
    ResourceKind("replicasets", "apps", "v1"),
    ResourceKind("replicationcontrollers"),
    ResourceKind("resourcequotas"),
    ResourceKind("secrets"),
    ResourceKind("serviceaccounts"),
    ResourceKind("services"),
    ResourceKind("statefulsets", "apps", "v1"),
    ResourceKind("storageclasses", "storage.k8s.io", "v1", namespaced=False),
    # Removed in 1.8; kept so old clusters are dumped completely.
    ResourceKind("thirdpartyresources", "extensions", "v1beta1", namespaced=False),
)

DEFAULT_SKIP_TYPES: tuple[str, ...] = ("serviceaccounts",)


def select_kinds(kinds: Iterable[ResourceKind], skip_types: Iterable[str]) -> list[ResourceKind]:
    """Drop every kind named in ``skip_types``, logging one warning per skipped kind."""
    skip = set(skip_types)
    selected: list[ResourceKind] = []
    for kind in kinds:
        if kind.plural in skip:
            log.warning("skipping_type", type=kind.plural)
            continue
        selected.append(kind)
    return selected


def merge_kinds(base: Iterable[ResourceKind], extra: Iterable[ResourceKind]) -> list[ResourceKind]:
    """Append ``extra`` kinds to ``base``; an extra kind replaces a base kind with the same plural."""
    merged: dict[str, ResourceKind] = {k.plural: k for k in base}
    for kind in extra:
        merged[kind.plural] = kind
    return list(merged.values())


def narrow_to_namespace(
    plural: str,
    items: list[dict[str, Any]],
    namespace: str,
    claims: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Keep only the cluster-scoped objects that belong to ``namespace``.

    Persistent volumes belong to the namespace of their bound claim. Storage
    classes belong to every namespace whose claims reference them. Other
    cluster-scoped kinds are copied into every namespace unchanged.
    """
    if plural == "persistentvolumes":
        return [i for i in items if ((i.get("spec") or {}).get("claimRef") or {}).get("namespace") == namespace]
    if plural == "storageclasses":
        used = {(c.get("spec") or {}).get("storageClassName") for c in claims}
        used.discard(None)
        return [i for i in items if (i.get("metadata") or {}).get("name") in used]
    return items


def typed_items(document: dict[str, Any], kind: ResourceKind) -> list[dict[str, Any]]:
    """Return the list items with ``kind`` and ``apiVersion`` filled in.

    List responses carry type information on the list only, so each item
    inherits it (``ConfigMapList`` becomes ``ConfigMap``).
    """
    list_kind = document.get("kind") or ""
    item_kind = list_kind[: -len("List")] if list_kind.endswith("List") else list_kind
    api_version = document.get("apiVersion") or kind.api_version

    items: list[dict[str, Any]] = []
    for item in document.get("items") or []:
        typed = dict(item)
        if item_kind:
            typed.setdefault("kind", item_kind)
        typed.setdefault("apiVersion", api_version)
        items.append(typed)
    return items
