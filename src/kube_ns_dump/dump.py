"""Namespace and cluster dumps: sequential per-kind queries, concurrent per-namespace fan-out."""

from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path

import structlog
from kubernetes import client as k8s_client

from kube_ns_dump.clients.k8s_core import TERMINATING_PHASE, K8sCoreClient
from kube_ns_dump.clients.k8s_resources import K8sResourceClient
from kube_ns_dump.errors import DumpError, ResourceTypeNotFound
from kube_ns_dump.models import DumpReport, NamespaceResult, NamespaceSnapshot
from kube_ns_dump.render import render_snapshot, strip_resource_version
from kube_ns_dump.resources import (
    DEFAULT_KINDS,
    DEFAULT_SKIP_TYPES,
    ResourceKind,
    narrow_to_namespace,
    select_kinds,
    typed_items,
)

log = structlog.get_logger()

FILE_MODE = 0o644


def snapshot_path(output: Path, namespace: str) -> Path:
    return output / f"{namespace}.yaml"


def write_snapshot(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` through a temporary file in the same directory."""
    handle = tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        prefix=f".{path.name}.",
        dir=path.parent,
        encoding="utf-8",
    )
    tmp_path = Path(handle.name)
    try:
        with handle:
            handle.write(text)
        tmp_path.chmod(FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


async def collect_namespace(
    resource_client: K8sResourceClient,
    namespace: str,
    kinds: Sequence[ResourceKind],
) -> NamespaceSnapshot:
    """Query every kind in ``kinds`` for ``namespace``, one after another.

    Kinds the server does not know are recorded in ``not_found``. Cluster-scoped
    kinds are queried last so they can be narrowed using the namespace's claims.
    """
    snapshot = NamespaceSnapshot(name=namespace)
    ordered = sorted(kinds, key=lambda k: not k.namespaced)
    for kind in ordered:
        try:
            document = await resource_client.list_objects(kind, namespace)
        except ResourceTypeNotFound as e:
            snapshot.not_found.append(str(e))
            continue
        except Exception as e:
            raise DumpError(namespace, f"unexpected error querying type {kind.plural}: {e}") from e

        items = typed_items(document, kind)
        if not kind.namespaced:
            claims = snapshot.types.get("persistentvolumeclaims", [])
            items = narrow_to_namespace(kind.plural, items, namespace, claims)
        snapshot.types[kind.plural] = items
    return snapshot


async def dump_namespace(
    api_client: k8s_client.ApiClient,
    namespace: str,
    output: Path,
    skip_types: Iterable[str] = DEFAULT_SKIP_TYPES,
    kinds: Iterable[ResourceKind] = DEFAULT_KINDS,
) -> NamespaceResult:
    """Dump the objects of one namespace to ``<output>/<namespace>.yaml``.

    Raises:
        DumpError: If a kind could not be queried for a reason other than
            "not found", or the file could not be written.
    """
    log.info("dumping_namespace", namespace=namespace)
    selected = select_kinds(kinds, skip_types)
    snapshot = await collect_namespace(K8sResourceClient(api_client), namespace, selected)

    text = strip_resource_version(render_snapshot(snapshot))
    path = snapshot_path(output, namespace)
    try:
        await asyncio.to_thread(write_snapshot, path, text)
    except OSError as e:
        raise DumpError(namespace, f"cannot write {path}: {e}") from e

    log.debug("namespace_dumped", namespace=namespace, objects=snapshot.object_count, path=str(path))
    return NamespaceResult(
        namespace=namespace,
        path=str(path),
        object_count=snapshot.object_count,
        not_found=snapshot.not_found,
    )


async def dump_cluster(
    api_client: k8s_client.ApiClient,
    output: Path,
    namespace: str | None = None,
    skip_types: Iterable[str] = DEFAULT_SKIP_TYPES,
    kinds: Iterable[ResourceKind] = DEFAULT_KINDS,
) -> DumpReport:
    """Dump one namespace, or every namespace concurrently.

    Namespaces being terminated are skipped. A namespace that fails is logged
    and reported; the others still complete.

    Raises:
        Exception: Whatever the API raised while listing namespaces.
    """
    skip_types = tuple(skip_types)
    kinds = tuple(kinds)
    output.mkdir(parents=True, exist_ok=True)
    report = DumpReport(output=str(output), timestamp=datetime.now(tz=UTC).isoformat())
    core_client = K8sCoreClient(api_client)

    log.info("dumping_cluster_objects", output=str(output))
    if namespace:
        if not await core_client.namespace_exists(namespace):
            log.error("namespace_not_found", namespace=namespace)
            report.results.append(NamespaceResult(namespace=namespace, error=f"namespace {namespace} not found"))
            return report
        targets = [namespace]
    else:
        targets = []
        for ns in await core_client.list_namespaces():
            if ns["phase"] == TERMINATING_PHASE:
                log.info("skipping_namespace", namespace=ns["name"], reason="terminating")
                report.skipped_namespaces.append(ns["name"])
                continue
            targets.append(ns["name"])

    tasks = [dump_namespace(api_client, name, output, skip_types, kinds) for name in targets]
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for name, result in zip(targets, results, strict=True):
        if isinstance(result, BaseException):
            log.error("namespace_dump_failed", namespace=name, error=str(result))
            report.results.append(NamespaceResult(namespace=name, error=str(result)))
        else:
            report.results.append(result)

    log.info("done", namespaces=len(report.results), failed=len(report.failed))
    return report
