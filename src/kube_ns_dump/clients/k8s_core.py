"""Kubernetes Core API wrapper — namespaces."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

import structlog
from kubernetes import client as k8s_client
from kubernetes.client.rest import ApiException

log = structlog.get_logger()

TERMINATING_PHASE = "Terminating"


class K8sCoreClient:
    """Wrapper around the Kubernetes Core V1 API."""

    def __init__(self, api_client: k8s_client.ApiClient) -> None:
        self._api_client = api_client
        self._api: k8s_client.CoreV1Api | None = None
        self._lock = threading.Lock()

    def _get_api(self) -> k8s_client.CoreV1Api:
        with self._lock:
            if self._api is None:
                self._api = k8s_client.CoreV1Api(self._api_client)
            return self._api

    async def list_namespaces(self) -> list[dict[str, Any]]:
        """List all namespaces.

        Returns a list of dicts with keys: name, phase.
        """
        api = self._get_api()
        try:
            ns_list = await asyncio.to_thread(api.list_namespace)
        except Exception:
            log.error("failed_to_list_namespaces")
            raise

        return [
            {
                "name": ns.metadata.name,
                "phase": ns.status.phase if ns.status else None,
            }
            for ns in ns_list.items
        ]

    async def namespace_exists(self, name: str) -> bool:
        api = self._get_api()
        try:
            await asyncio.to_thread(api.read_namespace, name)
        except ApiException as e:
            if e.status == 404:
                return False
            log.error("failed_to_read_namespace", namespace=name, status=e.status)
            raise
        return True
