"""Generic list access for any resource kind, by REST path."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from kubernetes import client as k8s_client
from kubernetes.client.rest import ApiException

from kube_ns_dump.errors import ResourceTypeNotFound
from kube_ns_dump.resources import ResourceKind

log = structlog.get_logger()


class K8sResourceClient:
    """Lists objects of arbitrary kinds through the raw API client.

    Typed API classes only exist for kinds the installed SDK knows about;
    going through ``call_api`` keeps removed and custom kinds reachable.
    """

    def __init__(self, api_client: k8s_client.ApiClient) -> None:
        self._api_client = api_client

    def _get(self, path: str) -> dict[str, Any]:
        return self._api_client.call_api(
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_type="object",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )

    async def list_objects(self, kind: ResourceKind, namespace: str) -> dict[str, Any]:
        """List every object of ``kind`` visible from ``namespace``.

        Returns the decoded list document (``kind``, ``apiVersion``, ``items``).

        Raises:
            ResourceTypeNotFound: If the API server answers 404 for the list endpoint.
            ApiException: For any other API failure.
        """
        path = kind.list_path(namespace)
        try:
            document = await asyncio.to_thread(self._get, path)
        except ApiException as e:
            if e.status == 404:
                raise ResourceTypeNotFound(kind.plural, namespace) from None
            log.error("failed_to_list_objects", type=kind.plural, namespace=namespace, status=e.status)
            raise

        if not isinstance(document, dict):
            document = {}
        document.setdefault("items", [])
        if document["items"] is None:
            document["items"] = []
        return document
