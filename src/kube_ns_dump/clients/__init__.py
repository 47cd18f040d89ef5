"""Client wrappers for the Kubernetes API."""

from __future__ import annotations

import structlog
from kubernetes import client as k8s_client
from kubernetes.config import ConfigException, load_incluster_config, load_kube_config

from kube_ns_dump.errors import ClusterConnectionError

log = structlog.get_logger()


def load_k8s_api_client(
    apiserver_host: str | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
) -> k8s_client.ApiClient:
    """Create an isolated Kubernetes API client from connection parameters.

    An explicit ``kubeconfig`` must load. Without one, the default kubeconfig
    location is tried first and the in-cluster service account second. When
    neither is available, ``apiserver_host`` alone is enough to build an
    unauthenticated client.

    Args:
        apiserver_host: Address in the form protocol://address:port. Overrides
            the server of whichever configuration was loaded.
        kubeconfig: Path to a kubeconfig file.
        context: Kubeconfig context to use instead of the current one.

    Raises:
        ClusterConnectionError: If no usable configuration was found.
    """
    configuration = k8s_client.Configuration()
    try:
        load_kube_config(config_file=kubeconfig, context=context, client_configuration=configuration)
    except ConfigException as e:
        if kubeconfig or context:
            raise ClusterConnectionError(f"cannot load kubeconfig: {e}") from e
        try:
            load_incluster_config(client_configuration=configuration)
        except ConfigException as incluster_error:
            if not apiserver_host:
                msg = f"no kubeconfig found and not running inside a cluster: {incluster_error}"
                raise ClusterConnectionError(msg) from incluster_error
            log.debug("using_bare_apiserver_host", host=apiserver_host)
    except OSError as e:
        raise ClusterConnectionError(f"cannot read kubeconfig {kubeconfig}: {e}") from e

    if apiserver_host:
        configuration.host = apiserver_host.rstrip("/")

    log.info("creating_api_client", host=configuration.host)
    return k8s_client.ApiClient(configuration)
