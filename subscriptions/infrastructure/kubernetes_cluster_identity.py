"""
Kubernetes-backed cluster identity resolver.

A cluster has no ID of its own. The UID of the `kube-system` namespace
is immutable and unique per cluster, so it is used as the cluster ID.
"""
import logging
import threading
from typing import Optional

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from core.domain.exceptions import ClusterIdentityLookupError, ClusterIdentityNotFoundError
from core.domain.value_objects import ClusterIdentity
from subscriptions.ports.cluster_identity import ClusterIdentityResolver

logger = logging.getLogger(__name__)

KUBE_SYSTEM_NAMESPACE = "kube-system"


class KubernetesClusterIdentityResolver(ClusterIdentityResolver):
    """Resolve the cluster identity from a system namespace UID."""

    def __init__(
        self,
        namespace: str = KUBE_SYSTEM_NAMESPACE,
        core_api: Optional[client.CoreV1Api] = None,
    ):
        """
        Initialize the resolver.

        Args:
            namespace: Name of the namespace whose UID identifies the cluster
            core_api: Optional preconfigured CoreV1Api (config is loaded lazily otherwise)
        """
        self.namespace = namespace
        self._core_api = core_api
        self._lock = threading.Lock()

    def resolve(self) -> ClusterIdentity:
        """Read the namespace and return its UID."""
        try:
            namespace = self._api().read_namespace(name=self.namespace)
        except ApiException as e:
            if e.status == 404:
                raise ClusterIdentityNotFoundError(
                    f"can't find namespace {self.namespace}"
                ) from e
            logger.error(
                "Failed to read identity namespace",
                extra={"namespace": self.namespace, "status": e.status, "error": e.reason},
            )
            raise ClusterIdentityLookupError() from e
        except urllib3.exceptions.HTTPError as e:
            logger.error(
                "Kubernetes API unreachable",
                extra={"namespace": self.namespace, "error": str(e)},
            )
            raise ClusterIdentityLookupError() from e

        uid = namespace.metadata.uid if namespace.metadata else None
        if not uid:
            logger.error("Identity namespace has no UID", extra={"namespace": self.namespace})
            raise ClusterIdentityLookupError()
        return ClusterIdentity(uid)

    def _api(self) -> client.CoreV1Api:
        """Return the CoreV1Api, loading cluster configuration on first use."""
        with self._lock:
            if self._core_api is None:
                try:
                    config.load_incluster_config()
                except ConfigException:
                    try:
                        config.load_kube_config()
                    except ConfigException as e:
                        logger.error("No Kubernetes configuration available", extra={"error": str(e)})
                        raise ClusterIdentityLookupError() from e
                self._core_api = client.CoreV1Api()
            return self._core_api
