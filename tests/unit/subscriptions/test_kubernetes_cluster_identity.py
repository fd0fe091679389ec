"""
Unit tests for KubernetesClusterIdentityResolver.
"""
from unittest.mock import MagicMock, patch

import pytest
import urllib3
from kubernetes.client import V1Namespace, V1ObjectMeta
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from core.domain.exceptions import ClusterIdentityLookupError, ClusterIdentityNotFoundError
from core.domain.value_objects import ClusterIdentity
from subscriptions.infrastructure.kubernetes_cluster_identity import (
    KubernetesClusterIdentityResolver,
)


@pytest.fixture
def core_api():
    """Fixture for a mocked CoreV1Api."""
    return MagicMock()


class TestKubernetesClusterIdentityResolver:
    """Tests for KubernetesClusterIdentityResolver."""

    def test_resolve_uid(self, core_api):
        """Test the kube-system UID is the cluster identity."""
        core_api.read_namespace.return_value = V1Namespace(
            metadata=V1ObjectMeta(name="kube-system", uid="ns-uid-1")
        )
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        assert resolver.resolve() == ClusterIdentity("ns-uid-1")
        core_api.read_namespace.assert_called_once_with(name="kube-system")

    def test_repeated_resolve_is_stable(self, core_api):
        """Test the same identity is returned on every call."""
        core_api.read_namespace.return_value = V1Namespace(metadata=V1ObjectMeta(uid="ns-uid-1"))
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        assert resolver.resolve() == resolver.resolve()

    def test_namespace_not_found(self, core_api):
        """Test a missing namespace."""
        core_api.read_namespace.side_effect = ApiException(status=404, reason="Not Found")
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        with pytest.raises(ClusterIdentityNotFoundError):
            resolver.resolve()

    def test_api_error(self, core_api):
        """Test other API errors."""
        core_api.read_namespace.side_effect = ApiException(status=403, reason="Forbidden")
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        with pytest.raises(ClusterIdentityLookupError):
            resolver.resolve()

    def test_unreachable_api(self, core_api):
        """Test connection failures."""
        core_api.read_namespace.side_effect = urllib3.exceptions.MaxRetryError(None, "/api/v1")
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        with pytest.raises(ClusterIdentityLookupError):
            resolver.resolve()

    def test_missing_uid(self, core_api):
        """Test a namespace without UID."""
        core_api.read_namespace.return_value = V1Namespace(metadata=V1ObjectMeta(name="kube-system"))
        resolver = KubernetesClusterIdentityResolver(core_api=core_api)

        with pytest.raises(ClusterIdentityLookupError):
            resolver.resolve()

    def test_no_cluster_configuration(self):
        """Test missing in-cluster and kubeconfig configuration."""
        resolver = KubernetesClusterIdentityResolver()
        module = "subscriptions.infrastructure.kubernetes_cluster_identity.config"
        with patch(f"{module}.load_incluster_config", side_effect=ConfigException("no sa")), patch(
            f"{module}.load_kube_config", side_effect=ConfigException("no kubeconfig")
        ):
            with pytest.raises(ClusterIdentityLookupError):
                resolver.resolve()
