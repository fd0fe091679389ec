"""
Cluster identity resolver port (interface).

The cluster has no identifier of its own, so an immutable system
namespace's UID stands in for it.
"""
from abc import ABC, abstractmethod

from core.domain.value_objects import ClusterIdentity


class ClusterIdentityResolver(ABC):
    """
    Abstract resolver for the license-binding cluster identity.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def resolve(self) -> ClusterIdentity:
        """
        Resolve the identity of the hosting cluster.

        Returns:
            ClusterIdentity of the cluster

        Raises:
            ClusterIdentityNotFoundError: If the identity namespace is missing
            ClusterIdentityLookupError: For any other lookup failure
        """
        pass
