"""
Remote license client port (interface).

Both calls return the raw response body; parsing and signature
verification belong to the application layer.
"""
from abc import ABC, abstractmethod

ACKNOWLEDGMENT_PATH = "/api/v1/license/acknowledgment"
CURRENT_TIMESTAMP_PATH = "/api/v1/timestamp/current"


class LicenseClient(ABC):
    """Abstract client for the remote licensing service."""

    @abstractmethod
    def acknowledge(self, activation_key: str, cluster_id: str) -> bytes:
        """
        Exchange an activation key for a signed license envelope.

        Args:
            activation_key: User-supplied activation key
            cluster_id: Identity of the hosting cluster

        Returns:
            Raw response body

        Raises:
            LicenseServiceError: On transport failure or non-200 status
            SubscriptionConflictError: If the key is bound to another cluster
        """
        pass

    @abstractmethod
    def current_timestamp(self) -> bytes:
        """
        Fetch the signed authoritative current time.

        Returns:
            Raw response body

        Raises:
            LicenseServiceError: On transport failure or non-200 status
        """
        pass
