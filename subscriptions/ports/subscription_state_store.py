"""
Subscription state store port (interface).

The store holds exactly one SubscriptionState per process and only
ever replaces it as a whole.
"""
from abc import ABC, abstractmethod
from typing import Optional

from subscriptions.domain.subscription import SubscriptionDetails, SubscriptionState


class SubscriptionStateStore(ABC):
    """Abstract store for the process-wide subscription state."""

    @abstractmethod
    def read(self) -> SubscriptionState:
        """
        Return the current snapshot without blocking on writers.

        Returns:
            Immutable SubscriptionState
        """
        pass

    @abstractmethod
    def write(
        self,
        details: SubscriptionDetails,
        checked_at: int,
        activation_key: Optional[str] = None,
    ) -> SubscriptionState:
        """
        Atomically replace the state.

        Args:
            details: Verified subscription details
            checked_at: Trusted epoch seconds of the check
            activation_key: Key the subscription was acknowledged with

        Returns:
            The installed state
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Reset the state to empty."""
        pass

    @abstractmethod
    def clear_if(self, expected: SubscriptionState) -> bool:
        """
        Reset the state to empty only if it is still `expected`.

        Args:
            expected: Snapshot previously returned by `read`

        Returns:
            True if the state was cleared
        """
        pass
