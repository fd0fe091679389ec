"""
In-memory subscription state store.

Holds the single subscription state of this process. Nothing survives
a restart.
"""
import logging
import threading
import time
from typing import Optional

from core.metrics import subscription_valid
from subscriptions.domain.subscription import SubscriptionDetails, SubscriptionState
from subscriptions.ports.subscription_state_store import SubscriptionStateStore

logger = logging.getLogger(__name__)


class InMemorySubscriptionStateStore(SubscriptionStateStore):
    """
    Mutex-guarded store of an immutable SubscriptionState.

    Readers get the current snapshot reference without taking the lock;
    writers serialize on it and swap the whole state.
    """

    def __init__(self):
        """Initialize the store with an empty state."""
        self._lock = threading.Lock()
        self._state = SubscriptionState.empty()
        subscription_valid.set(0)

    def read(self) -> SubscriptionState:
        """Return the current snapshot."""
        return self._state

    def write(
        self,
        details: SubscriptionDetails,
        checked_at: int,
        activation_key: Optional[str] = None,
    ) -> SubscriptionState:
        """Install a new state in a single step."""
        state = SubscriptionState(
            details=details,
            last_checked_at=checked_at,
            activation_key=activation_key,
            refreshed_at_monotonic=time.monotonic(),
        )
        with self._lock:
            self._state = state
            subscription_valid.set(1)
        logger.info(
            "Subscription state installed",
            extra={"status": details.status.value, "checked_at": checked_at},
        )
        return state

    def clear(self) -> None:
        """Reset to the empty state."""
        with self._lock:
            self._state = SubscriptionState.empty()
            subscription_valid.set(0)
        logger.info("Subscription state cleared")

    def clear_if(self, expected: SubscriptionState) -> bool:
        """Reset to the empty state unless another writer replaced `expected`."""
        with self._lock:
            if self._state is not expected:
                return False
            self._state = SubscriptionState.empty()
            subscription_valid.set(0)
        logger.info("Subscription state cleared")
        return True
