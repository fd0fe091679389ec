"""
Subscription domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging

from subscriptions.ports.subscription_state_store import SubscriptionStateStore

logger = logging.getLogger(__name__)


class SubscriptionValidator:
    """Domain service deciding whether the product is currently licensed."""

    @staticmethod
    def is_valid(state_store: SubscriptionStateStore) -> bool:
        """
        Check the current subscription snapshot.

        A subscription observed in any status outside the acceptable set
        clears the store, so it is not trusted again until a fresh
        acknowledgment succeeds.

        Args:
            state_store: Process-wide subscription state store

        Returns:
            True if the stored subscription grants access
        """
        state = state_store.read()
        if state.details is None:
            return False

        if state.details.is_acceptable:
            return True

        logger.warning(
            "Subscription status no longer acceptable, resetting state",
            extra={"status": state.details.status.value},
        )
        if not state_store.clear_if(state):
            # A concurrent acknowledgment replaced the judged snapshot
            return SubscriptionValidator.is_valid(state_store)
        return False
