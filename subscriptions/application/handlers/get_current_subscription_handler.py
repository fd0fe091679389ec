"""
GetCurrentSubscriptionHandler.

Handler returning the subscription installed in this process.
"""
import logging

from core.domain.exceptions import InvalidSubscriptionError
from subscriptions.application.dto.subscription_dto import SubscriptionDetailsDTO
from subscriptions.application.queries.get_current_subscription import (
    GetCurrentSubscriptionQuery,
)
from subscriptions.ports.subscription_state_store import SubscriptionStateStore

logger = logging.getLogger(__name__)


class GetCurrentSubscriptionHandler:
    """Handler for GetCurrentSubscriptionQuery."""

    def __init__(self, state_store: SubscriptionStateStore):
        """Initialize handler with the state store."""
        self.state_store = state_store

    async def handle(self, query: GetCurrentSubscriptionQuery) -> SubscriptionDetailsDTO:
        """
        Handle get current subscription query.

        Args:
            query: GetCurrentSubscriptionQuery

        Returns:
            SubscriptionDetailsDTO of the stored subscription

        Raises:
            InvalidSubscriptionError: If no subscription is installed
        """
        state = self.state_store.read()
        if state.is_empty:
            logger.warning("Current subscription requested with no subscription installed")
            raise InvalidSubscriptionError()
        return SubscriptionDetailsDTO.from_state(state)
