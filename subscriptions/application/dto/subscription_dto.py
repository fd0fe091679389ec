"""
Subscription DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Optional

from subscriptions.domain.subscription import SubscriptionState


@dataclass
class SubscriptionDetailsDTO:
    """DTO for the current subscription snapshot."""

    status: str
    name: str
    start_date: int
    end_date: int
    canceled_at: Optional[int]
    trial_start_at: Optional[int]
    trial_end_at: Optional[int]
    nodes_limit: int
    last_checked_at: int

    @classmethod
    def from_state(cls, state: SubscriptionState) -> "SubscriptionDetailsDTO":
        """Build the DTO from a non-empty state snapshot."""
        details = state.details
        return cls(
            status=details.status.value,
            name=details.name,
            start_date=details.start_date,
            end_date=details.end_date,
            canceled_at=details.canceled_at,
            trial_start_at=details.trial_start_at,
            trial_end_at=details.trial_end_at,
            nodes_limit=details.nodes_limit,
            last_checked_at=state.last_checked_at,
        )
