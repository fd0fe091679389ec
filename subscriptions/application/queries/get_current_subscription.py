"""
GetCurrentSubscriptionQuery.

Query for the subscription installed in this process.
"""
from dataclasses import dataclass


@dataclass
class GetCurrentSubscriptionQuery:
    """Query for the current subscription details."""

    pass
