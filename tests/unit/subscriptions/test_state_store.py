"""
Unit tests for InMemorySubscriptionStateStore.
"""
import threading

from core.domain.value_objects import SubscriptionStatus
from core.metrics import subscription_valid
from subscriptions.domain.subscription import SubscriptionDetails


def make_details(name, status=SubscriptionStatus.ACTIVE):
    return SubscriptionDetails(status=status, name=name, start_date=1, end_date=2)


class TestInMemorySubscriptionStateStore:
    """Tests for InMemorySubscriptionStateStore."""

    def test_starts_empty(self, state_store):
        """Test a new store holds no subscription."""
        state = state_store.read()
        assert state.is_empty
        assert state.last_checked_at == 0
        assert state.activation_key is None

    def test_write_replaces_state(self, state_store):
        """Test write installs details, check time and key together."""
        details = make_details("Pro")
        state_store.write(details, 1700000000, "ABC123")

        state = state_store.read()
        assert state.details == details
        assert state.last_checked_at == 1700000000
        assert state.activation_key == "ABC123"
        assert state.refreshed_at_monotonic > 0

    def test_clear(self, state_store):
        """Test clear resets to the empty state."""
        state_store.write(make_details("Pro"), 1700000000, "ABC123")
        state_store.clear()
        assert state_store.read().is_empty

    def test_snapshots_are_stable(self, state_store):
        """Test a read snapshot is unaffected by later writes."""
        state_store.write(make_details("first"), 1, "k1")
        snapshot = state_store.read()
        state_store.write(make_details("second"), 2, "k2")
        assert snapshot.details.name == "first"
        assert snapshot.last_checked_at == 1

    def test_concurrent_writers_never_mix_states(self, state_store):
        """Test concurrent writers leave one writer's complete state."""
        def writer(index):
            for _ in range(200):
                state_store.write(make_details(f"sub-{index}"), index, f"key-{index}")

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        state = state_store.read()
        index = state.last_checked_at
        assert state.details.name == f"sub-{index}"
        assert state.activation_key == f"key-{index}"

    def test_clear_if_current(self, state_store):
        """Test clear_if resets the snapshot it was given."""
        state = state_store.write(make_details("Pro"), 1, "k1")
        assert state_store.clear_if(state) is True
        assert state_store.read().is_empty

    def test_clear_if_replaced(self, state_store):
        """Test clear_if keeps a state written after the expected snapshot."""
        stale = state_store.write(make_details("old"), 1, "k1")
        state_store.write(make_details("new"), 2, "k2")

        assert state_store.clear_if(stale) is False
        assert state_store.read().details.name == "new"

    def test_gauge_follows_state(self, state_store):
        """Test the subscription_valid gauge tracks writes and resets."""
        state = state_store.write(make_details("Pro"), 1, "k1")
        assert subscription_valid._value.get() == 1
        state_store.clear_if(state)
        assert subscription_valid._value.get() == 0
