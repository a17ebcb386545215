"""
Debounce Module
Turns the noisy per-frame open/closed classification into a stable state
"""

import math
from dataclasses import dataclass
from typing import Optional

from mouth_breathing.config import DETECTION_DELAY_SECONDS, TIMESTAMP_TOLERANCE_SECONDS


def has_elapsed(elapsed, duration):
    """True once elapsed seconds reach duration (inclusive, float tolerant)."""
    return elapsed >= duration or math.isclose(elapsed, duration, abs_tol=TIMESTAMP_TOLERANCE_SECONDS)


@dataclass
class DebounceState:
    """Mutable debounce state carried across frames."""
    committed_state: bool = False
    pending_state: bool = False
    pending_since: Optional[float] = None


class StateDebouncer:
    """
    Two-state hysteresis with a staging slot.

    A raw value that differs from the committed state becomes pending and is
    committed only once it has persisted continuously for delay_seconds.
    Any frame agreeing with the committed state cancels the pending change.
    """

    def __init__(self):
        """Initialize debouncer (mouth closed, nothing pending)."""
        self.state = DebounceState()

    @property
    def committed_state(self):
        return self.state.committed_state

    @property
    def pending_state(self):
        return self.state.pending_state

    def update(self, raw, timestamp, delay_seconds=DETECTION_DELAY_SECONDS):
        """
        Update debounce state with a new raw classification.

        Args:
            raw: Raw per-frame classification (True = mouth open)
            timestamp: Current timestamp in seconds
            delay_seconds: Required continuous persistence before committing

        Returns:
            Committed state after this frame
        """
        state = self.state

        if raw == state.committed_state:
            # Confirmation: nothing in flight
            state.pending_state = raw
            state.pending_since = timestamp
            return state.committed_state

        if raw != state.pending_state:
            # New episode
            state.pending_state = raw
            state.pending_since = timestamp

        if has_elapsed(timestamp - state.pending_since, delay_seconds):
            state.committed_state = raw

        return state.committed_state

    def get_pending_duration(self, current_time):
        """
        Get how long the current differing value has persisted.

        Args:
            current_time: Current timestamp

        Returns:
            Duration in seconds (0.0 if no change is pending)
        """
        state = self.state
        if state.pending_state == state.committed_state or state.pending_since is None:
            return 0.0
        return float(max(0.0, current_time - state.pending_since))

    def reset(self, timestamp=None):
        """Reset to the initial state (mouth closed, nothing pending)."""
        self.state = DebounceState(pending_since=timestamp)
