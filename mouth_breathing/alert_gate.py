"""
Alert Gate Module
Rate-limits the audible alert while the mouth stays open
"""

from dataclasses import dataclass
from typing import Optional

from mouth_breathing.config import ALERT_COOLDOWN_SECONDS
from mouth_breathing.debounce import has_elapsed


@dataclass
class AlertState:
    """Timestamp of the last fired alert (None if never fired)."""
    last_fired_at: Optional[float] = None


class AlertGate:
    """
    Decides whether an alert fires on the current frame.

    Cooldown is measured from the last fire only. Leaving and re-entering the
    open state does not re-arm the gate.
    """

    def __init__(self):
        """Initialize alert gate."""
        self.state = AlertState()

    @property
    def last_fired_at(self):
        return self.state.last_fired_at

    def maybe_alert(self, committed_state, timestamp,
                    cooldown_seconds=ALERT_COOLDOWN_SECONDS, alerts_enabled=True):
        """
        Decide whether to fire an alert and record it.

        Args:
            committed_state: Debounced state (True = mouth open)
            timestamp: Current timestamp in seconds
            cooldown_seconds: Minimum seconds between alerts
            alerts_enabled: Master switch for alerts

        Returns:
            True if an alert fires on this frame, False otherwise
        """
        if not alerts_enabled or not committed_state:
            return False

        last = self.state.last_fired_at
        if last is None or has_elapsed(timestamp - last, cooldown_seconds):
            self.state.last_fired_at = timestamp
            return True

        return False

    def get_cooldown_remaining(self, current_time, cooldown_seconds=ALERT_COOLDOWN_SECONDS):
        """
        Get seconds until the gate can fire again.

        Args:
            current_time: Current timestamp
            cooldown_seconds: Minimum seconds between alerts

        Returns:
            Remaining seconds (0.0 if ready)
        """
        last = self.state.last_fired_at
        if last is None:
            return 0.0
        return float(max(0.0, cooldown_seconds - (current_time - last)))

    def reset(self):
        """Forget the last fired alert."""
        self.state = AlertState()
