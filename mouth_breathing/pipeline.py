"""
Detection Pipeline Module
Runs geometry -> debounce -> alert gate once per frame
"""

from dataclasses import dataclass
from typing import Optional

from mouth_breathing.config import DetectorConfig
from mouth_breathing.geometry import classify_mouth
from mouth_breathing.debounce import StateDebouncer
from mouth_breathing.alert_gate import AlertGate


@dataclass
class FrameResult:
    """Per-frame pipeline output."""
    timestamp: float
    committed_state: bool
    fired: bool
    raw_state: bool = False
    ratio: Optional[float] = None
    face_present: bool = True


class BreathingPipeline:
    """
    Owns the debounce and alert state for a single tracked face.

    The caller must deliver frames one at a time with monotonic timestamps.
    Config is passed on every call so that live changes take effect on the
    next frame.
    """

    def __init__(self):
        """Initialize pipeline with mouth closed and no alert history."""
        self.debouncer = StateDebouncer()
        self.alert_gate = AlertGate()

    @property
    def committed_state(self):
        return self.debouncer.committed_state

    def update(self, landmarks, timestamp, config=None):
        """
        Process one frame of landmarks.

        Args:
            landmarks: LandmarkFrame (indexable sequence of points) or None
            timestamp: Current timestamp in seconds
            config: DetectorConfig (defaults if None)

        Returns:
            FrameResult
        """
        if config is None:
            config = DetectorConfig()

        ratio, raw = classify_mouth(landmarks, config.threshold_ratio)

        committed = self.debouncer.update(raw, timestamp, config.delay_seconds)

        # Alert eligibility uses the state committed on this frame
        fired = self.alert_gate.maybe_alert(
            committed,
            timestamp,
            cooldown_seconds=config.cooldown_seconds,
            alerts_enabled=config.alerts_enabled,
        )

        return FrameResult(
            timestamp=timestamp,
            committed_state=committed,
            fired=fired,
            raw_state=raw,
            ratio=ratio,
        )

    def process_missing_face(self, timestamp):
        """
        Report the current state for a frame with no detected face.

        Debounce and alert state are left untouched; no alert fires.

        Args:
            timestamp: Current timestamp in seconds

        Returns:
            FrameResult
        """
        return FrameResult(
            timestamp=timestamp,
            committed_state=self.debouncer.committed_state,
            fired=False,
            face_present=False,
        )

    def get_pending_duration(self, current_time):
        return self.debouncer.get_pending_duration(current_time)

    def get_cooldown_remaining(self, current_time, config=None):
        if config is None:
            config = DetectorConfig()
        return self.alert_gate.get_cooldown_remaining(current_time, config.cooldown_seconds)

    def reset(self, timestamp=None):
        """Reinitialize debounce and alert state (e.g. tracking re-acquired)."""
        self.debouncer.reset(timestamp)
        self.alert_gate.reset()
