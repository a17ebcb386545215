"""
Session Statistics Module
Accumulates per-session counters from the pipeline's frame results
"""


class SessionStats:
    """
    Tracks what happened during one detector run.

    Counts:
    - Frames processed / frames without a face
    - Open episodes (committed state going closed -> open)
    - Total time spent with the mouth open
    - Chimes fired
    """

    def __init__(self, start_time):
        self.start_time = start_time
        self.last_timestamp = start_time
        self.frame_count = 0
        self.no_face_frames = 0
        self.open_episodes = 0
        self.open_seconds = 0.0
        self.alert_count = 0
        self._last_state = False

    @property
    def committed_state(self):
        """Committed state seen on the last recorded frame."""
        return self._last_state

    def update(self, result):
        """
        Fold one FrameResult into the counters.

        Args:
            result: FrameResult from BreathingPipeline

        Returns:
            True if the committed state changed on this frame
        """
        self.frame_count += 1
        if not result.face_present:
            self.no_face_frames += 1

        # Time since the previous frame belongs to the previous state
        if self._last_state:
            self.open_seconds += max(0.0, result.timestamp - self.last_timestamp)

        changed = result.committed_state != self._last_state
        if changed and result.committed_state:
            self.open_episodes += 1

        if result.fired:
            self.alert_count += 1

        self._last_state = result.committed_state
        self.last_timestamp = result.timestamp
        return changed

    def reset_state(self, timestamp=None):
        """
        Forget the last committed state (pipeline was reset).

        Args:
            timestamp: Reset time; open time up to it is still counted

        Returns:
            Committed state that was cleared
        """
        previous = self._last_state
        if timestamp is not None:
            if previous:
                self.open_seconds += max(0.0, timestamp - self.last_timestamp)
            self.last_timestamp = timestamp
        self._last_state = False
        return previous

    def duration(self):
        return max(0.0, self.last_timestamp - self.start_time)

    def open_percentage(self):
        """Percentage of the session spent with the mouth open (0-100)."""
        duration = self.duration()
        if duration <= 0:
            return 0.0
        return min(100.0, self.open_seconds / duration * 100.0)

    def summary(self):
        return {
            "duration_seconds": round(self.duration(), 2),
            "frames": self.frame_count,
            "no_face_frames": self.no_face_frames,
            "open_episodes": self.open_episodes,
            "open_seconds": round(self.open_seconds, 2),
            "open_percentage": round(self.open_percentage(), 2),
            "alerts": self.alert_count,
        }
