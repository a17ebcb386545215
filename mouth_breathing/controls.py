"""
Controls Module
OpenCV trackbars and keyboard shortcuts that edit the live DetectorConfig
"""

import cv2

from mouth_breathing.config import (
    THRESHOLD_MIN,
    THRESHOLD_MAX,
    THRESHOLD_STEP,
    DELAY_MAX_SECONDS,
    DELAY_STEP_SECONDS
)

SENSITIVITY_TRACKBAR = "Sensitivity x0.01"
DELAY_TRACKBAR = "Delay x0.5s"
SOUND_TRACKBAR = "Sound"

# Keyboard actions returned by handle_key()
ACTION_NONE = None
ACTION_QUIT = "quit"
ACTION_RESET = "reset"
ACTION_TOGGLE_SOUND = "toggle_sound"


def threshold_to_position(threshold):
    clamped = min(max(threshold, THRESHOLD_MIN), THRESHOLD_MAX)
    return int(round(clamped / THRESHOLD_STEP))


def position_to_threshold(position):
    # Trackbars always start at 0; keep the ratio inside the slider range
    value = position * THRESHOLD_STEP
    return round(min(max(value, THRESHOLD_MIN), THRESHOLD_MAX), 4)


def delay_to_position(delay_seconds):
    clamped = min(max(delay_seconds, 0.0), DELAY_MAX_SECONDS)
    return int(round(clamped / DELAY_STEP_SECONDS))


def position_to_delay(position):
    return min(max(position, 0), int(DELAY_MAX_SECONDS / DELAY_STEP_SECONDS)) * DELAY_STEP_SECONDS


class ControlPanel:
    """
    Trackbars on the preview window bound to a DetectorConfig.

    Trackbar callbacks write straight into the config object, so the next
    frame processed by the pipeline sees the new values.
    """

    def __init__(self, window_name, config):
        """
        Args:
            window_name: Name of an existing (or to be created) OpenCV window
            config: DetectorConfig edited in place
        """
        self.window_name = window_name
        self.config = config

    def attach(self):
        """Create the window and its trackbars."""
        cv2.namedWindow(self.window_name)
        cv2.createTrackbar(
            SENSITIVITY_TRACKBAR, self.window_name,
            threshold_to_position(self.config.threshold_ratio),
            int(round(THRESHOLD_MAX / THRESHOLD_STEP)),
            self.on_sensitivity,
        )
        cv2.createTrackbar(
            DELAY_TRACKBAR, self.window_name,
            delay_to_position(self.config.delay_seconds),
            int(DELAY_MAX_SECONDS / DELAY_STEP_SECONDS),
            self.on_delay,
        )
        cv2.createTrackbar(
            SOUND_TRACKBAR, self.window_name,
            1 if self.config.alerts_enabled else 0,
            1,
            self.on_sound,
        )

    def on_sensitivity(self, position):
        self.config.threshold_ratio = position_to_threshold(position)

    def on_delay(self, position):
        self.config.delay_seconds = position_to_delay(position)

    def on_sound(self, position):
        self.config.alerts_enabled = bool(position)

    def toggle_sound(self, sync_trackbar=True):
        """Flip the sound switch and keep the trackbar in step."""
        self.config.alerts_enabled = not self.config.alerts_enabled
        if sync_trackbar:
            cv2.setTrackbarPos(SOUND_TRACKBAR, self.window_name, int(self.config.alerts_enabled))
        return self.config.alerts_enabled

    def handle_key(self, key, sync_trackbar=True):
        """
        Map a cv2.waitKey() code to an action.

        Args:
            key: Key code (already masked with 0xFF)
            sync_trackbar: Update the sound trackbar when toggling

        Returns:
            One of the ACTION_* constants
        """
        if key == ord('q'):
            return ACTION_QUIT
        if key == ord('r'):
            return ACTION_RESET
        if key == ord('s'):
            self.toggle_sound(sync_trackbar=sync_trackbar)
            return ACTION_TOGGLE_SOUND
        return ACTION_NONE
