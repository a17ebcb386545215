"""
Configuration file for all mouth breathing detection thresholds and settings
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Mouth open ratio = (upper lip bottom <-> lower lip top) / (forehead <-> chin)
# Typical closed mouth ~ 0.00-0.02, relaxed open mouth ~ 0.06-0.10.
MOUTH_OPEN_THRESHOLD = 0.05           # ratio > threshold => mouth open
THRESHOLD_MIN = 0.01                  # Sensitivity slider range (high sensitivity)
THRESHOLD_MAX = 0.20                  # Sensitivity slider range (low sensitivity)
THRESHOLD_STEP = 0.01

# Debounce: raw state must persist continuously this long before it is committed
DETECTION_DELAY_SECONDS = 0.0         # 0 => instant, no hysteresis
DELAY_MAX_SECONDS = 5.0
DELAY_STEP_SECONDS = 0.5
TIMESTAMP_TOLERANCE_SECONDS = 1e-9    # Float slack for "elapsed reached delay/cooldown"

# Audible alert
SOUND_ENABLED = True
ALERT_COOLDOWN_SECONDS = 60.0         # At most one chime per minute

# MediaPipe Face Mesh landmark indices
UPPER_LIP_BOTTOM_INDEX = 13
LOWER_LIP_TOP_INDEX = 14
FOREHEAD_INDEX = 10                   # Top of forehead
CHIN_INDEX = 152

# Chime synthesis (soft "ding": sine sweep with short attack and decay)
CHIME_SAMPLE_RATE = 22050
CHIME_START_HZ = 880.0                # A5
CHIME_END_HZ = 440.0                  # A4
CHIME_DURATION_SECONDS = 0.5
CHIME_ATTACK_SECONDS = 0.05
CHIME_PEAK_GAIN = 0.1
CHIME_FLOOR_GAIN = 0.001

# Camera settings
CAMERA_INDEX = 0
FRAME_WIDTH = 640
FRAME_HEIGHT = 480
TARGET_FPS = 30
MIRROR_FRAME = True                   # Selfie view

# Camera backend (mainly for Windows reliability)
# Options: "AUTO", "DSHOW", "MSMF"
CAMERA_BACKEND = "AUTO"

# How many camera indices to probe if CAMERA_INDEX fails (0..N-1)
CAMERA_PROBE_COUNT = 4

# Visualization settings
WINDOW_NAME = "Mouth Breathing Detector"
DRAW_MOUTH_LANDMARKS = True           # Draw the four reference points used for the ratio

# Console status line every N frames
STATUS_PRINT_INTERVAL_FRAMES = 30

# Supabase Cloud Integration Configuration
# Set these via environment variables: SUPABASE_URL and SUPABASE_KEY
# Or pass them when initializing SupabaseLogger
SUPABASE_ENABLED = False  # Set to True to enable cloud logging
SUPABASE_SNAPSHOT_INTERVAL_SECONDS = 5  # Log snapshot every N seconds (reduces data volume)


@dataclass
class DetectorConfig:
    """
    Live detector settings read by the pipeline on every frame.

    The UI may replace or mutate this between frames; the pipeline never
    caches any of its values.
    """

    threshold_ratio: float = MOUTH_OPEN_THRESHOLD
    delay_seconds: float = DETECTION_DELAY_SECONDS
    cooldown_seconds: float = ALERT_COOLDOWN_SECONDS
    alerts_enabled: bool = SOUND_ENABLED

    def validate(self):
        """
        Check value ranges.

        Raises:
            ValueError: If any value is out of range
        """
        if self.threshold_ratio <= 0:
            raise ValueError(f"threshold_ratio must be > 0, got {self.threshold_ratio}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")
        if self.cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {self.cooldown_seconds}")
        return self

    @classmethod
    def from_defaults(cls):
        return cls()


def _env_float(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config_from_env(dotenv_path=None):
    """
    Build a DetectorConfig from environment variables (and a .env file).

    Recognized variables:
        MOUTH_OPEN_THRESHOLD, DETECTION_DELAY_SECONDS,
        ALERT_COOLDOWN_SECONDS, SOUND_ENABLED

    Args:
        dotenv_path: Optional explicit path to a .env file

    Returns:
        Validated DetectorConfig

    Raises:
        ValueError: If a variable cannot be parsed or is out of range
    """
    load_dotenv(dotenv_path)
    config = DetectorConfig(
        threshold_ratio=_env_float("MOUTH_OPEN_THRESHOLD", MOUTH_OPEN_THRESHOLD),
        delay_seconds=_env_float("DETECTION_DELAY_SECONDS", DETECTION_DELAY_SECONDS),
        cooldown_seconds=_env_float("ALERT_COOLDOWN_SECONDS", ALERT_COOLDOWN_SECONDS),
        alerts_enabled=_env_bool("SOUND_ENABLED", SOUND_ENABLED),
    )
    return config.validate()
