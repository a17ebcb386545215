"""
Driver tests: argument handling and per-frame side effects.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mouth_breathing import main as driver
from mouth_breathing.config import DetectorConfig
from mouth_breathing.pipeline import FrameResult
from mouth_breathing.session_stats import SessionStats


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ("MOUTH_OPEN_THRESHOLD", "DETECTION_DELAY_SECONDS", "ALERT_COOLDOWN_SECONDS", "SOUND_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_cli_overrides_environment(monkeypatch):
    monkeypatch.setenv("DETECTION_DELAY_SECONDS", "3")
    args = driver.build_parser().parse_args(["--threshold", "0.1", "--cooldown", "30", "--no-sound"])
    config = driver.build_config(args)
    assert config == DetectorConfig(threshold_ratio=0.1, delay_seconds=3.0,
                                    cooldown_seconds=30.0, alerts_enabled=False)


def test_cli_rejects_negative_delay():
    args = driver.build_parser().parse_args(["--delay", "-2"])
    with pytest.raises(ValueError):
        driver.build_config(args)


def test_handle_result_plays_once_per_fire_and_logs():
    chime = MagicMock()
    cloud = MagicMock()
    stats = SessionStats(0.0)
    config = DetectorConfig()

    driver.handle_result(FrameResult(1.0, True, True, True, 0.08), config, chime, stats, cloud)
    driver.handle_result(FrameResult(2.0, True, False, True, 0.08), config, chime, stats, cloud)

    chime.play.assert_called_once()
    cloud.log_state_change.assert_called_once_with(False, True, 0.08)
    cloud.log_alert.assert_called_once_with(0.08, 60.0)
    assert cloud.log_snapshot.call_count == 2
    assert stats.alert_count == 1


def test_handle_result_without_cloud():
    chime = MagicMock()
    stats = SessionStats(0.0)
    driver.handle_result(FrameResult(1.0, False, False), DetectorConfig(), chime, stats, None)
    chime.play.assert_not_called()
    assert stats.frame_count == 1


def test_reset_while_open_logs_closing_transition():
    pipeline = MagicMock()
    cloud = MagicMock()
    stats = SessionStats(0.0)
    stats.update(FrameResult(1.0, True, False, True, 0.08))

    driver.reset_detector(pipeline, stats, cloud, 3.0)

    pipeline.reset.assert_called_once_with(3.0)
    cloud.log_state_change.assert_called_once_with(True, False, None)
    assert stats.committed_state is False
    assert stats.open_seconds == 2.0


def test_reset_while_closed_logs_nothing():
    cloud = MagicMock()
    stats = SessionStats(0.0)
    stats.update(FrameResult(1.0, False, False))

    driver.reset_detector(MagicMock(), stats, cloud, 2.0)
    cloud.log_state_change.assert_not_called()


def test_main_feeds_monotonic_clock_to_pipeline(monkeypatch):
    frame = MagicMock()
    frame.size = 1
    cap = MagicMock()
    cap.read.return_value = (True, frame)
    pipeline = MagicMock()
    pipeline.process_missing_face.return_value = FrameResult(500.0, False, False, face_present=False)
    detector = MagicMock()
    detector.detect.return_value = None

    monkeypatch.setattr(driver, "open_camera", lambda index: cap)
    monkeypatch.setattr(driver, "FaceDetector", lambda: detector)
    monkeypatch.setattr(driver, "BreathingPipeline", lambda: pipeline)
    monkeypatch.setattr(driver, "ChimePlayer", MagicMock)
    monkeypatch.setattr(driver.time, "monotonic", lambda: 500.0)
    monkeypatch.setattr(driver.time, "time", lambda: 1.7e9)

    driver.main(["--headless", "--max-frames", "1", "--no-mirror"])

    pipeline.process_missing_face.assert_called_once_with(500.0)
    cap.release.assert_called_once()
