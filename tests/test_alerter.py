"""
Chime tests: synthesis shape and mixer handling (pygame mocked).
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pygame

from mouth_breathing import alerter
from mouth_breathing.alerter import ChimePlayer, synthesize_chime


# ── Synthesis ─────────────────────────────────────────────────

def test_chime_length_and_dtype():
    samples = synthesize_chime(sample_rate=22050, duration_s=0.5)
    assert samples.dtype == np.int16
    assert samples.shape == (11025,)


def test_chime_is_soft_and_fades():
    samples = synthesize_chime(sample_rate=22050).astype(np.float64)
    peak = np.abs(samples).max()
    # Peak gain 0.1 of full scale
    assert 0 < peak <= 0.1 * 32767 + 1
    # Starts silent, ends near silent
    assert abs(samples[0]) < 1
    assert np.abs(samples[-200:]).max() < 0.01 * 32767


def test_chime_peak_is_near_end_of_attack():
    sr = 22050
    samples = np.abs(synthesize_chime(sample_rate=sr).astype(np.float64))
    attack_end = int(0.05 * sr)
    assert samples[:attack_end // 4].max() < samples[attack_end - 200:attack_end + 200].max()


def test_constant_frequency_chime():
    samples = synthesize_chime(sample_rate=8000, start_hz=440.0, end_hz=440.0)
    assert samples.shape == (4000,)


# ── Player ────────────────────────────────────────────────────

def test_disabled_player_never_touches_mixer():
    with patch.object(alerter.pygame.mixer, "init") as init:
        player = ChimePlayer(enabled=False)
    init.assert_not_called()
    assert player.play() is False


def test_mixer_failure_disables_audio():
    with patch.object(alerter.pygame.mixer, "init", side_effect=pygame.error("no device")):
        player = ChimePlayer()
    assert player.audio_enabled is False
    assert player.play() is False


def test_play_counts_and_uses_sound():
    sound = MagicMock()
    with patch.object(alerter.pygame.mixer, "init"), \
            patch.object(alerter.pygame.mixer, "get_init", return_value=(22050, -16, 2)), \
            patch.object(alerter.pygame.mixer, "Sound", return_value=sound) as sound_cls:
        player = ChimePlayer()

    # Stereo mixer gets two interleaved channels
    buffer = sound_cls.call_args.kwargs["buffer"]
    assert len(buffer) == 11025 * 2 * 2

    assert player.play() is True
    assert player.play() is True
    assert sound.play.call_count == 2
    assert player.play_count == 2


def test_playback_error_is_reported_not_raised():
    sound = MagicMock()
    sound.play.side_effect = pygame.error("busy")
    with patch.object(alerter.pygame.mixer, "init"), \
            patch.object(alerter.pygame.mixer, "get_init", return_value=(22050, -16, 1)), \
            patch.object(alerter.pygame.mixer, "Sound", return_value=sound):
        player = ChimePlayer()
    assert player.play() is False
    assert player.play_count == 0
