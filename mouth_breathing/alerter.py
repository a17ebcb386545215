"""
Audio Alert Module
Synthesizes a soft chime and plays it through the pygame mixer
"""

import logging

import numpy as np
import pygame

from mouth_breathing.config import (
    CHIME_SAMPLE_RATE,
    CHIME_START_HZ,
    CHIME_END_HZ,
    CHIME_DURATION_SECONDS,
    CHIME_ATTACK_SECONDS,
    CHIME_PEAK_GAIN,
    CHIME_FLOOR_GAIN
)

logger = logging.getLogger(__name__)


def synthesize_chime(sample_rate=CHIME_SAMPLE_RATE,
                     start_hz=CHIME_START_HZ,
                     end_hz=CHIME_END_HZ,
                     duration_s=CHIME_DURATION_SECONDS,
                     attack_s=CHIME_ATTACK_SECONDS,
                     peak_gain=CHIME_PEAK_GAIN,
                     floor_gain=CHIME_FLOOR_GAIN):
    """
    Build a soft "ding": sine wave sliding exponentially from start_hz to
    end_hz, with a linear attack and an exponential decay.

    Args:
        sample_rate: Samples per second
        start_hz: Frequency at the start of the tone
        end_hz: Frequency at the end of the tone
        duration_s: Tone length in seconds
        attack_s: Linear fade-in length in seconds
        peak_gain: Gain reached at the end of the attack (0..1)
        floor_gain: Gain reached at the end of the decay (0..1)

    Returns:
        Mono int16 numpy array
    """
    n_samples = max(1, int(duration_s * sample_rate))
    t = np.arange(n_samples, dtype=np.float64) / sample_rate

    # Phase of an exponential sweep is the integral of f(t) = f0 * r^(t/T)
    ratio = end_hz / start_hz
    if ratio == 1.0:
        phase = 2.0 * np.pi * start_hz * t
    else:
        k = np.log(ratio) / duration_s
        phase = 2.0 * np.pi * start_hz * (np.exp(k * t) - 1.0) / k
    wave = np.sin(phase)

    envelope = np.empty(n_samples, dtype=np.float64)
    attack = t < attack_s
    envelope[attack] = peak_gain * t[attack] / attack_s
    decay_t = (t[~attack] - attack_s) / max(duration_s - attack_s, 1e-9)
    envelope[~attack] = peak_gain * (floor_gain / peak_gain) ** decay_t

    return (wave * envelope * 32767).astype(np.int16)


class ChimePlayer:
    """
    Plays the alert chime.

    Playback is non-blocking (pygame mixes on its own thread), so calling
    play() from the frame loop never stalls detection.
    """

    def __init__(self, enabled=True):
        """
        Initialize pygame mixer and pre-render the chime.

        Args:
            enabled: If False, never touch the audio device
        """
        self.audio_enabled = False
        self.sound = None
        self.play_count = 0

        if not enabled:
            return

        try:
            pygame.mixer.init(frequency=CHIME_SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            logger.warning("Audio alerts disabled (pygame mixer not available): %s", e)
            return

        self.sound = pygame.mixer.Sound(buffer=self._render_for_mixer().tobytes())
        self.audio_enabled = True

    @staticmethod
    def _render_for_mixer():
        mixer_format = pygame.mixer.get_init()
        if mixer_format:
            sample_rate, _size, channels = mixer_format
        else:
            sample_rate, channels = CHIME_SAMPLE_RATE, 1
        samples = synthesize_chime(sample_rate=sample_rate)
        if channels > 1:
            samples = np.repeat(samples[:, np.newaxis], channels, axis=1)
        return np.ascontiguousarray(samples)

    def play(self):
        """
        Play the chime once.

        Returns:
            True if playback was started, False otherwise
        """
        if not self.audio_enabled or self.sound is None:
            return False

        try:
            self.sound.play()
        except pygame.error as e:
            logger.error("Audio alert error: %s", e)
            return False

        self.play_count += 1
        return True

    def close(self):
        """Release the audio device."""
        if self.audio_enabled:
            pygame.mixer.quit()
            self.audio_enabled = False
