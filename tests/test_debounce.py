"""
Debounce tests: hysteresis, continuous persistence and reset.
"""

from __future__ import annotations

from mouth_breathing.debounce import DebounceState, StateDebouncer


def _run(debouncer: StateDebouncer, frames, delay: float) -> list:
    """Feed (timestamp, raw) pairs and collect the committed state per frame."""
    return [debouncer.update(raw, ts, delay) for ts, raw in frames]


# ── Initial state ─────────────────────────────────────────────

def test_starts_closed_with_nothing_pending():
    d = StateDebouncer()
    assert d.state == DebounceState(committed_state=False, pending_state=False, pending_since=None)
    assert d.get_pending_duration(100.0) == 0.0


# ── Zero delay ────────────────────────────────────────────────

def test_zero_delay_flips_on_first_differing_frame():
    d = StateDebouncer()
    assert d.update(True, 0.0, 0.0) is True
    assert d.update(False, 0.1, 0.0) is False
    assert d.update(True, 0.2, 0.0) is True


def test_zero_delay_follows_every_change():
    d = StateDebouncer()
    raws = [True, False, False, True, False]
    committed = _run(d, [(i * 0.1, r) for i, r in enumerate(raws)], delay=0.0)
    assert committed == raws


# ── Positive delay ────────────────────────────────────────────

def test_short_glitch_never_commits():
    d = StateDebouncer()
    frames = [(0.0, False), (1.0, True), (1.5, True), (1.9, False), (2.5, False)]
    assert _run(d, frames, delay=1.0) == [False] * 5


def test_commits_when_elapsed_first_reaches_delay():
    d = StateDebouncer()
    frames = [(10.0, True), (10.5, True), (10.75, True), (11.0, True), (11.5, True)]
    assert _run(d, frames, delay=1.0) == [False, False, False, True, True]


def test_decimal_timestamps_commit_when_delay_reached():
    # 0.3 - 0.1 evaluates just below 0.2 in binary floating point
    d = StateDebouncer()
    assert d.update(True, 0.1, 0.2) is False
    assert d.update(True, 0.3, 0.2) is True


def test_frame_clock_commits_on_exact_frame():
    # 30 fps frame-index clock, 0.5 s delay: commits on frame 15 exactly
    d = StateDebouncer()
    committed = _run(d, [(i / 30, True) for i in range(1, 20)], delay=0.5)
    assert committed.index(True) == 15


def test_oscillation_restarts_pending_timer():
    # Total time spent open exceeds the delay, but never continuously
    d = StateDebouncer()
    frames = []
    t = 0.0
    for _ in range(10):
        frames.append((t, True))
        frames.append((t + 0.75, True))
        frames.append((t + 0.9, False))
        t += 1.0
    assert not any(_run(d, frames, delay=1.0))


def test_closing_is_debounced_too():
    d = StateDebouncer()
    d.update(True, 0.0, 0.0)
    assert d.committed_state is True

    frames = [(1.0, False), (1.5, False), (2.0, False), (2.9, False)]
    assert _run(d, frames, delay=2.0) == [True, True, True, True]
    assert d.update(False, 3.0, 2.0) is False


def test_confirmation_frames_reset_pending_since():
    d = StateDebouncer()
    d.update(False, 5.0, 1.0)
    assert d.state.pending_state is False
    assert d.state.pending_since == 5.0


def test_delay_change_takes_effect_on_next_frame():
    d = StateDebouncer()
    d.update(True, 0.0, 5.0)
    assert d.update(True, 1.0, 5.0) is False
    # Delay lowered live: the running episode qualifies immediately
    assert d.update(True, 1.1, 1.0) is True


# ── Helpers ───────────────────────────────────────────────────

def test_pending_duration_tracks_running_episode():
    d = StateDebouncer()
    d.update(True, 2.0, 3.0)
    assert d.get_pending_duration(3.5) == 1.5
    d.update(False, 4.0, 3.0)
    assert d.get_pending_duration(4.5) == 0.0


def test_reset_returns_to_closed():
    d = StateDebouncer()
    d.update(True, 0.0, 0.0)
    d.reset(7.0)
    assert d.committed_state is False
    assert d.pending_state is False
    assert d.state.pending_since == 7.0
