from __future__ import annotations

import pytest
from pydantic import ValidationError

from chartframe.frame.models import FrameConfig, PlaybackState
from chartframe.frame.playback import next_step_transition, start_transition, stop_transition

PLAYING = PlaybackState(playing=True)


def _run(step_count: int, loop: bool, ticks: int, playback_steps: int = 1):
    state, step, trail = PLAYING, 0, []
    for _ in range(ticks):
        t = next_step_transition(state, step, step_count, playback_steps, loop)
        state = t.state
        if t.step is not None:
            step = t.step
        trail.append((step, state.playing))
    return trail


def test_progression_reaches_last_step_then_stops() -> None:
    trail = _run(step_count=4, loop=False, ticks=4)

    assert [s for s, _ in trail[:3]] == [1, 2, 3]
    assert all(playing for _, playing in trail[:3])
    assert trail[3] == (3, False)


def test_looping_wraps_without_stopping() -> None:
    trail = _run(step_count=3, loop=True, ticks=4)

    assert trail == [(1, True), (2, True), (0, True), (1, True)]


def test_overshoot_lands_on_last_step_first() -> None:
    t = next_step_transition(PLAYING, 3, 5, 3, loop=False)
    assert t.step == 4 and t.state.playing


def test_tick_is_noop_when_stopped_or_not_ready() -> None:
    stopped = PlaybackState(playing=False, immediate=True)
    assert next_step_transition(stopped, 0, 3, 1, loop=False).state == stopped
    waiting = PlaybackState(playing=True, immediate=True)
    t = next_step_transition(waiting, 0, 3, 1, loop=False, ready=False)
    assert t.state == waiting and t.step is None


def test_tick_clears_immediate_flag() -> None:
    t = next_step_transition(PlaybackState(True, True), 0, 3, 1, loop=False)
    assert t.state == PlaybackState(playing=True, immediate=False)


def test_tick_without_frames_stops() -> None:
    assert not next_step_transition(PLAYING, None, 0, 1, loop=True).state.playing


def test_start_from_last_step_jumps_to_first() -> None:
    from_stopped = start_transition(PlaybackState(), 2, 3)
    from_playing = start_transition(PLAYING, 2, 3)
    mid = start_transition(PlaybackState(), 1, 3)

    assert from_stopped == start_transition(PlaybackState(), None, 3)
    assert from_stopped.step == 0 and from_stopped.state == PlaybackState(True, False)
    assert from_playing.state.immediate is True
    assert mid.step is None and mid.state.playing


def test_stop_transition() -> None:
    assert stop_transition(PLAYING).state.playing is False


def test_frame_config_aliases_and_validation() -> None:
    cfg = FrameConfig.model_validate({"playbackSteps": 2, "speed": 0, "extrapolate": 3})
    assert cfg.playback_steps == 2 and cfg.speed == 0 and cfg.extrapolate == 3

    for bad in ({"speed": -1}, {"playbackSteps": 0}, {"extrapolate": -2}, {"colour": "red"}):
        with pytest.raises(ValidationError):
            FrameConfig.model_validate(bad)
