"""
Pure playback transitions.

The engine owns scheduling; these functions only decide, given the current state and
position, what the next state and target step are. They never touch timers or config,
so the tick rules are testable without time passing.

Rules (per tick, effective only while playing and once data is ready):
- clear ``immediate``;
- advance by ``playback_steps`` when the result stays in range;
- on the last step, wrap to 0 when looping, otherwise stop;
- when a jump would overshoot, land exactly on the last step.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .models import PlaybackState

__all__ = [
    "Transition",
    "start_transition",
    "stop_transition",
    "next_step_transition",
]


@dataclass(frozen=True)
class Transition:
    """Next playback state and the step to move to (None: stay)."""

    state: PlaybackState
    step: float | None = None


def start_transition(state: PlaybackState, step: float | None, step_count: int) -> Transition:
    """
    Enter playing. From the last step (or with no position) jump to the first step first;
    the jump is marked immediate when playback was already running.
    """
    target: int | None = None
    if step is None or step >= step_count - 1:
        target = 0
        state = replace(state, immediate=state.playing)
    return Transition(replace(state, playing=True), target)


def stop_transition(state: PlaybackState) -> Transition:
    return Transition(replace(state, playing=False))


def next_step_transition(
    state: PlaybackState,
    step: float | None,
    step_count: int,
    playback_steps: int,
    loop: bool,
    *,
    ready: bool = True,
) -> Transition:
    """
    Decide the effect of one playback tick.

    Examples:
        >>> s = PlaybackState(playing=True)
        >>> next_step_transition(s, 1, 3, 1, loop=False).step
        2
        >>> next_step_transition(s, 2, 3, 1, loop=False).state.playing
        False
        >>> next_step_transition(s, 2, 3, 1, loop=True).step
        0
    """
    if not state.playing or not ready:
        return Transition(state)
    state = replace(state, immediate=False)
    if step_count == 0 or step is None:
        return Transition(replace(state, playing=False))
    nxt = step + playback_steps
    if nxt < step_count:
        return Transition(state, nxt)
    if step == step_count - 1:
        if loop:
            return Transition(state, 0)
        return Transition(replace(state, playing=False))
    # not yet on the last step: land there first
    return Transition(state, step_count - 1)
