from __future__ import annotations

from datetime import datetime

import pytest

from chartframe.frame.step_scale import StepScale


@pytest.mark.parametrize(
    "values",
    [
        [2000, 2001, 2003, 2010],
        [datetime(2000, 1, 1), datetime(2001, 1, 1), datetime(2004, 1, 1)],
        ["q1", "q2", "q3"],
        [0.5],
    ],
)
def test_step_scale_round_trip(values) -> None:
    scale = StepScale(values)
    for i in scale.range:
        assert scale(scale.invert(i)) == i


def test_fractional_steps_between_members() -> None:
    scale = StepScale([2000, 2001, 2003])

    assert scale(2002) == 1.5
    assert scale.invert(1.5) == 2002
    assert scale(1990) == 0  # clamped
    assert scale(2050) == 2
    assert scale.invert(-3) == 2000
    assert scale.invert(99) == 2003


def test_temporal_fractional_invert_returns_datetime() -> None:
    scale = StepScale([datetime(2000, 1, 1), datetime(2000, 1, 11)])

    assert scale.invert(0.5) == datetime(2000, 1, 6)
    assert scale(datetime(2000, 1, 6)) == 0.5


def test_discrete_step_scale() -> None:
    scale = StepScale(["q1", "q2", "q3"])

    assert not scale.continuous
    assert scale("q2") == 1
    assert scale("q9") is None
    assert scale.invert(1.4) == "q2"
    assert scale.invert(1.5) == "q3"  # round half up
    assert scale.includes("q3") and not scale.includes("q9")


def test_empty_step_scale() -> None:
    scale = StepScale([])

    assert scale.step_count == 0 and len(scale) == 0
    assert scale(2000) is None
    assert scale.invert(0) is None
    assert not scale.includes(2000)


def test_includes_for_continuous_values() -> None:
    scale = StepScale([2000, 2005])

    assert scale.includes(2002.5)
    assert not scale.includes(2006)
    assert not scale.includes(None)
