from __future__ import annotations

import pytest

from chartframe.core.errors import (
    ChartframeError,
    ConfigParseError,
    OrderError,
    PlaybackError,
    ScaleTypeError,
    SettingsError,
)


@pytest.mark.parametrize(
    "exc_type, builtin",
    [
        (ScaleTypeError, ValueError),
        (ConfigParseError, ValueError),
        (OrderError, ValueError),
        (PlaybackError, RuntimeError),
        (SettingsError, ValueError),
    ],
)
def test_errors_share_base_and_builtin(exc_type, builtin) -> None:
    err = exc_type("boom")
    assert isinstance(err, ChartframeError)
    assert isinstance(err, builtin)
    assert str(err) == "boom"
