from __future__ import annotations

from pathlib import Path

import pytest

from chartframe.core.config import EngineSettings
from chartframe.core.errors import SettingsError

_ENV_KEYS = [
    "CHARTFRAME_SPEED",
    "CHARTFRAME_PLAYBACK_STEPS",
    "CHARTFRAME_LOOP",
    "CHARTFRAME_INTERPOLATE",
    "CHARTFRAME_SPLASH",
    "CHARTFRAME_ORDINAL_SCALE",
    "CHARTFRAME_STRICT_SCALE_TYPES",
]


def _clear_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_engine_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    # Arrange: no TOML, no env
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    # Act
    s = EngineSettings.load()

    # Assert
    assert s.speed == 100
    assert s.playback_steps == 1
    assert s.loop is False
    assert s.interpolate is True
    assert s.splash is False
    assert s.ordinal_scale == "ordinal"
    assert s.strict_scale_types is False


def test_engine_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    _write(
        tmp_path,
        "chartframe.toml",
        """
        [engine]
        speed = 250
        loop = true
        ordinal_scale = "point"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    # Arrange ENV that should override TOML
    monkeypatch.setenv("CHARTFRAME_SPEED", "40")
    monkeypatch.setenv("CHARTFRAME_LOOP", "off")

    # Act
    s = EngineSettings.load()

    # Assert precedence: env > TOML > defaults
    assert s.speed == 40
    assert s.loop is False
    assert s.ordinal_scale == "point"  # TOML only
    assert s.playback_steps == 1  # default


def test_engine_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    # Arrange
    _write(
        tmp_path,
        "pyproject.toml",
        """
        [tool.chartframe.engine]
        playback_steps = 3
        strict_scale_types = true
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    # Act
    s = EngineSettings.load()

    # Assert
    assert s.playback_steps == 3
    assert s.strict_scale_types is True


def test_engine_settings_top_level_keys_in_chartframe_toml(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path, "chartframe.toml", "splash = true\ninterpolate = false\n")
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = EngineSettings.load()

    assert s.splash is True
    assert s.interpolate is False


def test_engine_settings_invalid_toml_raises(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path, "chartframe.toml", "[engine\nspeed = ")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SettingsError):
        EngineSettings.from_toml()


def test_engine_settings_rejects_invalid_values(monkeypatch) -> None:
    with pytest.raises(SettingsError):
        EngineSettings(speed=-1)
    with pytest.raises(SettingsError):
        EngineSettings(playback_steps=0)
    with pytest.raises(SettingsError):
        EngineSettings(ordinal_scale="pie")  # type: ignore[arg-type]

    monkeypatch.setenv("CHARTFRAME_SPEED", "fast")
    with pytest.raises(SettingsError):
        EngineSettings.from_env()
