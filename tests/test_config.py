"""
Tests for raillog configuration.

Validates environment-based settings loading, defaults, validation
constraints, and how ``create_logger`` combines settings with overrides.
"""

from __future__ import annotations

import io
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from raillog.colors import plain_colorizer
from raillog.config import Settings, get_settings
from raillog.logger import RailLogger, create_logger, terminal_width
from raillog.reporter import StreamReporter


def _clean_env() -> dict[str, str]:
    """Environment without RAILLOG_ variables."""
    return {k: v for k, v in os.environ.items() if not k.startswith("RAILLOG_")}


# ---------------------------------------------------------------------------
# Tests: default values
# ---------------------------------------------------------------------------


class TestSettingsDefaults:

    def test_defaults(self) -> None:
        with patch.dict(os.environ, _clean_env(), clear=True):
            s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.min_slots == 3
        assert s.width is None
        assert s.timestamp is False
        assert s.slim is False
        assert s.colors is True
        assert s.reporter == "stdout"
        assert s.log_level == "INFO"


# ---------------------------------------------------------------------------
# Tests: environment variable overrides
# ---------------------------------------------------------------------------


class TestSettingsFromEnv:

    def test_override_min_slots(self) -> None:
        with patch.dict(os.environ, {"RAILLOG_MIN_SLOTS": "8"}):
            assert Settings().min_slots == 8

    def test_override_width(self) -> None:
        with patch.dict(os.environ, {"RAILLOG_WIDTH": "120"}):
            assert Settings().width == 120

    def test_override_flags(self) -> None:
        env = {"RAILLOG_SLIM": "true", "RAILLOG_TIMESTAMP": "1", "RAILLOG_COLORS": "false"}
        with patch.dict(os.environ, env):
            s = Settings()
        assert s.slim is True
        assert s.timestamp is True
        assert s.colors is False

    def test_override_reporter(self) -> None:
        with patch.dict(os.environ, {"RAILLOG_REPORTER": "stderr"}):
            assert Settings().reporter == "stderr"


# ---------------------------------------------------------------------------
# Tests: validation constraints
# ---------------------------------------------------------------------------


class TestSettingsValidation:

    def test_negative_min_slots(self) -> None:
        with pytest.raises(ValidationError):
            Settings(min_slots=-1)  # type: ignore[call-arg]

    def test_negative_width(self) -> None:
        with pytest.raises(ValidationError):
            Settings(width=-10)  # type: ignore[call-arg]

    def test_unknown_reporter(self) -> None:
        with pytest.raises(ValidationError):
            Settings(reporter="syslog")  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Tests: get_settings singleton
# ---------------------------------------------------------------------------


class TestGetSettings:

    def setup_method(self) -> None:
        get_settings.cache_clear()

    def teardown_method(self) -> None:
        get_settings.cache_clear()

    def test_cached(self) -> None:
        assert get_settings() is get_settings()


# ---------------------------------------------------------------------------
# Tests: create_logger
# ---------------------------------------------------------------------------


class TestCreateLogger:

    def test_uses_settings(self) -> None:
        rail = create_logger(Settings(min_slots=5, width=100, slim=True))  # type: ignore[call-arg]
        assert isinstance(rail, RailLogger)
        assert len(rail.slots) == 5
        assert rail.resolve_width() == 100
        assert rail.renderer.slim is True

    def test_unset_width_follows_terminal(self) -> None:
        rail = create_logger(Settings(width=None))  # type: ignore[call-arg]
        assert rail.width is terminal_width

    def test_zero_width_disables_wrapping(self) -> None:
        rail = create_logger(Settings(width=0))  # type: ignore[call-arg]
        assert rail.resolve_width() is None

    def test_colors_off(self) -> None:
        rail = create_logger(Settings(colors=False))  # type: ignore[call-arg]
        assert rail.renderer.colorizer is plain_colorizer

    def test_overrides_win(self) -> None:
        stream = io.StringIO()
        rail = create_logger(
            Settings(min_slots=5),  # type: ignore[call-arg]
            min_slots=1,
            width=lambda: 60,
            reporter=StreamReporter(stream),
        )
        assert len(rail.slots) == 1
        assert rail.resolve_width() == 60
        rail.report("line")
        assert stream.getvalue() == "line\n"

    def test_defaults_from_environment(self) -> None:
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"RAILLOG_MIN_SLOTS": "2", "RAILLOG_WIDTH": "0"}):
                rail = create_logger()
        finally:
            get_settings.cache_clear()
        assert len(rail.slots) == 2
        assert rail.resolve_width() is None
