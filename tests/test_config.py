from __future__ import annotations

import pytest
from pydantic import ValidationError

from journal_timeline.core.config import Settings


def _settings(**env: str) -> Settings:
    return Settings.model_validate(env)


def test_settings_defaults() -> None:
    s = _settings()

    assert s.log_level == "INFO"
    assert 1 <= s.max_section_chars <= 100_000
    assert s.is_production() is False


def test_settings_reads_aliases() -> None:
    s = _settings(
        APP_ENV="production",
        FRONTEND_URL="https://journal.example.com/app/",
        MAX_SECTION_CHARS="800",
        LOG_LEVEL="debug",
    )

    assert s.is_production() is True
    assert s.max_section_chars == 800
    assert s.log_level == "debug"


def test_settings_rejects_localhost_frontend_in_production() -> None:
    with pytest.raises(ValidationError):
        _settings(APP_ENV="prod", FRONTEND_URL="http://localhost:3000")


@pytest.mark.parametrize(
    "env",
    [
        {"MAX_SECTION_CHARS": "0"},
        {"MAX_SECTION_CHARS": "200000"},
        {"LOG_LEVEL": "chatty"},
    ],
)
def test_settings_rejects_out_of_range_values(env: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        _settings(**env)
