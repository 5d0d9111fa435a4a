"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from ranktracker.core.config import Settings
from ranktracker.core.enums import QueueType, Region


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.history_capacity == 100
    assert settings.match_page_size == 20
    assert settings.queue_filter == QueueType.RANKED_SOLO_5X5
    assert settings.poll_interval_seconds == 300
    assert set(settings.valid_regions_list) == set(Region)


def test_database_url_from_components():
    settings = Settings(
        _env_file=None,
        postgres_user="u",
        postgres_password="p",
        postgres_host="db",
        postgres_port=5433,
        postgres_db="ranks",
    )
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5433/ranks"


def test_database_url_override():
    settings = Settings(_env_file=None, database_url_override="sqlite+aiosqlite:///x.db")
    assert settings.database_url == "sqlite+aiosqlite:///x.db"


def test_valid_regions_normalized():
    settings = Settings(_env_file=None, valid_regions=" EUW, na ,")
    assert settings.valid_regions_list == [Region.EUW, Region.NA]


@pytest.mark.parametrize("value", ["euw,mars", "", " , "])
def test_invalid_regions_rejected(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, valid_regions=value)


def test_queue_filter_from_environment(monkeypatch):
    monkeypatch.setenv("QUEUE_FILTER", "440")
    assert Settings(_env_file=None).queue_filter == QueueType.RANKED_FLEX_5X5


def test_page_size_bounds():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, match_page_size=101)
