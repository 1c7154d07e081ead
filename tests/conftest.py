# tests/conftest.py

from datetime import date, datetime, timedelta

import pytest
import toml

import moodlog.config.config_manager as cf
from moodlog.utils.db.models import (
    BehaviorRecord,
    Habit,
    HealthMetric,
    HealthSample,
    MoodRecord,
    TrackingStyle,
)

# Sunday. Naive timestamps are local wall-clock time, so day bucketing in these
# tests does not depend on the machine's time zone.
TODAY = date(2026, 10, 18)


def at(days_ago: int, hour: int = 12, minute: int = 0) -> datetime:
    day = TODAY - timedelta(days=days_ago)
    return datetime(day.year, day.month, day.day, hour, minute)


def entry(habit, days_ago, sentiment=4, hour=12, value=None):
    return BehaviorRecord(habit=habit, timestamp=at(days_ago, hour), sentiment=sentiment, value=value)


def mood(days_ago, sentiment=4, hour=12):
    return MoodRecord(timestamp=at(days_ago, hour), sentiment=sentiment)


def sample(metric, days_ago, value, hour=8):
    return HealthSample(metric=metric, timestamp=at(days_ago, hour), value=value)


# ────────────────────────────────────────────────────────────────────────────────
# Fixture: keep every test away from ~/.moodlog
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def temp_config(tmp_path, monkeypatch):
    temp_base = tmp_path / "config_dir"
    monkeypatch.setattr(cf, "BASE_DIR", temp_base)
    monkeypatch.setattr(cf, "USER_CONFIG", temp_base / "config.toml")
    yield temp_base / "config.toml"


@pytest.fixture
def write_config(temp_config):
    """Write a config dict to the temporary user config."""
    def _write(doc: dict):
        temp_config.parent.mkdir(parents=True, exist_ok=True)
        temp_config.write_text(toml.dumps(doc), encoding="utf-8")
        return temp_config
    return _write


# ────────────────────────────────────────────────────────────────────────────────
# Fixtures: habits and records
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def water():
    return Habit(id="h-water", name="Water", tracking_style=TrackingStyle.QUANTITY)


@pytest.fixture
def coffee():
    return Habit(id="h-coffee", name="Coffee")


@pytest.fixture
def reading():
    return Habit(id="h-read", name="Reading", tracking_style=TrackingStyle.DURATION)


@pytest.fixture
def archived():
    return Habit(id="h-old", name="Old Habit", is_archived=True)


@pytest.fixture
def water_scenario(water):
    """
    Water logged with sentiment 6 on the five most recent days; every other day of a
    10-day stretch has only a mood check-in of 2.
    """
    behavior = [entry(water, d, sentiment=6, value=2) for d in range(5)]
    moods = [mood(d, sentiment=2) for d in range(5, 10)]
    return behavior, moods


@pytest.fixture
def sleep_samples():
    return [sample(HealthMetric.SLEEP, d, 5.0 + d % 4) for d in range(8)]
