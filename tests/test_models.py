# tests/test_models.py

import logging
from datetime import date, datetime

import pytest

from moodlog.utils.db.models import (
    BehaviorRecord,
    Computed,
    CorrelationResult,
    Habit,
    HabitMoodComparison,
    HealthCorrelationResult,
    HealthMetric,
    HeatmapCell,
    Insight,
    InsightCategory,
    InsufficientData,
    MoodRecord,
    TrackingStyle,
    clamp_sentiment,
    sentiment_label,
    strength_band,
)
from moodlog.utils.error_handler import ValidationError


def _result(r, habit=None, avg=None, n=5):
    correlation = InsufficientData() if r is None else Computed(r)
    return CorrelationResult(
        habit=habit or Habit(id="h1", name="Water"),
        correlation=correlation,
        sample_size=n,
        window_days=30,
        average_mood_when_logged=avg,
    )


# ────────────────────────────────────────────────────────────────────────────────
# Sentiment scale
# ────────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [(0, 1), (-3, 1), (1, 1), (4, 4), (6, 6), (9, 6), (4.6, 5)])
def test_clamp_sentiment(raw, expected):
    assert clamp_sentiment(raw) == expected


def test_clamp_sentiment_logs_quietly(caplog):
    with caplog.at_level(logging.DEBUG, logger="moodlog.utils.db.models"):
        clamp_sentiment(9)
    [record] = caplog.records
    assert record.levelno == logging.DEBUG
    assert "clamped to 6" in record.getMessage()


def test_clamp_sentiment_non_finite():
    assert clamp_sentiment(float("inf")) == 6
    assert clamp_sentiment(float("-inf")) == 1
    with pytest.raises(ValidationError):
        clamp_sentiment(float("nan"))


def test_record_score_is_clamped():
    habit = Habit(id="h1", name="Water")
    assert BehaviorRecord(habit=habit, timestamp=datetime(2026, 1, 1), sentiment=9).score == 6
    assert MoodRecord(timestamp=datetime(2026, 1, 1), sentiment=0).score == 1


def test_sentiment_label():
    assert sentiment_label(1) == "Awful"
    assert sentiment_label(4.4) == "Okay"
    assert sentiment_label(6) == "Great"


# ────────────────────────────────────────────────────────────────────────────────
# Strength vocabulary
# ────────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("r, band", [
    (0.0, "weak"), (0.1, "weak"), (0.15, "mild"), (0.3, "mild"),
    (0.45, "moderate"), (0.6, "moderate"), (0.61, "strong"), (-0.9, "strong"),
])
def test_strength_band(r, band):
    assert strength_band(r) == band


def test_strength_bands_are_monotonic_in_magnitude():
    order = ["weak", "mild", "moderate", "strong"]
    previous = 0
    for i in range(0, 101):
        rank = order.index(strength_band(i / 100))
        assert rank >= previous
        previous = rank


def test_strength_description_includes_direction():
    assert _result(0.95).strength_description == "strong · improves mood"
    assert _result(-0.4).strength_description == "moderate · lowers mood"
    assert _result(0.05).strength_description == "weak"
    assert _result(None).strength_description == "insufficient data"


def test_early_data_when_only_an_average_exists():
    res = _result(None, avg=4.25)
    assert res.strength_label == "early data"
    assert res.strength_description == "early data · avg mood 4.2 when logged"
    assert res.normalized_strength == 0.0
    assert not res.is_positive


def test_normalized_strength_and_sign():
    res = _result(-0.7)
    assert res.normalized_strength == pytest.approx(0.7)
    assert not res.is_positive
    assert _result(0.2).is_positive


def test_health_result_shares_vocabulary():
    res = HealthCorrelationResult(
        metric=HealthMetric.SLEEP, correlation=Computed(0.8), sample_size=7, window_days=30)
    assert res.strength_description == "strong · improves mood"
    assert res.to_dict()["metric"] == "sleep"
    assert res.to_dict()["correlation"] == pytest.approx(0.8)


# ────────────────────────────────────────────────────────────────────────────────
# Serialization and small helpers
# ────────────────────────────────────────────────────────────────────────────────

def test_to_dict_serializes_enums_dates_and_nested_models():
    habit = Habit(id="h1", name="Water", tracking_style=TrackingStyle.QUANTITY)
    d = _result(0.9, habit=habit).to_dict()
    assert d["habit"]["tracking_style"] == "quantity"
    assert d["correlation"] == pytest.approx(0.9)
    assert d["strength"] == "strong · improves mood"

    insight = Insight(InsightCategory.MILESTONE, "Rich Dataset", "x", 0.3)
    assert insight.to_dict()["category"] == "milestone"

    cell = HeatmapCell(day=date(2026, 10, 1), entry_count=0)
    assert cell.to_dict() == {
        "day": "2026-10-01", "entry_count": 0, "average_sentiment": None, "total_value": None}
    assert not cell.has_data


def test_tracking_style_units():
    assert TrackingStyle.OCCURRENCE.unit_label is None
    assert TrackingStyle.DURATION.unit_label == "minutes"
    assert TrackingStyle.QUANTITY.unit_label == "times"


def test_habit_mood_comparison_difference():
    habit = Habit(id="h1", name="Water")
    cmp = HabitMoodComparison(habit, 5.0, 3.5, 4, 6, 10)
    assert cmp.difference == pytest.approx(1.5)
    assert HabitMoodComparison(habit, None, 3.5, 0, 6, 6).difference is None
