# tests/test_insight_engine.py

from dataclasses import replace
from datetime import timedelta

import pytest

from conftest import TODAY, entry, mood
from moodlog.config.config_manager import EngineSettings
from moodlog.utils.db.models import Habit, InsightCategory
from moodlog.utils.reporting.insight_engine import (
    WISDOM,
    build_context,
    generate_insights,
    insight_health_correlations,
    insight_logging_frequency,
    insight_milestones,
    insight_most_tracked_habit,
    insight_weekly_pattern,
    insight_wisdom,
    milestone_for,
    wisdom_for,
)


def _titles(insights):
    return [i.title for i in insights]


@pytest.fixture
def four_habits():
    """Four habits, each logged once on a good day, against six flat bad days."""
    habits = [Habit(id=f"h{i}", name=f"Habit {i}") for i in range(4)]
    behavior = [entry(h, i, sentiment=6) for i, h in enumerate(habits)]
    moods = [mood(d, sentiment=2) for d in range(4, 10)]
    return habits, behavior, moods


# ────────────────────────────────────────────────────────────────────────────────
# End to end
# ────────────────────────────────────────────────────────────────────────────────


def test_no_records_yields_only_wisdom():
    insights = generate_insights([], [], today=TODAY)
    assert len(insights) == 1
    only = insights[0]
    assert only.title == "Daily Reflection"
    assert only.description == wisdom_for(TODAY)
    assert only.strength == pytest.approx(0.1)


def test_water_scenario_ranks_the_habit_pattern_first(water, water_scenario):
    behavior, moods = water_scenario
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY)

    assert _titles(insights) == [
        "Pattern with Water",
        "Weekly Pattern",
        "Logging & Mood",
        "Building Momentum",
        "Mood Snapshot",
        "Most Tracked Habit",
        "Daily Reflection",
    ]
    top = insights[0]
    assert top.category is InsightCategory.HABIT_CORRELATION
    assert top.related_habit == water
    assert top.strength == pytest.approx(1.0)
    assert "higher" in top.description


def test_insights_are_sorted_by_strength(water, coffee, water_scenario):
    behavior, moods = water_scenario
    behavior = behavior + [entry(coffee, d, sentiment=3) for d in (1, 6, 8)]
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY)
    strengths = [i.strength for i in insights]
    assert strengths == sorted(strengths, reverse=True)


def test_custom_rules_replace_the_defaults(water_scenario):
    behavior, moods = water_scenario
    insights = generate_insights(behavior, moods, today=TODAY, rules=(insight_wisdom,))
    assert _titles(insights) == ["Daily Reflection"]


# ────────────────────────────────────────────────────────────────────────────────
# Habit correlations
# ────────────────────────────────────────────────────────────────────────────────


def test_at_most_three_habit_patterns(four_habits):
    _, behavior, moods = four_habits
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY)
    patterns = [i for i in insights if i.title.startswith("Pattern with")]
    assert len(patterns) == 3
    assert all(i.strength == pytest.approx(0.408, abs=1e-3) for i in patterns)


def test_threshold_and_cap_come_from_settings(four_habits):
    _, behavior, moods = four_habits
    one = replace(EngineSettings(), top_habit_insights=1)
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY, settings=one)
    assert sum(i.title.startswith("Pattern with") for i in insights) == 1

    strict = replace(EngineSettings(), insight_threshold=0.5)
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY, settings=strict)
    assert not any(i.title.startswith("Pattern with") for i in insights)


# ────────────────────────────────────────────────────────────────────────────────
# Individual rules
# ────────────────────────────────────────────────────────────────────────────────


def test_weekly_pattern_names_best_and_worst_days(water_scenario):
    behavior, moods = water_scenario
    ctx = build_context(behavior, moods, window_days=10, today=TODAY)
    [weekly] = insight_weekly_pattern(ctx)
    assert weekly.description == "Your mood tends to be highest on Wednesday and lowest on Monday."
    assert weekly.strength == pytest.approx(0.8)
    assert weekly.category is InsightCategory.TEMPORAL_PATTERN


def test_flat_week_has_no_weekly_pattern():
    moods = [mood(d, sentiment=4) for d in range(14)]
    ctx = build_context([], moods, window_days=14, today=TODAY)
    assert insight_weekly_pattern(ctx) == []


def test_logging_frequency(water_scenario):
    behavior, moods = water_scenario
    ctx = build_context(behavior, moods, window_days=10, today=TODAY)
    [freq] = insight_logging_frequency(ctx)
    assert freq.strength == pytest.approx(0.8)
    assert "higher" in freq.description


def test_logging_frequency_needs_three_days(water):
    ctx = build_context([entry(water, 0, 6)], [mood(1, 2)], window_days=10, today=TODAY)
    assert insight_logging_frequency(ctx) == []


def test_health_insight(sleep_samples):
    moods = [mood(d, sentiment=int(s.value) - 3) for d, s in enumerate(sleep_samples)]
    ctx = build_context([], moods, sleep_samples, window_days=30, today=TODAY)
    [health] = insight_health_correlations(ctx)
    assert health.title == "Sleep & Mood"
    assert health.category is InsightCategory.HEALTH_CORRELATION
    assert health.description == "More sleep is associated with better mood for you."


def test_mood_snapshot(water_scenario):
    behavior, moods = water_scenario
    insights = generate_insights(behavior, moods, window_days=10, today=TODAY)
    snapshot = next(i for i in insights if i.title == "Mood Snapshot")
    assert snapshot.description == (
        "Your average mood over the last 10 days is 4.0/6 (Okay) across 10 check-ins.")
    assert snapshot.strength == pytest.approx(0.15)


def test_most_tracked_habit_needs_two_entries(water, coffee):
    ctx = build_context([entry(water, 0), entry(coffee, 1)], [], window_days=10, today=TODAY)
    assert insight_most_tracked_habit(ctx) == []

    ctx = build_context([entry(water, 0), entry(coffee, 1), entry(coffee, 2)], [], window_days=10, today=TODAY)
    [top] = insight_most_tracked_habit(ctx)
    assert top.related_habit == coffee
    assert "2 entries" in top.description


@pytest.mark.parametrize("count, title", [
    (0, None), (1, "You've Started"), (5, "You've Started"), (6, None), (9, None),
    (10, "Building Momentum"), (24, "Building Momentum"), (25, "Rich Dataset"), (400, "Rich Dataset"),
])
def test_milestone_bands(count, title):
    band = milestone_for(count)
    assert (band[0] if band else None) == title


def test_milestone_insight_counts_entries_and_moods(water):
    behavior = [entry(water, d) for d in range(3)]
    moods = [mood(d) for d in range(2)]
    ctx = build_context(behavior, moods, window_days=10, today=TODAY)
    [milestone] = insight_milestones(ctx)
    assert milestone.title == "You've Started"
    assert milestone.strength == pytest.approx(0.2)
    assert "5 times" in milestone.description


def test_wisdom_rotates_daily_and_stops_with_enough_data():
    assert wisdom_for(TODAY) == WISDOM[TODAY.timetuple().tm_yday % len(WISDOM)]
    week = {wisdom_for(TODAY + timedelta(days=d)) for d in range(len(WISDOM))}
    assert week == set(WISDOM)

    moods = [mood(d % 10, hour=8 + d % 10) for d in range(15)]
    ctx = build_context([], moods, window_days=10, today=TODAY)
    assert insight_wisdom(ctx) == []
