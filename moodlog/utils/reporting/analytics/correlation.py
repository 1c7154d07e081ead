# moodlog/utils/reporting/analytics/correlation.py
'''
Moodlog - Correlation Service
Point-biserial correlation between "habit logged on day X" and "average mood on day X",
ranking across habits, and mood on days with vs. without a habit.
'''

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from moodlog.utils.db.models import (
    BehaviorRecord,
    CorrelationResult,
    Habit,
    HabitMoodComparison,
    MoodRecord,
)
from moodlog.utils.reporting.analytics.stats_kernel import correlate, rank_key, safe_mean
from moodlog.utils.reporting.analytics.temporal import (
    DEFAULT_WINDOW_DAYS,
    active_behavior_records,
    daily_mood_averages,
)
from moodlog.utils.shared_utils import local_day

logger = logging.getLogger(__name__)


def logged_days(
    habit: Habit,
    behavior_records: Iterable[BehaviorRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> set:
    """Distinct local days within the window on which the habit has an entry."""
    return {
        local_day(r.timestamp)
        for r in active_behavior_records(behavior_records, window_days, today)
        if r.habit.id == habit.id
    }


def _correlate_presence(habit, habit_days, daily_mood, window_days) -> CorrelationResult:
    days = sorted(daily_mood)
    x = [1.0 if d in habit_days else 0.0 for d in days]
    y = [daily_mood[d] for d in days]

    moods_when_logged = [daily_mood[d] for d in days if d in habit_days]
    result = CorrelationResult(
        habit=habit,
        correlation=correlate(x, y),
        sample_size=len(moods_when_logged),
        window_days=window_days,
        paired_days=len(days),
        average_mood_when_logged=safe_mean(moods_when_logged),
    )
    if result.coefficient is None:
        logger.debug(
            f"No coefficient for '{habit.name}' ({result.correlation.reason}, "
            f"{result.sample_size} logged days)")
    return result


def habit_mood_correlation(
    habit: Habit,
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> CorrelationResult:
    """
    Correlate presence of `habit` (1.0 / 0.0 per day) with that day's average mood
    across every record in the window.

    sample_size counts the logged days that have mood data; paired_days counts every
    day fed to the kernel.
    """
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])
    habit_days = logged_days(habit, behavior_records, window_days, today)
    daily_mood = daily_mood_averages(behavior_records, mood_records, window_days, today)
    return _correlate_presence(habit, habit_days, daily_mood, window_days)


def tracked_habits(behavior_records: Iterable[BehaviorRecord]) -> List[Habit]:
    """Distinct, non-archived habits referenced by the records, in first-seen order."""
    seen: Dict[str, Habit] = {}
    for r in behavior_records:
        if not r.habit.is_archived and r.habit.id not in seen:
            seen[r.habit.id] = r.habit
    return list(seen.values())


def find_mood_correlations(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
    habits: Optional[Iterable[Habit]] = None,
    min_sample_size: int = 1,
) -> List[CorrelationResult]:
    """
    One result per habit with at least `min_sample_size` logged days, ranked by
    descending |r|, then descending sample size.
    """
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])
    daily_mood = daily_mood_averages(behavior_records, mood_records, window_days, today)
    if habits is None:
        habits = tracked_habits(behavior_records)

    results = []
    for habit in habits:
        if habit.is_archived:
            continue
        habit_days = logged_days(habit, behavior_records, window_days, today)
        result = _correlate_presence(habit, habit_days, daily_mood, window_days)
        if result.sample_size >= min_sample_size:
            results.append(result)

    return sorted(results, key=rank_key)


def mood_with_and_without(
    habit: Habit,
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> HabitMoodComparison:
    """Average daily mood on days the habit was logged vs. days it was not."""
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])
    habit_days = logged_days(habit, behavior_records, window_days, today)
    daily_mood = daily_mood_averages(behavior_records, mood_records, window_days, today)

    with_habit = [m for d, m in daily_mood.items() if d in habit_days]
    without_habit = [m for d, m in daily_mood.items() if d not in habit_days]

    return HabitMoodComparison(
        habit=habit,
        average_mood_with=safe_mean(with_habit),
        average_mood_without=safe_mean(without_habit),
        days_with_habit=len(with_habit),
        days_without_habit=len(without_habit),
        total_days=len(daily_mood),
    )
