# moodlog/utils/reporting/analytics/descriptive.py
'''
Moodlog - Descriptive Analytics Module
Per-habit summary numbers for a lookback window: entry totals, average sentiment,
entries per day and summed quantity/duration.
'''

from collections import Counter
from datetime import date
from typing import Iterable, Optional

from moodlog.utils.db.models import BehaviorRecord, Habit, HabitStats
from moodlog.utils.reporting.analytics.stats_kernel import safe_mean
from moodlog.utils.reporting.analytics.temporal import DEFAULT_WINDOW_DAYS
from moodlog.utils.shared_utils import in_window, local_day


def habit_stats(
    habit: Habit,
    behavior_records: Iterable[BehaviorRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> HabitStats:
    entries = [
        r for r in behavior_records
        if r.habit.id == habit.id and in_window(r.timestamp, window_days, today)
    ]
    per_day = Counter(local_day(e.timestamp) for e in entries)
    # only days that have entries count toward the per-day average
    avg_per_day = len(entries) / len(per_day) if per_day else 0.0
    total = sum(e.value for e in entries if e.value is not None)

    return HabitStats(
        habit=habit,
        window_days=window_days,
        total_entries=len(entries),
        average_sentiment=safe_mean(e.score for e in entries),
        entries_per_day=dict(per_day),
        average_entries_per_day=avg_per_day,
        total_value=total if total > 0 else None,
    )
