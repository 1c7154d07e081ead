# moodlog/utils/reporting/analytics/temporal.py
'''
Moodlog - Temporal Aggregator
Groups sentiment from habit entries and standalone mood check-ins by calendar day,
ISO weekday, or hour of day, and produces the gap-filled daily trend series.
'''

from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Hashable, Iterable, List, Optional

from moodlog.utils.db.models import BehaviorRecord, MoodRecord, TrendPoint
from moodlog.utils.shared_utils import (
    day_range,
    in_window,
    local_day,
    local_hour,
    local_weekday,
    today_local,
)

DEFAULT_WINDOW_DAYS = 30


def active_behavior_records(
    behavior_records: Iterable[BehaviorRecord],
    window_days: int,
    today: Optional[date] = None,
) -> List[BehaviorRecord]:
    """Entries inside the window whose habit is not archived."""
    return [
        r for r in behavior_records
        if not r.habit.is_archived and in_window(r.timestamp, window_days, today)
    ]


def mood_records_in_window(
    mood_records: Iterable[MoodRecord],
    window_days: int,
    today: Optional[date] = None,
) -> List[MoodRecord]:
    return [r for r in mood_records if in_window(r.timestamp, window_days, today)]


def _bucket_sentiments(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int,
    today: Optional[date],
    key: Callable,
) -> Dict[Hashable, List[int]]:
    buckets = defaultdict(list)
    for record in active_behavior_records(behavior_records, window_days, today):
        buckets[key(record.timestamp)].append(record.score)
    for record in mood_records_in_window(mood_records or [], window_days, today):
        buckets[key(record.timestamp)].append(record.score)
    return buckets


def _averages(buckets: Dict[Hashable, List[int]]) -> Dict[Hashable, float]:
    return {k: sum(v) / len(v) for k, v in buckets.items() if v}


def daily_mood_averages(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> Dict[date, float]:
    """
    Mean sentiment per local calendar day within [today - window_days, today].
    Days without any record are absent, never zero-filled.
    """
    return _averages(_bucket_sentiments(
        behavior_records, mood_records, window_days, today, local_day))


def sentiment_by_weekday(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> Dict[int, float]:
    """Mean sentiment keyed by ISO weekday (1=Monday .. 7=Sunday)."""
    return _averages(_bucket_sentiments(
        behavior_records, mood_records, window_days, today, local_weekday))


def sentiment_by_hour_of_day(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> Dict[int, float]:
    """Mean sentiment keyed by local hour (0-23)."""
    return _averages(_bucket_sentiments(
        behavior_records, mood_records, window_days, today, local_hour))


def daily_log_counts(
    behavior_records: Iterable[BehaviorRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> Dict[date, int]:
    """Number of habit entries per local day (days without entries are absent)."""
    counts = defaultdict(int)
    for record in active_behavior_records(behavior_records, window_days, today):
        counts[local_day(record.timestamp)] += 1
    return dict(counts)


def gap_fill(
    daily: Dict[date, float],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> List[TrendPoint]:
    """
    Ordered series covering every day from today - window_days to today inclusive
    (window_days + 1 points); days missing from `daily` carry value None.
    """
    end = today_local(today)
    start = end - timedelta(days=window_days)
    return [TrendPoint(day=d, value=daily.get(d)) for d in day_range(start, end)]


def sentiment_trend(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> List[TrendPoint]:
    """Gap-filled daily mood series for charting."""
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])
    daily = daily_mood_averages(behavior_records, mood_records, window_days, today)
    return gap_fill(daily, window_days, today)
