# moodlog/utils/reporting/analytics/health.py
'''
Moodlog - Health Correlation Adapter
Correlates externally supplied daily health metrics (sleep hours, step count, resting
heart rate, HRV) with daily mood. Samples are handed in by the sensor integration;
nothing here fetches them.
'''

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from moodlog.utils.db.models import (
    BehaviorRecord,
    HealthCorrelationResult,
    HealthMetric,
    HealthSample,
    InsufficientData,
    MoodRecord,
)
from moodlog.utils.reporting.analytics.stats_kernel import MIN_PAIRS, correlate, rank_key, safe_mean
from moodlog.utils.reporting.analytics.temporal import DEFAULT_WINDOW_DAYS, daily_mood_averages
from moodlog.utils.shared_utils import in_window, local_day

logger = logging.getLogger(__name__)

# Wording used when describing a metric's link with mood:
# (subject sentence, word for a positive r, word for a negative r)
METRIC_PHRASES = {
    HealthMetric.SLEEP: ("More sleep is associated with {} mood for you.", "better", "worse"),
    HealthMetric.STEPS: ("More steps are associated with {} mood for you.", "better", "worse"),
    HealthMetric.RESTING_HEART_RATE: (
        "A higher resting heart rate tends to come with {} mood for you.", "higher", "lower"),
    HealthMetric.HRV: (
        "Higher heart rate variability is associated with {} mood for you.", "better", "worse"),
}


def describe_metric_link(metric: HealthMetric, r: float) -> str:
    template, positive, negative = METRIC_PHRASES[metric]
    return template.format(positive if r > 0 else negative)


def daily_metric_values(
    samples: Iterable[HealthSample],
    metric: HealthMetric,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
    exclude_zero_steps: bool = True,
) -> Dict[date, float]:
    """
    Average each day's samples of `metric` inside the window.

    With exclude_zero_steps, step samples of exactly 0 are treated as "no sensor data"
    rather than a sedentary day and dropped.
    """
    by_day = defaultdict(list)
    for sample in samples:
        if sample.metric != metric or not in_window(sample.timestamp, window_days, today):
            continue
        if exclude_zero_steps and metric is HealthMetric.STEPS and sample.value == 0:
            continue
        by_day[local_day(sample.timestamp)].append(float(sample.value))
    return {d: sum(v) / len(v) for d, v in by_day.items()}


def health_mood_correlation(
    metric: HealthMetric,
    samples: Iterable[HealthSample],
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
    min_samples: int = MIN_PAIRS,
    exclude_zero_steps: bool = True,
) -> HealthCorrelationResult:
    """Correlate one metric with daily mood over days that have both."""
    metric_by_day = daily_metric_values(samples, metric, window_days, today, exclude_zero_steps)
    daily_mood = daily_mood_averages(list(behavior_records), list(mood_records or []), window_days, today)

    days = sorted(set(metric_by_day) & set(daily_mood))
    x = [metric_by_day[d] for d in days]
    y = [daily_mood[d] for d in days]

    if len(days) < max(min_samples, MIN_PAIRS):
        correlation = InsufficientData(f"only {len(days)} days with both {metric.value} and mood")
        logger.debug(correlation.reason)
    else:
        correlation = correlate(x, y)

    return HealthCorrelationResult(
        metric=metric,
        correlation=correlation,
        sample_size=len(days),
        window_days=window_days,
        average_metric=safe_mean(x),
        average_mood=safe_mean(y),
    )


def find_health_correlations(
    samples: Iterable[HealthSample],
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
    min_samples: int = MIN_PAIRS,
    exclude_zero_steps: bool = True,
) -> List[HealthCorrelationResult]:
    """One result per metric that has any samples, ranked like habit correlations."""
    samples = list(samples or [])
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])

    results = []
    for metric in HealthMetric:
        if not any(s.metric == metric for s in samples):
            continue
        results.append(health_mood_correlation(
            metric, samples, behavior_records, mood_records,
            window_days, today, min_samples, exclude_zero_steps))
    return sorted(results, key=rank_key)
