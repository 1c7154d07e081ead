# moodlog/utils/reporting/insight_engine.py
'''
Moodlog Insight Engine Module
Turns correlations, weekday patterns, logging volume and dataset size into a ranked list
of short natural-language insights.

Each rule is an independent function taking the same InsightContext and returning zero or
more Insight records. Rules run in DEFAULT_RULES order; the combined output is sorted by
strength, highest first. Nothing here raises on sparse data: a rule whose precondition
fails simply contributes nothing.
'''

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from moodlog.config.config_manager import EngineSettings
from moodlog.utils.db.models import (
    BehaviorRecord,
    CorrelationResult,
    HealthCorrelationResult,
    HealthSample,
    Insight,
    InsightCategory,
    MoodRecord,
    sentiment_label,
)
from moodlog.utils.reporting.analytics.correlation import find_mood_correlations
from moodlog.utils.reporting.analytics.health import describe_metric_link, find_health_correlations
from moodlog.utils.reporting.analytics.stats_kernel import pearson_correlation
from moodlog.utils.reporting.analytics.temporal import (
    active_behavior_records,
    daily_log_counts,
    daily_mood_averages,
    mood_records_in_window,
    sentiment_by_weekday,
)
from moodlog.utils.shared_utils import WEEKDAY_NAMES, today_local

logger = logging.getLogger(__name__)

SNAPSHOT_STRENGTH = 0.15
MOST_TRACKED_STRENGTH = 0.15
WISDOM_STRENGTH = 0.1

# (lowest count, highest count or None, title, strength, description template)
MILESTONES = (
    (1, 5, "You've Started", 0.2,
     "You've logged {n} times. Keep checking in and patterns will start to appear."),
    (10, 24, "Building Momentum", 0.25,
     "{n} logs in the last {days} days. Your data is starting to show real patterns."),
    (25, None, "Rich Dataset", 0.3,
     "With {n} logs in the last {days} days, your insights rest on a solid amount of data."),
)

WISDOM = (
    "Habits are neither good nor bad. Noticing how they feel is where insight starts.",
    "Small, honest check-ins add up to a clearer picture than perfect streaks.",
    "Your mood is information, not a grade.",
    "Patterns take time to surface. Every log makes the next insight sharper.",
    "Curiosity works better than judgment when you look at your own habits.",
    "There is no right way to feel today. Noticing it is enough.",
)


@dataclass
class InsightContext:
    """Everything the rules read, aggregated once per generate_insights call."""
    today: date
    window_days: int
    settings: EngineSettings
    behavior_records: List[BehaviorRecord] = field(default_factory=list)
    mood_records: List[MoodRecord] = field(default_factory=list)
    daily_mood: Dict[date, float] = field(default_factory=dict)
    weekday_mood: Dict[int, float] = field(default_factory=dict)
    daily_counts: Dict[date, int] = field(default_factory=dict)
    correlations: List[CorrelationResult] = field(default_factory=list)
    health_results: List[HealthCorrelationResult] = field(default_factory=list)

    @property
    def total_logs(self) -> int:
        return len(self.behavior_records) + len(self.mood_records)

    @property
    def sentiments(self) -> List[int]:
        return [r.score for r in self.behavior_records] + [r.score for r in self.mood_records]


def build_context(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    health_samples: Optional[Iterable[HealthSample]] = None,
    window_days: Optional[int] = None,
    today: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
) -> InsightContext:
    settings = settings or EngineSettings()
    window_days = settings.window_days if window_days is None else window_days
    today = today_local(today)
    behavior_records = list(behavior_records)
    mood_records = list(mood_records or [])

    return InsightContext(
        today=today,
        window_days=window_days,
        settings=settings,
        behavior_records=active_behavior_records(behavior_records, window_days, today),
        mood_records=mood_records_in_window(mood_records, window_days, today),
        daily_mood=daily_mood_averages(behavior_records, mood_records, window_days, today),
        weekday_mood=sentiment_by_weekday(behavior_records, mood_records, window_days, today),
        daily_counts=daily_log_counts(behavior_records, window_days, today),
        correlations=find_mood_correlations(behavior_records, mood_records, window_days, today),
        health_results=find_health_correlations(
            health_samples or [], behavior_records, mood_records, window_days, today,
            min_samples=settings.min_health_samples,
            exclude_zero_steps=settings.exclude_zero_steps,
        ),
    )


# ---------- Rules ----------


def insight_habit_correlations(ctx: InsightContext) -> List[Insight]:
    threshold = ctx.settings.insight_threshold
    strong_enough = [
        c for c in ctx.correlations
        if c.coefficient is not None and abs(c.coefficient) > threshold
    ]
    insights = []
    for corr in strong_enough[:ctx.settings.top_habit_insights]:
        r = corr.coefficient
        name = corr.habit.name
        insights.append(Insight(
            category=InsightCategory.HABIT_CORRELATION,
            title=f"Pattern with {name}",
            description=f"When you log {name}, your mood tends to be {'higher' if r > 0 else 'lower'}.",
            strength=abs(r),
            related_habit=corr.habit,
        ))
    return insights


def insight_weekly_pattern(ctx: InsightContext) -> List[Insight]:
    if len(ctx.weekday_mood) < 2:
        return []
    ordered = sorted(ctx.weekday_mood.items())
    best_day, best = max(ordered, key=lambda kv: kv[1])
    worst_day, worst = min(ordered, key=lambda kv: kv[1])
    spread = best - worst
    if spread <= ctx.settings.weekly_spread:
        logger.debug(f"Weekday spread {spread:.2f} too small for a weekly pattern")
        return []
    return [Insight(
        category=InsightCategory.TEMPORAL_PATTERN,
        title="Weekly Pattern",
        description=(
            f"Your mood tends to be highest on {WEEKDAY_NAMES[best_day]} "
            f"and lowest on {WEEKDAY_NAMES[worst_day]}."),
        strength=min(spread / 5.0, 1.0),
    )]


def insight_logging_frequency(ctx: InsightContext) -> List[Insight]:
    days = sorted(ctx.daily_mood)
    if len(days) < ctx.settings.min_frequency_days:
        return []
    counts = [float(ctx.daily_counts.get(d, 0)) for d in days]
    moods = [ctx.daily_mood[d] for d in days]
    r = pearson_correlation(counts, moods)
    if r is None or abs(r) <= ctx.settings.insight_threshold:
        return []
    return [Insight(
        category=InsightCategory.HABIT_CORRELATION,
        title="Logging & Mood",
        description=f"On days you log more, your mood tends to be {'higher' if r > 0 else 'lower'}.",
        strength=abs(r) * ctx.settings.frequency_weight,
    )]


def insight_health_correlations(ctx: InsightContext) -> List[Insight]:
    insights = []
    for result in ctx.health_results:
        r = result.coefficient
        if r is None or abs(r) <= ctx.settings.insight_threshold:
            continue
        insights.append(Insight(
            category=InsightCategory.HEALTH_CORRELATION,
            title=f"{result.metric.display_name} & Mood",
            description=describe_metric_link(result.metric, r),
            strength=abs(r),
        ))
    return insights


def insight_mood_snapshot(ctx: InsightContext) -> List[Insight]:
    sentiments = ctx.sentiments
    if not sentiments:
        return []
    avg = sum(sentiments) / len(sentiments)
    return [Insight(
        category=InsightCategory.TEMPORAL_PATTERN,
        title="Mood Snapshot",
        description=(
            f"Your average mood over the last {ctx.window_days} days is {avg:.1f}/6 "
            f"({sentiment_label(avg)}) across {len(sentiments)} check-ins."),
        strength=SNAPSHOT_STRENGTH,
    )]


def insight_most_tracked_habit(ctx: InsightContext) -> List[Insight]:
    counts = Counter(r.habit for r in ctx.behavior_records)
    if not counts:
        return []
    habit, n = min(counts.items(), key=lambda kv: (-kv[1], kv[0].name))
    if n < 2:
        return []
    return [Insight(
        category=InsightCategory.HABIT_CORRELATION,
        title="Most Tracked Habit",
        description=f"{habit.name} is your most-logged habit with {n} entries in the last {ctx.window_days} days.",
        strength=MOST_TRACKED_STRENGTH,
        related_habit=habit,
    )]


def milestone_for(total_logs: int):
    """Return the (title, strength, template) band for a log count, or None."""
    for low, high, title, strength, template in MILESTONES:
        if total_logs >= low and (high is None or total_logs <= high):
            return title, strength, template
    return None


def insight_milestones(ctx: InsightContext) -> List[Insight]:
    band = milestone_for(ctx.total_logs)
    if band is None:
        return []
    title, strength, template = band
    return [Insight(
        category=InsightCategory.MILESTONE,
        title=title,
        description=template.format(n=ctx.total_logs, days=ctx.window_days),
        strength=strength,
    )]


def wisdom_for(day: date) -> str:
    """Same statement for everyone on a given calendar day."""
    return WISDOM[day.timetuple().tm_yday % len(WISDOM)]


def insight_wisdom(ctx: InsightContext) -> List[Insight]:
    if ctx.total_logs >= ctx.settings.wisdom_log_limit:
        return []
    return [Insight(
        category=InsightCategory.MILESTONE,
        title="Daily Reflection",
        description=wisdom_for(ctx.today),
        strength=WISDOM_STRENGTH,
    )]


InsightRule = Callable[[InsightContext], List[Insight]]

DEFAULT_RULES: Sequence[InsightRule] = (
    insight_habit_correlations,
    insight_weekly_pattern,
    insight_logging_frequency,
    insight_health_correlations,
    insight_mood_snapshot,
    insight_most_tracked_habit,
    insight_milestones,
    insight_wisdom,
)


# ---------- Main Insight Generator ----------


def run_rules(ctx: InsightContext, rules: Sequence[InsightRule] = DEFAULT_RULES) -> List[Insight]:
    insights = []
    for rule in rules:
        emitted = rule(ctx)
        if not emitted:
            logger.debug(f"{rule.__name__}: nothing to report")
        insights.extend(emitted)
    # stable sort keeps rule order among equal strengths
    return sorted(insights, key=lambda i: i.strength, reverse=True)


def generate_insights(
    behavior_records: Iterable[BehaviorRecord],
    mood_records: Iterable[MoodRecord],
    health_samples: Optional[Iterable[HealthSample]] = None,
    window_days: Optional[int] = None,
    today: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
    rules: Sequence[InsightRule] = DEFAULT_RULES,
) -> List[Insight]:
    """
    Evaluate every rule over the window and return all insights, strongest first.
    Callers truncate to however many they want to show.
    """
    ctx = build_context(behavior_records, mood_records, health_samples, window_days, today, settings)
    insights = run_rules(ctx, rules)
    logger.info(
        f"Generated {len(insights)} insights from {ctx.total_logs} logs over {ctx.window_days} days")
    return insights
