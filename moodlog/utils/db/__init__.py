# moodlog/utils/db/__init__.py

"""
Record models and the read-only snapshot repository.
"""

from moodlog.utils.db.models import (
    BehaviorRecord,
    CorrelationResult,
    Habit,
    HealthCorrelationResult,
    HealthMetric,
    HealthSample,
    HeatmapCell,
    Insight,
    InsightCategory,
    MoodRecord,
    TrackingStyle,
)
from moodlog.utils.db.snapshot_repository import Snapshot, load_snapshot, snapshot_from_dict
