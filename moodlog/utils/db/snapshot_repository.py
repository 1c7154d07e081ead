# moodlog/utils/db/snapshot_repository.py
'''
Read-only loader for a record snapshot exported by the app's store.

Expected JSON layout:
    {
      "habits":  [{"id": "h1", "name": "Water", "tracking_style": "quantity", ...}],
      "entries": [{"habit_id": "h1", "timestamp": "...", "sentiment": 5, "value": 2}],
      "moods":   [{"timestamp": "...", "sentiment": 4}],
      "health":  [{"metric": "sleep", "day": "2026-10-01", "value": 7.5}]
    }
'''

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from moodlog.utils.db.models import (
    BehaviorRecord,
    Habit,
    HealthMetric,
    HealthSample,
    MoodRecord,
    TrackingStyle,
)
from moodlog.utils.error_handler import (
    SnapshotError,
    ValidationError,
    require,
    safe_convert_to_float,
)
from moodlog.utils.shared_utils import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    habits: List[Habit] = field(default_factory=list)
    entries: List[BehaviorRecord] = field(default_factory=list)
    moods: List[MoodRecord] = field(default_factory=list)
    health: List[HealthSample] = field(default_factory=list)

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    def entries_for(self, habit: Habit) -> List[BehaviorRecord]:
        return [e for e in self.entries if e.habit.id == habit.id]


def _timestamp(data: dict, what: str):
    raw = data.get("timestamp") or data.get("day")
    if raw is None:
        raise ValidationError(f"{what} is missing 'timestamp'")
    try:
        return parse_timestamp(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} has an invalid timestamp: {raw!r}")


def _sentiment(data: dict, what: str) -> int:
    raw = require(data, "sentiment", what)
    value = safe_convert_to_float(raw, "sentiment")
    if not math.isfinite(value):
        raise ValidationError(f"{what} has a non-finite sentiment: {raw!r}")
    # stored as given; models clamp into 1..6 when the engine reads it
    if not 1 <= value <= 6:
        logger.warning(f"{what} sentiment {raw!r} is outside 1-6 and will be clamped")
    return int(round(value))


def habit_from_dict(data: dict) -> Habit:
    habit_id = str(require(data, "id", "habit"))
    style_raw = data.get("tracking_style", TrackingStyle.OCCURRENCE.value)
    try:
        style = TrackingStyle(style_raw)
    except ValueError:
        raise ValidationError(f"habit {habit_id} has unknown tracking style {style_raw!r}")
    return Habit(
        id=habit_id,
        name=str(data.get("name") or habit_id),
        color_hex=data.get("color_hex", "#007AFF"),
        icon=data.get("icon", "circle.fill"),
        tracking_style=style,
        is_archived=bool(data.get("is_archived", False)),
    )


def entry_from_dict(data: dict, habits: Dict[str, Habit]) -> BehaviorRecord:
    habit_id = str(require(data, "habit_id", "entry"))
    habit = habits.get(habit_id)
    if habit is None:
        raise ValidationError(f"entry references unknown habit {habit_id!r}")
    what = f"entry for {habit.name}"
    return BehaviorRecord(
        habit=habit,
        timestamp=_timestamp(data, what),
        sentiment=_sentiment(data, what),
        value=safe_convert_to_float(data.get("value"), "value"),
        note=data.get("note"),
        context_tags=tuple(data.get("context_tags") or ()),
    )


def mood_from_dict(data: dict) -> MoodRecord:
    return MoodRecord(
        timestamp=_timestamp(data, "mood record"),
        sentiment=_sentiment(data, "mood record"),
        note=data.get("note"),
        context_tags=tuple(data.get("context_tags") or ()),
    )


def health_from_dict(data: dict) -> HealthSample:
    metric_raw = require(data, "metric", "health sample")
    try:
        metric = HealthMetric(metric_raw)
    except ValueError:
        raise ValidationError(f"unknown health metric {metric_raw!r}")
    return HealthSample(
        metric=metric,
        timestamp=_timestamp(data, f"{metric.value} sample"),
        value=safe_convert_to_float(require(data, "value", "health sample"), "value"),
    )


def snapshot_from_dict(doc: dict) -> Snapshot:
    if not isinstance(doc, dict):
        raise SnapshotError("snapshot must be a JSON object")
    habits = [habit_from_dict(h) for h in doc.get("habits", [])]
    by_id = {h.id: h for h in habits}
    snapshot = Snapshot(
        habits=habits,
        entries=[entry_from_dict(e, by_id) for e in doc.get("entries", [])],
        moods=[mood_from_dict(m) for m in doc.get("moods", [])],
        health=[health_from_dict(s) for s in doc.get("health", [])],
    )
    logger.info(
        f"Loaded snapshot: {len(snapshot.habits)} habits, {len(snapshot.entries)} entries, "
        f"{len(snapshot.moods)} moods, {len(snapshot.health)} health samples")
    return snapshot


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"cannot read {path}: {e}")
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path} is not valid JSON: {e}")
    return snapshot_from_dict(doc)
