# moodlog/utils/db/models.py
'''
Value objects shared by the correlation engine.
Records (habits, behavior entries, moods, health samples) are read-only snapshots
handed to the engine; everything else here is derived and recomputed on demand.
'''
import logging
import math
from enum import Enum
from typing import List, Optional
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime

from moodlog.utils.error_handler import ValidationError

logger = logging.getLogger(__name__)

SENTIMENT_MIN = 1
SENTIMENT_MAX = 6

SENTIMENT_LABELS = {
    1: "Awful",
    2: "Rough",
    3: "Meh",
    4: "Okay",
    5: "Good",
    6: "Great",
}


def clamp_sentiment(value) -> int:
    """
    Clamp a raw sentiment into the 1..6 scale. Infinities clamp to the nearest end;
    NaN has no place on the scale and raises ValidationError.
    """
    raw = float(value)
    if math.isnan(raw):
        raise ValidationError(f"Sentiment {value!r} is not a number")
    if math.isinf(raw):
        score = SENTIMENT_MAX if raw > 0 else SENTIMENT_MIN
    else:
        score = int(round(raw))
    clamped = min(max(score, SENTIMENT_MIN), SENTIMENT_MAX)
    if clamped != score or math.isinf(raw):
        # the snapshot loader already warns once per record
        logger.debug(
            f"Sentiment {value!r} outside {SENTIMENT_MIN}-{SENTIMENT_MAX}, clamped to {clamped}")
    return clamped


def sentiment_label(value) -> str:
    return SENTIMENT_LABELS[clamp_sentiment(value)]


class BaseModel:
    def asdict(self) -> dict:
        """
        Convert dataclass to dict, but keep raw types (Enum, date) for internal use.
        """
        return asdict(self)

    def to_dict(self) -> dict:
        """
        Convert dataclass to JSON-serializable dict:
         - Enum fields → their .value
         - date/datetime fields → ISO-format strings
         - Nested models and lists of models converted recursively
        """
        result = {}
        for f in fields(self.__class__):
            result[f.name] = _serialize(getattr(self, f.name))
        return result

    def __repr__(self):
        cname = self.__class__.__name__
        fields_str = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{cname}({fields_str})"


def _serialize(val):
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, (date, datetime)):
        return val.isoformat()
    if hasattr(val, "to_dict") and callable(val.to_dict):
        return val.to_dict()
    if isinstance(val, (list, tuple)):
        return [_serialize(item) for item in val]
    if isinstance(val, dict):
        return {str(_serialize(k)): _serialize(v) for k, v in val.items()}
    return val


class TrackingStyle(Enum):
    OCCURRENCE = "occurrence"
    DURATION = "duration"
    QUANTITY = "quantity"

    @property
    def unit_label(self) -> Optional[str]:
        return {"duration": "minutes", "quantity": "times"}.get(self.value)


class HealthMetric(Enum):
    SLEEP = "sleep"
    STEPS = "steps"
    RESTING_HEART_RATE = "resting_heart_rate"
    HRV = "hrv"

    @property
    def display_name(self) -> str:
        return {
            "sleep": "Sleep",
            "steps": "Activity",
            "resting_heart_rate": "Resting Heart Rate",
            "hrv": "Heart Rate Variability",
        }[self.value]

    @property
    def unit(self) -> str:
        return {
            "sleep": "hours",
            "steps": "steps",
            "resting_heart_rate": "bpm",
            "hrv": "ms",
        }[self.value]


class InsightCategory(Enum):
    HABIT_CORRELATION = "habit_correlation"
    TEMPORAL_PATTERN = "temporal_pattern"
    HEALTH_CORRELATION = "health_correlation"
    MILESTONE = "milestone"


@dataclass(frozen=True, repr=False)
class Habit(BaseModel):
    id: str
    name: str
    color_hex: str = "#007AFF"
    icon: str = "circle.fill"
    tracking_style: TrackingStyle = TrackingStyle.OCCURRENCE
    is_archived: bool = False


@dataclass(frozen=True, repr=False)
class BehaviorRecord(BaseModel):
    habit: Habit
    timestamp: datetime
    sentiment: int
    value: Optional[float] = None
    note: Optional[str] = None
    context_tags: tuple = ()

    @property
    def score(self) -> int:
        return clamp_sentiment(self.sentiment)


@dataclass(frozen=True, repr=False)
class MoodRecord(BaseModel):
    timestamp: datetime
    sentiment: int
    note: Optional[str] = None
    context_tags: tuple = ()

    @property
    def score(self) -> int:
        return clamp_sentiment(self.sentiment)


@dataclass(frozen=True, repr=False)
class HealthSample(BaseModel):
    metric: HealthMetric
    timestamp: datetime
    value: float


# ─── Correlation outcome ─────────────────────────────────────────────────────


class Correlation:
    """Either a computed coefficient or an explicit lack of one."""

    @property
    def coefficient(self) -> Optional[float]:
        return None


@dataclass(frozen=True)
class Computed(Correlation):
    value: float

    @property
    def coefficient(self) -> Optional[float]:
        return self.value


@dataclass(frozen=True)
class InsufficientData(Correlation):
    reason: str = "insufficient data"


def strength_band(r: float) -> str:
    """Band |r| into weak / mild / moderate / strong."""
    magnitude = abs(r)
    if magnitude > 0.6:
        return "strong"
    if magnitude > 0.3:
        return "moderate"
    if magnitude > 0.1:
        return "mild"
    return "weak"


def mood_direction(r: float) -> str:
    return "improves mood" if r > 0 else "lowers mood"


class _StrengthMixin:
    """Shared strength vocabulary for habit and health results."""

    @property
    def coefficient(self) -> Optional[float]:
        return self.correlation.coefficient

    @property
    def strength_label(self) -> str:
        r = self.coefficient
        if r is None:
            return "insufficient data"
        return strength_band(r)

    @property
    def strength_description(self) -> str:
        r = self.coefficient
        if r is None:
            return "insufficient data"
        band = strength_band(r)
        if band == "weak":
            return band
        return f"{band} · {mood_direction(r)}"

    @property
    def normalized_strength(self) -> float:
        r = self.coefficient
        return 0.0 if r is None else min(abs(r), 1.0)

    @property
    def is_positive(self) -> bool:
        return (self.coefficient or 0.0) > 0


@dataclass(repr=False)
class CorrelationResult(_StrengthMixin, BaseModel):
    habit: Habit
    correlation: Correlation
    sample_size: int
    window_days: int
    paired_days: int = 0
    average_mood_when_logged: Optional[float] = None

    @property
    def strength_label(self) -> str:
        if self.coefficient is None and self.average_mood_when_logged is not None:
            return "early data"
        return super().strength_label

    @property
    def strength_description(self) -> str:
        if self.coefficient is None and self.average_mood_when_logged is not None:
            return f"early data · avg mood {self.average_mood_when_logged:.1f} when logged"
        return super().strength_description

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["correlation"] = self.coefficient
        d["strength"] = self.strength_description
        return d


@dataclass(repr=False)
class HealthCorrelationResult(_StrengthMixin, BaseModel):
    metric: HealthMetric
    correlation: Correlation
    sample_size: int
    window_days: int
    average_metric: Optional[float] = None
    average_mood: Optional[float] = None

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["correlation"] = self.coefficient
        d["strength"] = self.strength_description
        return d


@dataclass(repr=False)
class HabitMoodComparison(BaseModel):
    habit: Habit
    average_mood_with: Optional[float]
    average_mood_without: Optional[float]
    days_with_habit: int
    days_without_habit: int
    total_days: int

    @property
    def difference(self) -> Optional[float]:
        if self.average_mood_with is None or self.average_mood_without is None:
            return None
        return self.average_mood_with - self.average_mood_without


@dataclass(repr=False)
class HabitStats(BaseModel):
    habit: Habit
    window_days: int
    total_entries: int
    average_sentiment: Optional[float]
    entries_per_day: dict = field(default_factory=dict)
    average_entries_per_day: float = 0.0
    total_value: Optional[float] = None


@dataclass(frozen=True, repr=False)
class HeatmapCell(BaseModel):
    day: date
    entry_count: int
    average_sentiment: Optional[float] = None
    total_value: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.entry_count > 0


@dataclass(frozen=True, repr=False)
class TrendPoint(BaseModel):
    day: date
    value: Optional[float] = None


@dataclass(repr=False)
class Insight(BaseModel):
    category: InsightCategory
    title: str
    description: str
    strength: float
    related_habit: Optional[Habit] = None


HeatmapGrid = List[List[HeatmapCell]]
