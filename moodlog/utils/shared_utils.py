# moodlog/utils/shared_utils.py
'''
Moodlog shared time helpers.
All calendar bucketing (day, weekday, hour) happens in the local time zone so that a
"day" matches what the user saw on their clock when they logged.
'''

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional

from dateutil import tz

WEEKDAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}


def now_utc() -> datetime:
    """
    Return current time as UTC-aware datetime.
    """
    return datetime.now(timezone.utc)


def to_local(ts: datetime) -> datetime:
    """
    Aware timestamps are converted to the local zone; naive ones are taken as
    local wall-clock time already.
    """
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(tz.tzlocal())


def local_day(ts: datetime) -> date:
    return to_local(ts).date()


def local_weekday(ts: datetime) -> int:
    """ISO weekday (1=Monday .. 7=Sunday) of the timestamp's local day."""
    return to_local(ts).isoweekday()


def local_hour(ts: datetime) -> int:
    return to_local(ts).hour


def today_local(today: Optional[date] = None) -> date:
    if today is not None:
        return today
    return now_utc().astimezone(tz.tzlocal()).date()


def in_window(ts: datetime, window_days: int, today: Optional[date] = None) -> bool:
    """True when the timestamp's local day lies within [today - window_days, today]."""
    end = today_local(today)
    day = local_day(ts)
    return end - timedelta(days=window_days) <= day <= end


def day_range(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def start_of_week(day: date, first_weekday: int = 1) -> date:
    """
    Return the first day of the week containing `day`, where `first_weekday`
    is an ISO weekday (1=Monday .. 7=Sunday).
    """
    offset = (day.isoweekday() - first_weekday) % 7
    return day - timedelta(days=offset)


def parse_timestamp(value) -> datetime:
    """Accept a datetime, a date, or an ISO-8601 string (a trailing 'Z' is allowed)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
