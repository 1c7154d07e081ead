# moodlog/utils/reporting/analytics/heatmap.py
'''
Moodlog - Heatmap Grid Builder
Maps one habit's entries onto a week-aligned calendar grid: one cell per day carrying
the entry count, average sentiment and summed quantity, chunked into rows of 7.
'''

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from moodlog.utils.db.models import BehaviorRecord, Habit, HeatmapCell, HeatmapGrid
from moodlog.utils.shared_utils import day_range, local_day, start_of_week, today_local

logger = logging.getLogger(__name__)

DEFAULT_WEEKS = 8
DAYS_PER_ROW = 7


def heatmap_window(weeks: int, today: Optional[date] = None, first_weekday: int = 1) -> Tuple[date, date]:
    """(first day, last day) of the grid: the week start containing today - weeks*7, through today."""
    end = today_local(today)
    return start_of_week(end - timedelta(days=weeks * 7), first_weekday), end


def build_cell(day: date, entries: List[BehaviorRecord]) -> HeatmapCell:
    if not entries:
        return HeatmapCell(day=day, entry_count=0)
    scores = [e.score for e in entries]
    values = [e.value for e in entries if e.value is not None]
    total = sum(values) if values else None
    return HeatmapCell(
        day=day,
        entry_count=len(entries),
        average_sentiment=sum(scores) / len(scores),
        total_value=total if total else None,
    )


def build_heatmap(
    habit: Habit,
    entries: Iterable[BehaviorRecord],
    weeks: int = DEFAULT_WEEKS,
    today: Optional[date] = None,
    first_weekday: int = 1,
) -> HeatmapGrid:
    """
    Rows of 7 consecutive days, oldest first. `weeks` counts whole weeks before the
    current one, so weeks=0 is just the current week. The last row may be partial; it
    is not padded here.
    """
    start, end = heatmap_window(weeks, today, first_weekday)

    by_day = defaultdict(list)
    for entry in entries:
        if entry.habit.id != habit.id:
            continue
        day = local_day(entry.timestamp)
        if start <= day <= end:
            by_day[day].append(entry)

    grid: HeatmapGrid = []
    row: List[HeatmapCell] = []
    for day in day_range(start, end):
        row.append(build_cell(day, by_day.get(day, [])))
        if len(row) == DAYS_PER_ROW:
            grid.append(row)
            row = []
    if row:
        grid.append(row)

    logger.debug(
        f"Heatmap for {habit.name}: {len(grid)} rows from {start} to {end}, "
        f"{sum(len(v) for v in by_day.values())} entries")
    return grid


def split_into_months(grid: HeatmapGrid, first_weekday: int = 1) -> List[Tuple[date, HeatmapGrid]]:
    """
    Regroup a grid by calendar month. Each month is returned as (first of month, rows),
    with zero-entry padding cells prepended so the month's first cell sits in its
    weekday column. Padding cells are always dated before that first cell.
    """
    cells = sorted((c for row in grid for c in row), key=lambda c: c.day)
    months: List[Tuple[date, List[HeatmapCell]]] = []
    for cell in cells:
        key = cell.day.replace(day=1)
        if months and months[-1][0] == key:
            months[-1][1].append(cell)
        else:
            months.append((key, [cell]))

    result = []
    for key, month_cells in months:
        first = month_cells[0].day
        pad_count = (first.isoweekday() - first_weekday) % 7
        row = [
            HeatmapCell(day=first - timedelta(days=pad_count - i), entry_count=0)
            for i in range(pad_count)
        ]
        rows: HeatmapGrid = []
        for cell in month_cells:
            row.append(cell)
            if len(row) == DAYS_PER_ROW:
                rows.append(row)
                row = []
        if row:
            rows.append(row)
        result.append((key, rows))
    return result
