# moodlog/utils/reporting/analytics/report_utils.py
'''
Moodlog CLI - Reporting Utilities Module
Terminal rendering for engine output: trend tables, calendar heatmaps, weekday/hour bars
and correlation tables, using Rich.
'''

from typing import Dict, List

from rich.console import Console
from rich.table import Table
from rich.text import Text

from moodlog.utils.db.models import HeatmapGrid, Insight, TrendPoint
from moodlog.utils.shared_utils import WEEKDAY_NAMES

console = Console()

# Average sentiment (rounded) → cell colour
SENTIMENT_COLORS = {
    1: "grey50",
    2: "tan",
    3: "dark_goldenrod",
    4: "dark_sea_green",
    5: "green3",
    6: "bright_green",
}

_pd = None


def get_pandas():
    """Lazy load pandas only when needed for reports"""
    global _pd
    if _pd is None:
        import pandas as pd
        _pd = pd
    return _pd


def trend_dataframe(points: List[TrendPoint]):
    """Gap-filled series as a DataFrame indexed by day; gaps become NaN."""
    pd = get_pandas()
    df = pd.DataFrame(
        {"mood": [p.value for p in points]},
        index=pd.Index([p.day for p in points], name="day"),
        dtype=float,
    )
    # 7-day rolling mean tolerates gaps as long as one day in the window has data
    df["rolling_7d"] = df["mood"].rolling(7, min_periods=1).mean()
    return df


def print_dataframe(df, title: str = None):
    if df.empty:
        console.print("[yellow]⚠️ No data found.[/yellow]")
        return
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column(df.index.name or "")
    for col in df.columns:
        table.add_column(str(col))
    for idx, row in df.iterrows():
        cells = ["-" if val != val else f"{val:.2f}" if isinstance(val, float) else str(val)
                 for val in row]
        table.add_row(str(idx), *cells)
    console.print(table)


def render_calendar_heatmap(grid: HeatmapGrid, title: str = "Heatmap"):
    """One line per week row; each day is a coloured block (dim dot for no entries)."""
    console.print(f"\n[bold blue]{title}:[/bold blue]")
    for row in grid:
        line = Text(f"{row[0].day.isoformat()}  ")
        for cell in row:
            if not cell.has_data:
                line.append("· ", style="grey37")
                continue
            color = SENTIMENT_COLORS[min(max(int(round(cell.average_sentiment)), 1), 6)]
            line.append("█ ", style=color)
        total = sum(c.entry_count for c in row)
        line.append(f" {total} entries", style="italic")
        console.print(line)


def render_bars(averages: Dict[int, float], labels: Dict[int, str], title: str):
    """Horizontal bars on the 1-6 sentiment scale."""
    console.print(f"\n[bold blue]{title}:[/bold blue]")
    if not averages:
        console.print("[yellow]No data in this window.[/yellow]")
        return
    for key in sorted(averages):
        value = averages[key]
        bar = "[green]█[/green]" * int(round(value / 6 * 20))
        console.print(f"[bold]{labels.get(key, str(key)):>9}:[/bold] {bar} [italic]{value:.1f}[/italic]")


def render_weekday_bars(averages: Dict[int, float]):
    render_bars(averages, {k: v[:3] for k, v in WEEKDAY_NAMES.items()}, "Mood by Weekday")


def render_hour_bars(averages: Dict[int, float]):
    render_bars(averages, {h: f"{h:02d}:00" for h in range(24)}, "Mood by Hour")


def render_insights(insights: List[Insight]):
    if not insights:
        console.print("[yellow]⚠️ Not enough data for insights yet. Keep logging![/yellow]")
        return
    table = Table(title="💡 Insights", show_lines=True)
    table.add_column("Strength", style="cyan", justify="right")
    table.add_column("Insight", style="bold")
    table.add_column("Details")
    for ins in insights:
        table.add_row(f"{ins.strength:.2f}", ins.title, ins.description)
    console.print(table)
