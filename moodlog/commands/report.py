# moodlog/commands/report.py
'''
Moodlog CLI - Report commands
Runs the correlation engine over a record snapshot and renders the results.
'''
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import moodlog.config.config_manager as cf
from moodlog.utils.db.snapshot_repository import Snapshot, load_snapshot
from moodlog.utils.error_handler import ValidationError, handle_cli_errors
from moodlog.utils.reporting.analytics import report_utils
from moodlog.utils.reporting.analytics.correlation import find_mood_correlations, mood_with_and_without
from moodlog.utils.reporting.analytics.descriptive import habit_stats
from moodlog.utils.reporting.analytics.health import find_health_correlations
from moodlog.utils.reporting.analytics.heatmap import build_heatmap, split_into_months
from moodlog.utils.reporting.analytics.temporal import (
    sentiment_by_hour_of_day,
    sentiment_by_weekday,
    sentiment_trend,
)
from moodlog.utils.reporting.insight_engine import generate_insights

app = typer.Typer(help="Correlations, trends, heatmaps and insights from a snapshot.")
console = Console()

snapshot_option = typer.Option(
    ..., "--snapshot", "-s", exists=True, dir_okay=False,
    help="JSON snapshot of habits, entries, moods and health samples.")
days_option = typer.Option(
    None, "--days", "-d", min=1, help="Lookback window in days (default from config).")


def _days(days: Optional[int], settings: cf.EngineSettings) -> int:
    return days if days is not None else settings.window_days


def _habit(snapshot: Snapshot, habit_id: str):
    habit = snapshot.get_habit(habit_id)
    if habit is None:
        raise ValidationError(f"no habit with id {habit_id!r} in snapshot")
    return habit


@app.command("insights")
@handle_cli_errors("report insights")
def insights(
    snapshot: Path = snapshot_option,
    days: Optional[int] = days_option,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Show at most N insights."),
):
    """💡 Ranked natural-language insights."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    found = generate_insights(
        snap.entries, snap.moods, snap.health,
        window_days=_days(days, settings), settings=settings)
    report_utils.render_insights(found[:limit] if limit else found)


@app.command("correlations")
@handle_cli_errors("report correlations")
def correlations(snapshot: Path = snapshot_option, days: Optional[int] = days_option):
    """🔗 Habits ranked by how strongly they move with your mood."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    window = _days(days, settings)
    results = find_mood_correlations(snap.entries, snap.moods, window, habits=snap.habits)
    if not results:
        console.print("[yellow]⚠️ No habit entries in this window.[/yellow]")
        return
    table = Table(title=f"Habit ↔ Mood (last {window} days)", show_lines=True)
    table.add_column("Habit", style="bold")
    table.add_column("r", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Strength")
    for res in results:
        r = res.coefficient
        table.add_row(res.habit.name, "-" if r is None else f"{r:+.2f}",
                      str(res.sample_size), res.strength_description)
    console.print(table)


@app.command("health")
@handle_cli_errors("report health")
def health(snapshot: Path = snapshot_option, days: Optional[int] = days_option):
    """❤️ Health metrics ranked by correlation with mood."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    window = _days(days, settings)
    results = find_health_correlations(
        snap.health, snap.entries, snap.moods, window,
        min_samples=settings.min_health_samples,
        exclude_zero_steps=settings.exclude_zero_steps)
    if not results:
        console.print("[yellow]⚠️ No health samples in this snapshot.[/yellow]")
        return
    table = Table(title=f"Health ↔ Mood (last {window} days)", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("r", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Strength")
    for res in results:
        r = res.coefficient
        avg = "-" if res.average_metric is None else f"{res.average_metric:.1f} {res.metric.unit}"
        table.add_row(res.metric.display_name, "-" if r is None else f"{r:+.2f}",
                      str(res.sample_size), avg, res.strength_description)
    console.print(table)


@app.command("trend")
@handle_cli_errors("report trend")
def trend(snapshot: Path = snapshot_option, days: Optional[int] = days_option):
    """📈 Daily mood, one row per day (gaps shown as '-')."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    window = _days(days, settings)
    points = sentiment_trend(snap.entries, snap.moods, window)
    report_utils.print_dataframe(
        report_utils.trend_dataframe(points), title=f"Mood trend (last {window} days)")


@app.command("patterns")
@handle_cli_errors("report patterns")
def patterns(snapshot: Path = snapshot_option, days: Optional[int] = days_option):
    """🗓 Average mood by weekday and by hour of day."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    window = _days(days, settings)
    report_utils.render_weekday_bars(sentiment_by_weekday(snap.entries, snap.moods, window))
    report_utils.render_hour_bars(sentiment_by_hour_of_day(snap.entries, snap.moods, window))


@app.command("heatmap")
@handle_cli_errors("report heatmap")
def heatmap(
    habit_id: str = typer.Argument(..., help="Habit id from the snapshot."),
    snapshot: Path = snapshot_option,
    weeks: Optional[int] = typer.Option(None, "--weeks", "-w", min=0, help="Weeks to look back."),
    by_month: bool = typer.Option(False, "--by-month", help="Group rows by calendar month."),
):
    """🟩 Calendar heatmap for one habit."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    habit = _habit(snap, habit_id)
    grid = build_heatmap(
        habit, snap.entries_for(habit),
        weeks=settings.heatmap_weeks if weeks is None else weeks,
        first_weekday=settings.first_weekday)
    if not by_month:
        report_utils.render_calendar_heatmap(grid, title=habit.name)
        return
    for month_start, rows in split_into_months(grid, settings.first_weekday):
        report_utils.render_calendar_heatmap(rows, title=month_start.strftime("%B %Y"))


@app.command("habit")
@handle_cli_errors("report habit")
def habit(
    habit_id: str = typer.Argument(..., help="Habit id from the snapshot."),
    snapshot: Path = snapshot_option,
    days: Optional[int] = days_option,
):
    """📋 Stats for one habit, and mood with vs. without it."""
    settings = cf.get_engine_settings()
    snap = load_snapshot(snapshot)
    window = _days(days, settings)
    target = _habit(snap, habit_id)
    stats = habit_stats(target, snap.entries, window)
    comparison = mood_with_and_without(target, snap.entries, snap.moods, window)

    def fmt(value, spec=".1f"):
        return "-" if value is None else format(value, spec)

    unit = target.tracking_style.unit_label
    lines = [
        f"Entries: {stats.total_entries} over {len(stats.entries_per_day)} days "
        f"({stats.average_entries_per_day:.1f}/day when logged)",
        f"Average sentiment: {fmt(stats.average_sentiment)}",
    ]
    if unit:
        lines.append(f"Total: {fmt(stats.total_value, 'g')} {unit}")
    lines.append(
        f"Mood with: {fmt(comparison.average_mood_with)} ({comparison.days_with_habit} days) · "
        f"without: {fmt(comparison.average_mood_without)} ({comparison.days_without_habit} days)")
    console.print(Panel("\n".join(lines), title=f"{target.name} · last {window} days"))
