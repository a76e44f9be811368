"""
Command-line interface for the athlete injury-risk engine.

Provides commands for:
- Database setup and athlete registration
- Logging and deleting activities from JSON files
- Viewing per-body-part risk and workload history
- Running the daily recovery pass
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from athlete_risk.advice import format_body_part
from athlete_risk.config import EngineConfig, Settings
from athlete_risk.database import init_database
from athlete_risk.errors import RiskEngineError
from athlete_risk.schemas import (
    ActivityLogResult,
    Athlete,
    BodyPartWorkload,
    InjuryRiskSnapshot,
    RiskLevel,
)
from athlete_risk.service import InjuryRiskService

# Initialize Typer app and Rich console
app = typer.Typer(
    help="Athlete Injury Risk - per-body-part workload tracking and injury-risk scoring"
)
console = Console()

RISK_COLORS = {
    RiskLevel.MINIMAL: "green",
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "dark_orange",
    RiskLevel.CRITICAL: "red",
}


@app.callback()
def main(
    ctx: typer.Context,
    database: Optional[str] = typer.Option(
        None,
        "--database",
        "-d",
        help="Database URL (default: $ATHLETE_RISK_DATABASE_URL or sqlite:///athlete_risk.db)",
    ),
    engine_config: Optional[Path] = typer.Option(
        None,
        "--engine-config",
        "-c",
        help="JSON file overriding engine constants",
        exists=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Resolve settings once for every subcommand."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    settings = Settings.from_env()
    overrides = {}
    if database:
        overrides["database_url"] = database
    if engine_config:
        overrides["engine_config_path"] = engine_config
    ctx.obj = settings.model_copy(update=overrides)


def _service(ctx: typer.Context) -> InjuryRiskService:
    try:
        return InjuryRiskService.from_settings(ctx.obj)
    except (RiskEngineError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]✗ Failed to start engine: {e}[/red]")
        raise typer.Exit(1)


# ===== DISPLAY HELPER FUNCTIONS =====


def _risk_text(level: RiskLevel, percentage: int) -> str:
    color = RISK_COLORS[level]
    return f"[{color}]{percentage}% ({level.value})[/{color}]"


def _display_workloads(rows: List[BodyPartWorkload], title: str, show_date: bool = False):
    """
    Display body-part workload rows as a table.

    Args:
        rows: Rows to display
        title: Table title
        show_date: If True, adds a date column (for history views)
    """
    table = Table(title=title, box=box.ROUNDED)
    if show_date:
        table.add_column("Date", style="dim")
    table.add_column("Body Part", style="cyan")
    table.add_column("Risk", justify="right")
    table.add_column("Workload", justify="right")
    table.add_column("7-Day", justify="right")
    table.add_column("30-Day", justify="right")
    table.add_column("Recovery", justify="right")
    table.add_column("Activities", justify="right")

    for row in rows:
        cells = [
            format_body_part(row.body_part),
            _risk_text(row.risk_level, row.injury_risk_percentage),
            f"{row.workload_score:.1f}",
            f"{row.cumulative_7day:.1f}",
            f"{row.cumulative_30day:.1f}",
            f"{row.recovery_rate:.0f}%",
            str(row.activity_count),
        ]
        if show_date:
            cells.insert(0, row.date.isoformat())
        table.add_row(*cells)

    console.print(table)


def _display_snapshot(snapshot: Optional[InjuryRiskSnapshot]):
    """Display the athlete summary with its recommendations."""
    if snapshot is None:
        console.print("[yellow]No workload recorded for this day[/yellow]")
        return

    lines = [
        f"Overall risk: {_risk_text(snapshot.risk_level, snapshot.overall_risk_score)}",
        f"Training load: {snapshot.training_load_score:.1f}",
        f"Recovery: {snapshot.recovery_score:.0f}%   Fatigue: {snapshot.fatigue_index:.0f}",
    ]
    if snapshot.high_risk_body_parts:
        lines.append(f"High risk: [red]{', '.join(snapshot.high_risk_body_parts)}[/red]")
    if snapshot.medium_risk_body_parts:
        lines.append(f"Medium risk: [yellow]{', '.join(snapshot.medium_risk_body_parts)}[/yellow]")
    console.print(Panel("\n".join(lines), title=f"{snapshot.athlete_id} on {snapshot.date}", expand=False))

    if snapshot.recommendations:
        console.print("\n[bold]Recommendations:[/bold]")
        for rec in snapshot.recommendations:
            console.print(f"  • [bold]{rec.title}[/bold] ({rec.priority.value}): {rec.description}")


def _display_log_result(result: ActivityLogResult):
    activity = result.activity
    console.print(
        f"\n✓ Logged {activity.activity_type} activity [green]#{activity.id}[/green] "
        f"for {activity.athlete_id} on {activity.date}"
    )
    console.print(f"  Affected body parts: {', '.join(activity.affected_body_parts) or 'none'}")
    if result.failed_body_parts:
        console.print(f"[red]✗ Workload update failed for: {', '.join(result.failed_body_parts)}[/red]")
    if result.workload_updates:
        _display_workloads(result.workload_updates, "Updated Body Parts")
    _display_snapshot(result.injury_risk)


# ===== CLI COMMANDS =====


@app.command("init-db")
def init_db(ctx: typer.Context):
    """
    Create the database tables.
    """
    settings: Settings = ctx.obj
    try:
        init_database(settings.database_url, settings.store_timeout_seconds)
    except Exception as e:
        console.print(f"[red]✗ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"✓ Database ready: [cyan]{settings.database_url}[/cyan]")


@app.command("add-athlete")
def add_athlete(
    ctx: typer.Context,
    athlete_id: str = typer.Argument(..., help="Unique athlete identifier"),
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    sport: Optional[str] = typer.Option(None, "--sport", "-s", help="Primary sport"),
    position: Optional[str] = typer.Option(None, "--position", "-p", help="Playing position"),
    team: Optional[str] = typer.Option(None, "--team", "-t", help="Team or squad"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
):
    """
    Register an athlete.
    """
    service = _service(ctx)
    try:
        athlete = Athlete(
            athlete_id=athlete_id,
            name=name,
            primary_sport=sport,
            position=position,
            team=team,
            age=age,
        )
        service.create_athlete(athlete)
    except (RiskEngineError, ValueError) as e:
        console.print(f"[red]✗ Failed to add athlete: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"✓ Added athlete [green]{athlete_id}[/green] ({name})")


@app.command("log-activity")
def log_activity(
    ctx: typer.Context,
    file: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to activity JSON file",
        exists=True,
    ),
    athlete_id: Optional[str] = typer.Option(
        None,
        "--athlete",
        "-a",
        help="Log for this athlete instead of the file's athlete_id",
    ),
):
    """
    Log a workout or sports activity and show the updated risk.
    """
    try:
        with open(file) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗ Failed to read activity file: {e}[/red]")
        raise typer.Exit(1)

    service = _service(ctx)
    try:
        if athlete_id:
            result = service.apply_activity(athlete_id, payload)
        else:
            result = service.log_activity(payload)
    except RiskEngineError as e:
        console.print(f"[red]✗ Failed to log activity: {e}[/red]")
        raise typer.Exit(1)

    _display_log_result(result)


@app.command()
def risk(
    ctx: typer.Context,
    athlete_id: str = typer.Argument(..., help="Athlete identifier"),
    on: Optional[str] = typer.Option(None, "--date", help="Day to report (YYYY-MM-DD, default: today)"),
):
    """
    Show per-body-part injury risk for a day.
    """
    try:
        day = date.fromisoformat(on) if on else None
    except ValueError:
        console.print(f"[red]✗ Invalid date: {on}[/red]")
        raise typer.Exit(1)

    service = _service(ctx)
    try:
        report = service.get_risk(athlete_id, day)
    except RiskEngineError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]Injury Risk: {athlete_id} ({report.date})[/bold cyan]\n")
    if report.workloads:
        _display_workloads(report.workloads, "Body Parts")
        for part_risk in report.body_part_risks:
            console.print(f"  • {part_risk.message}")
        console.print()
    _display_snapshot(report.overall_risk)


@app.command("delete-activity")
def delete_activity(
    ctx: typer.Context,
    activity_id: int = typer.Argument(..., help="Activity identifier"),
):
    """
    Delete an activity and rebuild its day's workload rows.
    """
    service = _service(ctx)
    try:
        result = service.delete_activity(activity_id)
    except RiskEngineError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    console.print(f"✓ Deleted activity [green]#{activity_id}[/green] ({result.athlete_id}, {result.date})")
    if result.recomputed_body_parts:
        console.print(f"  Recomputed: {', '.join(result.recomputed_body_parts)}")
    if result.removed_body_parts:
        console.print(f"  Removed rows: {', '.join(result.removed_body_parts)}")
    if result.failed_body_parts:
        console.print(f"[red]✗ Recompute failed for: {', '.join(result.failed_body_parts)}[/red]")


@app.command()
def recover(
    ctx: typer.Context,
    on: Optional[str] = typer.Option(None, "--date", help="Day to decay to (YYYY-MM-DD, default: today)"),
):
    """
    Run the daily passive-recovery pass for every athlete.
    """
    try:
        day = date.fromisoformat(on) if on else date.today()
    except ValueError:
        console.print(f"[red]✗ Invalid date: {on}[/red]")
        raise typer.Exit(1)

    service = _service(ctx)
    updated = service.run_recovery(day)
    console.print(f"✓ Updated recovery rates for [green]{updated}[/green] body parts ({day})")


@app.command()
def history(
    ctx: typer.Context,
    athlete_id: str = typer.Argument(..., help="Athlete identifier"),
    body_part: Optional[str] = typer.Option(None, "--body-part", "-b", help="Restrict to one body part"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum rows to show"),
):
    """
    Show body-part workload history, newest first.
    """
    service = _service(ctx)
    try:
        rows = service.workload_history(athlete_id, body_part=body_part, limit=limit)
    except RiskEngineError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No workload history[/yellow]")
        return
    _display_workloads(rows, f"Workload History: {athlete_id}", show_date=True)


@app.command()
def config(ctx: typer.Context):
    """
    Show the effective engine configuration.
    """
    settings: Settings = ctx.obj
    try:
        engine_config: EngineConfig = settings.load_engine_config()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]✗ Failed to load engine config: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Database:[/bold] {settings.database_url}")
    console.print(f"[bold]Engine config:[/bold] {settings.engine_config_path or 'built-in defaults'}\n")

    table = Table(title="Risk Thresholds", box=box.ROUNDED)
    table.add_column("Level", style="cyan")
    table.add_column("Floor (%)", justify="right")
    for level, floor in engine_config.risk_thresholds.model_dump().items():
        table.add_row(level.title(), str(floor))
    console.print(table)

    console.print("\n[bold]Full configuration:[/bold]")
    console.print_json(engine_config.model_dump_json())


if __name__ == "__main__":
    app()
