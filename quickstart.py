#!/usr/bin/env python3
"""
Quick start script to demonstrate the athlete injury-risk engine.

This script shows the complete workflow:
1. Set up a throwaway database and register an athlete
2. Log a week of hard sessions
3. Read the per-body-part risk report
4. Run the daily recovery pass
5. Ask for advice on the riskiest body part
"""

import json
import tempfile
from datetime import date, timedelta
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from athlete_risk.advice import format_body_part
from athlete_risk.database import SqlAlchemyStore
from athlete_risk.schemas import Athlete
from athlete_risk.service import InjuryRiskService

console = Console()

FIXTURES = Path(__file__).parent / "tests" / "fixtures"
WEEK_START = date(2024, 3, 4)


def print_header(title: str):
    """Print a formatted header."""
    console.print(f"\n[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))


def main(workdir: Path):
    """Run the complete demonstration workflow."""
    console.print("\n[bold magenta]Athlete Injury Risk[/bold magenta]")
    console.print("[dim]Demonstration of complete workflow[/dim]\n")

    # ===== STEP 1: Set Up =====
    print_header("Step 1: Set Up")

    database_url = f"sqlite:///{workdir / 'quickstart.db'}"
    service = InjuryRiskService(SqlAlchemyStore.from_url(database_url))
    athlete = service.create_athlete(Athlete(
        athlete_id="demo_midfielder",
        name="Jordan Lee",
        primary_sport="Soccer",
        position="Midfielder",
    ))

    console.print(f"✓ Database: [cyan]{database_url}[/cyan]")
    console.print(f"✓ Registered: [green]{athlete.name}[/green] ({athlete.position}, {athlete.primary_sport})")

    # ===== STEP 2: Log a Week of Sessions =====
    print_header("Step 2: Log a Week of Sessions")

    with open(FIXTURES / "workout_cardio.json") as f:
        cardio = json.load(f)

    table = Table(title="Left Leg Through the Week", box=box.ROUNDED)
    table.add_column("Date", style="dim")
    table.add_column("Workload", justify="right")
    table.add_column("7-Day", justify="right")
    table.add_column("Activities", justify="right")
    table.add_column("Risk", justify="right", style="yellow")

    for offset in range(7):
        day = WEEK_START + timedelta(days=offset)
        result = service.apply_activity(athlete.athlete_id, {
            **cardio,
            "date": day.isoformat(),
            "duration": 60,
            "intensity_level": "very-hard",
            "recovery_status": "significant-fatigue",
        })
        leg = next(r for r in result.workload_updates if r.body_part == "left-leg")
        table.add_row(
            day.isoformat(),
            f"{leg.workload_score:.1f}",
            f"{leg.cumulative_7day:.1f}",
            str(leg.activity_count),
            f"{leg.injury_risk_percentage}% ({leg.risk_level.value})",
        )

    console.print(table)

    # ===== STEP 3: Risk Report =====
    print_header("Step 3: Risk Report")

    last_day = WEEK_START + timedelta(days=6)
    report = service.get_risk(athlete.athlete_id, last_day)

    for part_risk in sorted(report.body_part_risks, key=lambda r: -r.percentage):
        console.print(f"  • {format_body_part(part_risk.part)}: {part_risk.percentage}%")
        console.print(f"    [dim]{part_risk.message}[/dim]")

    snapshot = report.overall_risk
    console.print(f"\n[bold]Overall Risk: {snapshot.overall_risk_score}% ({snapshot.risk_level.value})[/bold]")
    console.print(f"Training Load: {snapshot.training_load_score:.1f}   Recovery: {snapshot.recovery_score:.0f}%")

    console.print("\n[bold]Recommendations:[/bold]")
    for rec in snapshot.recommendations:
        console.print(f"  • {rec.title}: {rec.description}")

    # ===== STEP 4: Recovery Pass =====
    print_header("Step 4: Recovery Pass")

    rest_day = last_day + timedelta(days=1)
    updated = service.run_recovery(rest_day)
    rested = service.get_risk(athlete.athlete_id, rest_day)
    rested_leg = next(r for r in rested.workloads if r.body_part == "left-leg")

    console.print(f"✓ Decayed [green]{updated}[/green] body parts for {rest_day}")
    console.print(f"  Left Leg risk: {rested_leg.injury_risk_percentage}% "
                  f"(recovery {rested_leg.recovery_rate:.0f}%)")

    # ===== STEP 5: Body-Part Advice =====
    print_header("Step 5: Body-Part Advice")

    riskiest = max(report.body_part_risks, key=lambda r: r.percentage)
    console.print(f"[bold]{format_body_part(riskiest.part)}[/bold] (peaked at {riskiest.percentage}%), after the rest day:")
    for rec in service.body_part_recommendations(athlete.athlete_id, riskiest.part):
        console.print(f"  • {rec.title} ({rec.priority.value})")
        console.print(f"    {rec.description}")

    # ===== COMPLETION =====
    console.print("\n")
    panel = Panel(
        "[green]✓[/green] Demonstration complete!\n\n"
        "The engine:\n"
        "  1. Mapped each session onto the body parts it loads\n"
        "  2. Tracked per-part workload, recovery and injury risk\n"
        "  3. Summarized the athlete with recommendations\n"
        "  4. Decayed unloaded body parts on a rest day",
        title="[bold green]Success[/bold green]",
        border_style="green"
    )
    console.print(panel)

    console.print("\n[bold cyan]Next Steps:[/bold cyan]")
    console.print("  • Run CLI: athlete-risk --help")
    console.print("  • Start the API: python3 -m athlete_risk.api.main")
    console.print("  • Run tests: python3 -m pytest\n")


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        main(Path(tmp))
