"""Command-line interface for the workout companion.

Imports programs, runs interactive workout sessions and shows stats, using
the same parser, session engine and store as any other surface.
"""

import asyncio
import sys
import time
from pathlib import Path
from typing import NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import FloatPrompt, Prompt
from rich.table import Table

# Bootstrap must be imported before companion imports to set up sys.path
try:
    import cli.bootstrap
except ImportError:
    _project_root = Path(__file__).parent.parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from companion.analytics.stats import log_volume, summarize_logs
from companion.config.settings import settings
from companion.core.logger import setup_logger
from companion.persistence.store import StateStore
from companion.services.plan_generator import PlanGeneratorError, generate_plan_csv
from companion.state.app_state import (
    PlanNotFoundError,
    clear_plans,
    find_plan,
    finish_workout,
    import_plans,
    start_workout,
)
from companion.upload.plan_parser import SAMPLE_CSV, is_bike_plan, parse_plan_csv
from companion.workouts.errors import SessionError
from companion.workouts.models import ExerciseMode, WorkoutLog
from companion.workouts.session_engine import ExerciseProgress, SessionEngine

console = Console()

app = typer.Typer(
    name="companion",
    help="Workout companion - import programs and log your sessions",
    add_completion=False,
)

FIELD_LABELS: dict[str, str] = {
    "weight": "KG",
    "reps": "REP",
    "cadence": "RPM",
    "speed": "KM/H",
    "distance": "KM",
    "heart_rate": "BPM",
}

VALIDATE_CHOICE = "v"
QUIT_CHOICE = "q"


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]✗ {message}[/bold red]")
    raise typer.Exit(code=1)


def _format_elapsed(total_seconds: float) -> str:
    minutes, seconds = divmod(int(total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def _import_text(store: StateStore, content: str) -> int:
    plans = parse_plan_csv(content)
    if not plans:
        _fail("Impossible de lire le CSV. Vérifiez le format.")
    previous = store.load()
    state = import_plans(previous, plans)
    store.save(state, previous)
    return len(plans)


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Show debug logs in the terminal")) -> None:
    # Without --debug, logs only go to LOG_FILE so prompts stay readable
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file, console=debug)


@app.command("import-plans")
def import_plans_command(
    file: Path | None = typer.Argument(None, help="CSV file to import", exists=True, dir_okay=False),
    sample: bool = typer.Option(False, "--sample", help="Import the built-in example program"),
) -> None:
    """Import programs from a CSV file (replaces the current plans)."""
    if sample:
        content = SAMPLE_CSV
    elif file is not None:
        content = file.read_text(encoding="utf-8")
    else:
        _fail("Provide a CSV file or --sample")

    count = _import_text(StateStore(), content)
    console.print(f"[bold green]✓ {count} programmes importés avec succès ![/bold green]")


@app.command()
def generate(
    goal: str = typer.Argument(..., help="Goal description, e.g. 'Prise de masse sur 3 jours'"),
    do_import: bool = typer.Option(False, "--import", help="Import the generated program"),
) -> None:
    """Generate a program with the AI coach."""
    try:
        content = asyncio.run(generate_plan_csv(goal))
    except (PlanGeneratorError, ValueError) as e:
        _fail(getattr(e, "message", str(e)))

    console.print(Panel(content, title="Programme généré", border_style="cyan"))
    if do_import:
        count = _import_text(StateStore(), content)
        console.print(f"[bold green]✓ {count} programmes importés avec succès ![/bold green]")


@app.command()
def plans() -> None:
    """List imported programs."""
    state = StateStore().load()
    if not state.plans:
        console.print("[dim]Aucun programme. Importez un CSV avec `import-plans`.[/dim]")
        return

    table = Table(title="Programmes")
    table.add_column("ID", style="cyan")
    table.add_column("Nom")
    table.add_column("Durée")
    table.add_column("Exercices", justify="right")
    table.add_column("Type")
    for plan in state.plans:
        kind = "vélo" if is_bike_plan(plan.name) else "muscu"
        table.add_row(plan.id, plan.name, plan.duration, str(len(plan.exercises)), kind)
    console.print(table)


@app.command()
def show(plan_id: str = typer.Argument(..., help="Plan ID (see `plans`)")) -> None:
    """Show the exercises of one program."""
    plan = find_plan(StateStore().load(), plan_id)
    if plan is None:
        _fail(f"Plan {plan_id} not found")

    table = Table(title=f"{plan.name} ({plan.duration})")
    table.add_column("#", justify="right")
    table.add_column("Exercice")
    table.add_column("Séries", justify="right")
    table.add_column("Reps")
    table.add_column("Détail", style="dim")
    for index, exercise in enumerate(plan.exercises, start=1):
        table.add_row(str(index), exercise.name, str(exercise.sets), exercise.reps, exercise.description or "")
    console.print(table)


def _render_active(active: ExerciseProgress, total: int) -> None:
    exercise = active.exercise
    header = f"[bold]{active.index + 1}/{total} · {exercise.name}[/bold]"
    lines = [header]
    if exercise.mode == ExerciseMode.BIKE and exercise.target_cadence:
        lines.append(f"Cible: {exercise.target_cadence} RPM")
    if exercise.description:
        lines.append(f"[dim]{exercise.description}[/dim]")
    if exercise.sets > 1:
        done = sum(1 for s in active.sets if s.completed)
        lines.append(f"{done}/{exercise.sets} séries")
    console.print(Panel("\n".join(lines), border_style="yellow"))


def _render_timer(engine: SessionEngine) -> None:
    line = f"⏱ Séance {_format_elapsed(engine.elapsed_seconds())}"
    rest = engine.rest_seconds()
    if rest is not None:
        line += f" · Repos {_format_elapsed(rest)}"
    console.print(f"[dim]{line}[/dim]")


def _fill_set(engine: SessionEngine, active: ExerciseProgress, set_index: int) -> None:
    current = active.sets[set_index]
    for field in active.editable_fields:
        default = getattr(current, field)
        label = f"S{current.set_number} {FIELD_LABELS[field]}"
        value = FloatPrompt.ask(label, default=default if default is not None else 0.0, console=console)
        engine.update_set(active.index, set_index, field, value)


def _run_session(engine: SessionEngine) -> WorkoutLog | None:
    """Drive the engine from the terminal until the log is produced or the user quits."""
    while not engine.finished:
        progress = engine.progress()
        active = progress.active
        if active is None or active.next_set_index is None:
            return None
        set_index = active.next_set_index

        if set_index == 0:
            _render_active(active, len(progress.exercises))
        _render_timer(engine)

        try:
            _fill_set(engine, active, set_index)
        except SessionError as e:
            console.print(f"[red]{e.message}[/red]")
            continue

        choice = Prompt.ask(
            f"Valider S{set_index + 1} (v) ou quitter (q)",
            choices=[VALIDATE_CHOICE, QUIT_CHOICE],
            default=VALIDATE_CHOICE,
            console=console,
        )
        if choice == QUIT_CHOICE:
            return None

        try:
            log = engine.complete_set(active.index, set_index)
        except SessionError as e:
            console.print(f"[red]{e.message}[/red]")
            continue

        if log is not None:
            time.sleep(settings.finalize_delay_seconds)
            return log
        if engine.current_exercise_index != active.index:
            time.sleep(settings.advance_delay_seconds)
    return engine.log


@app.command()
def start(plan_id: str = typer.Argument(..., help="Plan ID (see `plans`)")) -> None:
    """Run a workout session interactively."""
    store = StateStore()
    previous = store.load()
    try:
        state = start_workout(previous, plan_id)
    except PlanNotFoundError as e:
        _fail(e.message)

    plan = state.active_plan
    engine = SessionEngine(plan)
    console.print(Panel(f"[bold]{plan.name}[/bold] · {plan.duration}", title="Séance", border_style="green"))

    log = _run_session(engine)
    if log is None:
        console.print("[yellow]Séance abandonnée, rien n'a été enregistré.[/yellow]")
        return

    finished = finish_workout(state, log)
    store.save(finished, previous)
    logger.info(f"Workout log {log.id} saved for plan {plan.id}")
    console.print(
        Panel(
            f"Durée: {_format_elapsed(log.duration_seconds)}\nVolume: {log_volume(log):.0f} kg",
            title="Séance terminée",
            border_style="green",
        )
    )


@app.command()
def stats(window: int = typer.Option(7, "--window", min=1, help="Number of recent sessions to show")) -> None:
    """Show workout history statistics."""
    summary = summarize_logs(StateStore().load().logs, window=window)
    if summary.total_sessions == 0:
        console.print("[dim]AUCUNE DONNÉE ENREGISTRÉE - terminez une séance pour voir vos stats[/dim]")
        return

    console.print(f"Total séances: [bold]{summary.total_sessions}[/bold]")
    console.print(f"Dernière: [bold]{summary.last_session_date.astimezone():%d/%m}[/bold]")
    table = Table(title="Volume (kg)")
    table.add_column("Jour")
    table.add_column("Volume", justify="right")
    table.add_column("Durée (min)", justify="right")
    for point in summary.points:
        table.add_row(point.label, f"{point.volume:.0f}", str(point.duration_minutes))
    console.print(table)


@app.command("clear-plans")
def clear_plans_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete imported programs (workout history is kept)."""
    if not yes and not typer.confirm("Supprimer tous les programmes importés ? L'historique sera conservé."):
        return
    store = StateStore()
    previous = store.load()
    store.save(clear_plans(previous), previous)
    console.print("[green]Programmes supprimés.[/green]")


if __name__ == "__main__":
    app()
