"""CLI commands for Focus Logger using Typer."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table

from focus_logger import __version__
from focus_logger.core.config import Config, get_config
from focus_logger.core.models import Category, Project, TimerPhase, format_minutes
from focus_logger.core.notifier import get_notifier
from focus_logger.core.session_manager import SessionManager
from focus_logger.focus.scheduler import AsyncioScheduler
from focus_logger.focus.timer import SessionTimer
from focus_logger.storage.day_log import LogStore


app = typer.Typer(
    name="focus-logger",
    help="Pomodoro focus timer that keeps a daily markdown log.",
    add_completion=False,
)

console = Console()

E = TypeVar("E", Category, Project)

PHASE_LABELS = {
    TimerPhase.IDLE: ("Idle", "white"),
    TimerPhase.FOCUSING: ("Focusing", "green"),
    TimerPhase.ON_BREAK: ("On Break", "blue"),
}


def setup_logging(log_level: str, log_file: Path | None = None, stream: bool = True) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if stream:
        handlers.append(logging.StreamHandler())

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            console.print(f"[yellow]Cannot write log file {log_file}: {e}[/yellow]")

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def parse_choice(enum_cls: type[E], value: str, param_hint: str) -> E:
    """Turn a --category/--project value into its enum member."""
    try:
        return enum_cls.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=param_hint)


def build_manager(config: Config, category: Category, project: Project) -> SessionManager:
    timer = SessionTimer(AsyncioScheduler(), category=category, project=project)
    return SessionManager(timer, LogStore(config.focus_log_dir), get_notifier(config))


def render_status(manager: SessionManager) -> Panel:
    """Live panel for the terminal countdown."""
    state = manager.state
    label, color = PHASE_LABELS[state.phase]

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Phase", f"[{color}]{label}[/{color}]")
    grid.add_row("Remaining", f"[bold]{state.time_remaining_display}[/bold]")
    grid.add_row("Category", state.category.value)
    grid.add_row("Project", state.project.value)
    grid.add_row(
        "Today",
        f"{manager.sessions_completed_today} sessions, {format_minutes(manager.total_focus_minutes_today)}",
    )

    bar = ProgressBar(total=1.0, completed=state.progress, width=40, complete_style=color)
    return Panel(Group(grid, bar), title="Focus Logger", border_style=color)


async def run_cycles(manager: SessionManager, cycles: int, live: Live) -> None:
    """Run focus + break cycles until the timer returns to idle each time."""
    for _ in range(cycles):
        manager.start_session()
        while manager.phase != TimerPhase.IDLE:
            live.update(render_status(manager))
            await asyncio.sleep(0.25)
        live.update(render_status(manager))


@app.command()
def run(
    category: str = typer.Option(
        None,
        "--category",
        "-c",
        help="Category (Deep Work, Design Review, Meetings, Planning, Learning)",
    ),
    project: str = typer.Option(
        None,
        "--project",
        "-p",
        help="Project (Snowflake, Portfolio, Personal)",
    ),
    cycles: int = typer.Option(
        1,
        "--cycles",
        "-n",
        min=1,
        help="Number of focus + break cycles to run",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Run 25-minute focus sessions with 5-minute breaks in the terminal.

    Examples:
        focus-logger run
        focus-logger run -c "Design Review" -p Portfolio
        focus-logger run -c planning -n 4
    """
    config = get_config()

    selected_category = (
        parse_choice(Category, category, "--category") if category else config.timer.default_category
    )
    selected_project = (
        parse_choice(Project, project, "--project") if project else config.timer.default_project
    )

    try:
        config.ensure_directories()
    except OSError as e:
        console.print(f"[yellow]Cannot create directories: {e}[/yellow]")

    # Log to file only; the terminal is busy with the live countdown
    setup_logging(log_level or config.log_level, config.app_log_file, stream=False)

    manager = build_manager(config, selected_category, selected_project)

    console.print(
        f"[green]Starting focus session:[/green] {selected_category.value} / {selected_project.value}"
    )
    console.print("Press Ctrl+C to cancel\n")

    try:
        with Live(render_status(manager), console=console, refresh_per_second=4) as live:
            asyncio.run(run_cycles(manager, cycles, live))
    except KeyboardInterrupt:
        was_focusing = manager.phase == TimerPhase.FOCUSING
        manager.cancel_session()
        if was_focusing:
            console.print("\n[yellow]Session cancelled - nothing logged[/yellow]")
        else:
            console.print("\n[yellow]Stopped[/yellow]")

    console.print(
        f"\n[bold]Today:[/bold] {manager.sessions_completed_today} sessions, "
        f"{format_minutes(manager.total_focus_minutes_today)}"
    )


@app.command()
def today() -> None:
    """Show today's logged sessions."""
    config = get_config()
    store = LogStore(config.focus_log_dir)

    entries = store.entries()
    if not entries:
        console.print("[yellow]No focus sessions logged today.[/yellow]")
        console.print(f"Log file: {store.today_path}")
        return

    table = Table(title=f"Focus Log - {store.today:%Y-%m-%d}", show_header=True, header_style="bold cyan")
    table.add_column("Time")
    table.add_column("Duration", justify="right")
    table.add_column("Category")
    table.add_column("Project")

    for entry in entries:
        table.add_row(entry.time, f"{entry.duration_minutes} min", entry.category, entry.project)

    console.print(table)

    stats = store.today_stats()
    console.print(f"\n[bold]Sessions:[/bold] {stats.count}")
    console.print(f"[bold]Total Focus Time:[/bold] {stats.formatted_total}")
    console.print(f"Log file: {store.today_path}")


@app.command()
def show(
    day: str = typer.Option(
        None,
        "--date",
        "-d",
        help="Day to show as YYYY-MM-DD (default: today)",
    ),
    raw: bool = typer.Option(False, "--raw", help="Print the markdown source"),
) -> None:
    """Show a day's focus log file."""
    config = get_config()
    store = LogStore(config.focus_log_dir)

    if day:
        try:
            target = datetime.strptime(day, "%Y-%m-%d").date()
        except ValueError:
            raise typer.BadParameter(f"Expected YYYY-MM-DD, got {day!r}", param_hint="--date")
    else:
        target = store.today

    content = store.read(target)
    if content is None:
        console.print(f"[yellow]No focus log for {target:%Y-%m-%d}[/yellow]")
        raise typer.Exit(1)

    if raw:
        console.print(content, markup=False, highlight=False)
    else:
        console.print(Markdown(content))


@app.command()
def categories() -> None:
    """List the available categories and projects."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Categories")
    table.add_column("Projects")

    cats = list(Category)
    projects = list(Project)
    for i in range(max(len(cats), len(projects))):
        table.add_row(
            cats[i].value if i < len(cats) else "",
            projects[i].value if i < len(projects) else "",
        )

    console.print(table)


@app.command(name="config-show")
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="Focus Logger Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    # Paths
    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Focus Logs", str(config.focus_log_dir))
    table.add_row("  App Log", str(config.app_log_file))
    table.add_row("  Config File", str(config.config_file))
    table.add_row("  Log Level", config.log_level)

    # Timer
    table.add_row("[bold]Timer[/bold]", "")
    table.add_row("  Default Category", config.timer.default_category.value)
    table.add_row("  Default Project", config.timer.default_project.value)

    # Notifications
    table.add_row("[bold]Notifications[/bold]", "")
    table.add_row("  Enabled", str(config.notifications.enabled))
    table.add_row("  Sound", config.notifications.sound or "[dim]default[/dim]")

    console.print(table)


@app.command(name="config-init")
def config_init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
) -> None:
    """Write the current configuration to the YAML config file."""
    config = get_config()

    if config.config_file.exists() and not force:
        console.print(f"[yellow]Config already exists at {config.config_file} (use --force)[/yellow]")
        raise typer.Exit(1)

    try:
        config.ensure_directories()
        path = config.save()
    except OSError as e:
        console.print(f"[red]Could not write config: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Wrote {path}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Focus Logger v{__version__}")


if __name__ == "__main__":
    app()
