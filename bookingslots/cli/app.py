"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.yaml_schedule_source import YamlScheduleSource
from ..config import AppConfig, get_default_config_path
from ..domain.durations import describe_duration
from ..domain.exceptions import BookingSlotsError
from ..domain.hours_resolver import HoursResolver
from ..domain.models import SlotCandidate
from ..domain.slot_calculator import SlotCalculator
from ..services.availability import SlotAvailabilityService

app = typer.Typer(
    name="bookingslots",
    help="Compute bookable appointment slots for salon staff",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Slot availability for staff schedules.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig) -> SlotAvailabilityService:
    defaults = config.defaults
    source = YamlScheduleSource(data_file=config.data_file, timezone=config.timezone)
    return SlotAvailabilityService(
        schedule_source=source,
        slot_calculator=SlotCalculator(step_minutes=defaults.slot_step_minutes),
        hours_resolver=HoursResolver(
            fallback_start=defaults.get_fallback_start(),
            fallback_end=defaults.get_fallback_end(),
            fallback_closed_days=defaults.fallback_closed_days,
        ),
        timezone=config.timezone,
        default_duration_minutes=defaults.service_duration_minutes,
        bookable_statuses=defaults.bookable_statuses,
    )


def _parse_date(value: Optional[str], tz: str):
    if not value:
        return pendulum.now(tz).start_of("day")
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as e:
        console.print(f"[red]Could not parse date '{escape(value)}': {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _render_slots(slots: List[SlotCandidate]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")
    table.add_column("Status")

    for slot in slots:
        if slot.available and slot.is_break:
            status = "[yellow]available (break)[/yellow]"
        elif slot.available:
            status = "[green]available[/green]"
        else:
            status = "[yellow]break[/yellow]"
        table.add_row(slot.label, status)

    return table


@app.command()
def slots(
    staff_id: Annotated[str, typer.Argument(help="Staff member id")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id used to look up the duration")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Service duration in minutes")] = None,
    show_all: Annotated[bool, typer.Option("--all", help="Include slots that already passed today.")] = False,
):
    """
    Show the slot grid for a staff member on a date.

    Examples:

        bookingslots slots dana --date 2024-11-25 --service haircut

        bookingslots slots dana --duration 45
    """
    try:
        config = _load_config(config_file)
        if duration is not None and duration <= 0:
            console.print("[bold red]Error:[/bold red] --duration must be greater than zero")
            raise typer.Exit(1)

        target = _parse_date(date, config.timezone)
        service_layer = _build_service(config)

        result = asyncio.run(
            service_layer.get_available_slots(
                staff_id=staff_id,
                date=target,
                service_id=service,
                duration_minutes=duration,
                now=None if show_all else pendulum.now(config.timezone),
            )
        )

        console.print()
        console.print(f"[bold cyan]Slots for {staff_id} on {target.format('dddd, YYYY-MM-DD')}[/bold cyan]\n")
        if not result:
            console.print("[yellow]No slots available on this date.[/yellow]\n")
            return

        bookable = sum(1 for slot in result if slot.available)
        console.print(_render_slots(result))
        console.print(f"\n[bold green]{bookable} bookable slot(s)[/bold green]\n")

    except (FileNotFoundError, ValueError, BookingSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def hours(
    staff_id: Annotated[str, typer.Argument(help="Staff member id")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
):
    """
    Show the working hours and breaks that apply to a staff member on a date.
    """
    try:
        config = _load_config(config_file)
        target = _parse_date(date, config.timezone)
        service_layer = _build_service(config)

        day_hours = asyncio.run(service_layer.resolve_day(staff_id, target))

        console.print()
        console.print(f"[bold]{target.format('dddd, YYYY-MM-DD')}:[/bold] {day_hours.working_hours}")
        for break_item in day_hours.breaks:
            console.print(
                f"  Break {break_item} ({describe_duration(break_item.duration_minutes())})"
            )
        console.print()

    except (FileNotFoundError, ValueError, BookingSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def validate(
    config_file: ConfigOption = None,
    staff_id: Annotated[Optional[str], typer.Option("--staff", help="Validate this staff member's own hours")] = None,
):
    """
    Validate business hours (or a staff member's hours) and their breaks.
    """
    try:
        config = _load_config(config_file)
        service_layer = _build_service(config)
        error = asyncio.run(service_layer.validate_hours(staff_id))
    except (FileNotFoundError, ValueError, BookingSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if error:
        console.print(f"[bold red]✗ Invalid hours:[/bold red] {error}")
        raise typer.Exit(1)

    console.print("[green]✓ Hours are valid[/green]")


@app.command()
def list_staff(config_file: ConfigOption = None):
    """
    List all configured staff members.
    """
    try:
        config = _load_config(config_file)
        source = YamlScheduleSource(data_file=config.data_file, timezone=config.timezone)
        members = asyncio.run(source.list_staff())
    except (FileNotFoundError, ValueError, BookingSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not members:
        console.print("[yellow]No staff members in the schedule data.[/yellow]")
        return

    table = Table(
        title="Staff",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Rest time", justify="right")
    table.add_column("Hours", style="dim")

    for member in members:
        table.add_row(
            member.id,
            member.name,
            f"{member.rest_time_minutes} min",
            "business" if member.use_business_hours else "own",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
