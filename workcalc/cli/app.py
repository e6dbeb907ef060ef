"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.holiday_provider import HolidayProvider
from ..adapters.meeting_file_client import MeetingFileClient
from ..config import AppConfig, get_default_config_path
from ..domain.end_date_calculator import EndDateCalculator
from ..domain.exceptions import WorkCalcError
from ..domain.models import CalculationResult
from ..domain.range_hours import RangeHoursAggregator
from ..services.task_calculation import TaskCalculationService

app = typer.Typer(
    name="workcalc",
    help="Estimate when a task will be finished, counting only effective working time",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the configuration.

    An explicit path must exist; without one, a missing default file
    falls back to the built-in defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


def _parse_instant(value: Optional[str], tz: str, label: str):
    """Parse a user supplied date or datetime, defaulting to now."""
    if value is None:
        return pendulum.now(tz)

    try:
        parsed = pendulum.parse(value, tz=tz)
    except ValueError as e:
        console.print(f"[red]Could not parse {label} '{value}': {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(parsed, DateTime):
        console.print(f"[red]Could not parse {label} '{value}': not a date or datetime[/red]")
        raise typer.Exit(1)

    return parsed


def _print_result(result: CalculationResult, daily_hours: float) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Start", result.start_date.format("dddd, DD/MM/YYYY HH:mm"))
    table.add_row("End", result.end_date.format("dddd, DD/MM/YYYY HH:mm"))
    table.add_row("Working days", str(result.working_days))
    table.add_row("Effort", f"{result.actual_working_hours:g} h ({daily_hours:g} h per day)")
    console.print(Panel.fit(table, title="✓ Result"))

    if result.holidays_excluded:
        holidays = Table(title="Holidays excluded", header_style="bold cyan")
        holidays.add_column("Date", style="bold yellow")
        holidays.add_column("Name")
        for holiday in result.holidays_excluded:
            holidays.add_row(holiday.date.strftime("%d/%m/%Y"), holiday.name)
        console.print(holidays)

    if result.meetings_excluded:
        meetings = Table(title="Meetings excluded", header_style="bold cyan")
        meetings.add_column("When", style="bold yellow")
        meetings.add_column("Title")
        meetings.add_column("Minutes", justify="right", style="dim")
        for meeting in result.meetings_excluded:
            meetings.add_row(
                f"{meeting.start.format('DD/MM/YYYY HH:mm')} - {meeting.end.format('HH:mm')}",
                meeting.title,
                str(meeting.duration_minutes())
            )
        console.print(meetings)


@app.command()
def calculate(
    hours: Annotated[Optional[float], typer.Argument(help="Estimated effort in hours")] = None,
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--start", "-s", help="Start instant (YYYY-MM-DD HH:mm). Defaults to now")] = None,
    no_holidays: Annotated[bool, typer.Option("--no-holidays", help="Do not skip holidays.")] = False,
    no_meetings: Annotated[bool, typer.Option("--no-meetings", help="Do not deduct meetings.")] = False,
    holiday: Annotated[Optional[List[str]], typer.Option("--holiday", help="Only skip this holiday date (YYYY-MM-DD). Repeatable.")] = None,
    meeting: Annotated[Optional[List[str]], typer.Option("--meeting", help="Only deduct the meeting with this id. Repeatable.")] = None,
    meetings_file: Annotated[Optional[Path], typer.Option("--meetings-file", "-m", help="JSON file with meetings")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every day of the calculation.")] = False,
):
    """
    Calculate when a task will be finished.

    Examples:

        workcalc calculate 16

        workcalc calculate 24 --start "2024-01-15 09:00" --no-meetings

        workcalc calculate 8 --meetings-file meetings.json --meeting abc123
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone

        estimated_hours = hours if hours is not None else config.defaults.estimated_hours
        start_date = _parse_instant(start, tz, "start")
        exclude_holidays = config.defaults.exclude_holidays and not no_holidays
        exclude_meetings = config.defaults.exclude_meetings and not no_meetings

        schedule = config.schedule.to_schedule()
        calculator = EndDateCalculator(schedule)

        source = meetings_file or config.meetings_file
        provider = MeetingFileClient(source, timezone=tz) if source else None
        service = TaskCalculationService(calculator=calculator, meeting_provider=provider)

        # Holidays for the start year and the next cover any realistic task
        holiday_provider = HolidayProvider(config.country, config.configured_holidays())
        holidays = (
            holiday_provider.get_holidays(start_date.year)
            + holiday_provider.get_holidays(start_date.year + 1)
        )

        result = asyncio.run(
            service.calculate(
                start_date=start_date,
                estimated_hours=estimated_hours,
                holidays=holidays,
                exclude_holidays=exclude_holidays,
                exclude_meetings=exclude_meetings,
                excluded_holiday_dates=holiday or [],
                excluded_meeting_ids=meeting or [],
            )
        )

        console.print()
        _print_result(result, schedule.daily_working_minutes() / 60)
        console.print()

    except (FileNotFoundError, ValueError, WorkCalcError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--start", "-s", help="First day (YYYY-MM-DD). Defaults to today")] = None,
    end: Annotated[Optional[str], typer.Option("--end", "-e", help="Last day (YYYY-MM-DD). Defaults to start + 6 days")] = None,
    no_holidays: Annotated[bool, typer.Option("--no-holidays", help="Count holidays as working days.")] = False,
    no_meetings: Annotated[bool, typer.Option("--no-meetings", help="Do not deduct meetings.")] = False,
    meetings_file: Annotated[Optional[Path], typer.Option("--meetings-file", "-m", help="JSON file with meetings")] = None,
):
    """
    Show the effective working hours available in a date range.
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone

        start_date = _parse_instant(start, tz, "start date").start_of("day")
        end_date = (
            _parse_instant(end, tz, "end date").end_of("day")
            if end else start_date.add(days=6).end_of("day")
        )

        holiday_provider = HolidayProvider(config.country, config.configured_holidays())
        holidays = holiday_provider.get_holidays_between(start_date.date(), end_date.date())

        meetings = []
        source = meetings_file or config.meetings_file
        if source and not no_meetings:
            meetings = asyncio.run(
                MeetingFileClient(source, timezone=tz).get_meetings(start_date, end_date)
            )

        aggregator = RangeHoursAggregator(config.schedule.to_schedule())
        total = aggregator.hours_in_period(
            start_date=start_date,
            end_date=end_date,
            holidays=holidays,
            meetings=meetings,
            exclude_holidays=config.defaults.exclude_holidays and not no_holidays,
            exclude_meetings=config.defaults.exclude_meetings and not no_meetings,
        )

        console.print(
            f"\n[bold cyan]{start_date.format('DD/MM/YYYY')} - {end_date.format('DD/MM/YYYY')}[/bold cyan]: "
            f"[bold]{total:g}[/bold] working hours\n"
        )

    except (FileNotFoundError, ValueError, WorkCalcError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def holidays(
    config_file: ConfigOption = None,
    year: Annotated[Optional[int], typer.Option("--year", "-y", help="Calendar year. Defaults to the current year")] = None,
):
    """
    List the holidays of a year.
    """
    try:
        config = _load_config(config_file)
        year = year or pendulum.now(config.timezone).year

        provider = HolidayProvider(config.country, config.configured_holidays())
        entries = provider.get_holidays(year)

        if not entries:
            console.print(f"[yellow]No holidays known for {config.country} in {year}.[/yellow]")
            return

        table = Table(
            title=f"Holidays {config.country} {year}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold yellow")
        table.add_column("Name")
        table.add_column("Type", style="dim")

        for entry in entries:
            table.add_row(entry.date.strftime("%d/%m/%Y"), entry.name, entry.type)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def schedule(config_file: ConfigOption = None):
    """
    Show the configured work schedule.
    """
    try:
        config = _load_config(config_file)
        work_schedule = config.schedule.to_schedule()

        console.print(Panel.fit(
            f"[bold]Hours:[/bold] {work_schedule.start_time} - {work_schedule.end_time}\n"
            f"[bold]Lunch:[/bold] {work_schedule.lunch_start} - {work_schedule.lunch_end}\n"
            f"[bold]Days:[/bold] {work_schedule.describe_work_days()}\n"
            f"[bold]Daily:[/bold] {work_schedule.daily_working_minutes() / 60:g} h",
            title="Work schedule"
        ))

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]workcalc[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
