"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.csv_import import import_csv
from ..adapters.json_entry_store import JsonEntryStore
from ..config import AppConfig, load_config
from ..domain.aggregator import GROUPINGS, calculate_total_seatime, summarize_cycle
from ..domain.duration import calculate_duration, parse_instant
from ..domain.exceptions import SeatimeError
from ..domain.listing import EntryFilter, entries_in_month, list_entries
from ..domain.models import GroupTotals, SeatimeEntry
from ..domain.overlap import check_overlaps
from ..domain.validator import EntryValidator

app = typer.Typer(
    name="seatime",
    help="Calculate, validate and summarise sea service periods",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml if present"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Seatime record-keeping tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(config_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_file)
    except (SeatimeError, ValidationError) as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {e}")
        raise typer.Exit(1)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _format_number(value: float) -> str:
    return f"{value:g}"


def _totals_table(title: str, key_header: str, groups: dict[object, GroupTotals]) -> Table:
    show_names = any(totals.name for totals in groups.values())

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(key_header, style="bold yellow")
    if show_names:
        table.add_column("Name")
    table.add_column("Entries", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Hours", justify="right")

    for key, totals in groups.items():
        row = [str(key)]
        if show_names:
            row.append(totals.name or "")
        row += [str(totals.count), f"{totals.days:.2f}", f"{totals.hours:.2f}"]
        table.add_row(*row)
    return table


def _entries_table(title: str, entries: list[SeatimeEntry]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Sign-on")
    table.add_column("Sign-off")
    table.add_column("Vessel")
    table.add_column("Company")
    table.add_column("Rank")
    table.add_column("Days", justify="right")
    table.add_column("Verified", justify="center")

    for entry in entries:
        table.add_row(
            entry.id,
            entry.start_at.format("DD.MM.YYYY HH:mm"),
            entry.end_at.format("DD.MM.YYYY HH:mm"),
            entry.vessel_name or entry.vessel_id,
            entry.company_name or entry.company_id,
            entry.rank,
            f"{entry.computed_duration_days:.2f}",
            "✓" if entry.is_verified else "",
        )
    return table


@app.command()
def duration(
    start: Annotated[str, typer.Argument(help="Sign-on instant (ISO-8601)")],
    end: Annotated[str, typer.Argument(help="Sign-off instant (ISO-8601)")],
):
    """
    Calculate the seatime between sign-on and sign-off.
    """
    try:
        result = calculate_duration(start, end)
    except SeatimeError as e:
        _fail(e)

    console.print(f"Total hours: {_format_number(result.total_hours)}")
    console.print(f"Total days: {_format_number(result.total_days)}")
    console.print(f"Whole days: {result.whole_days}")
    console.print(f"Remaining hours: {_format_number(result.remaining_hours)}")


@app.command()
def validate(
    start: Annotated[str, typer.Option("--start", help="Sign-on instant (ISO-8601)")] = "",
    end: Annotated[str, typer.Option("--end", help="Sign-off instant (ISO-8601)")] = "",
    rank: Annotated[str, typer.Option("--rank", help="Rank or position held")] = "",
    vessel: Annotated[str, typer.Option("--vessel", help="Vessel id")] = "",
    company: Annotated[str, typer.Option("--company", help="Company id")] = "",
    config_file: ConfigOption = None,
):
    """
    Validate an entry. Exits with 1 if it has errors; warnings are reported only.
    """
    config = _load(config_file)
    validator = EntryValidator(rules=config.validation.to_rules())
    result = validator.validate(start, end, rank, vessel, company)

    for error in result.errors:
        console.print(f"[red]✗ {error}[/red]")
    for warning in result.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    if not result.is_valid:
        raise typer.Exit(1)

    console.print("[green]✓ Entry is valid[/green]")


@app.command()
def check_overlap(
    entries_file: Annotated[Path, typer.Argument(help="JSON file with stored entries")],
    start: Annotated[str, typer.Option("--start", help="Sign-on instant (ISO-8601)")],
    end: Annotated[str, typer.Option("--end", help="Sign-off instant (ISO-8601)")],
    exclude_id: Annotated[Optional[str], typer.Option("--exclude-id", help="Entry id to ignore (when editing that entry)")] = None,
    config_file: ConfigOption = None,
):
    """
    Check a range against stored entries. Exits with 1 if it overlaps.
    """
    config = _load(config_file)

    try:
        store = JsonEntryStore(entries_file)
        candidate = {"start_at": parse_instant(start), "end_at": parse_instant(end)}
        result = check_overlaps(
            candidate,
            store.list_intervals(),
            exclude_id=exclude_id,
            inclusive=config.overlap.inclusive_boundaries,
        )
    except SeatimeError as e:
        _fail(e)

    if not result.has_overlap:
        console.print("[green]✓ No overlapping entries[/green]")
        return

    table = Table(
        title="Overlapping entries",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Overlap (h)", justify="right")

    for entry in result.overlapping_entries:
        table.add_row(
            str(entry.id),
            entry.start_at.to_iso8601_string(),
            entry.end_at.to_iso8601_string(),
            _format_number(entry.overlap_hours),
        )

    console.print(f"[bold red]✗ {len(result.overlapping_entries)} overlapping entry(s)[/bold red]")
    console.print(table)
    raise typer.Exit(1)


@app.command()
def summary(
    entries_file: Annotated[Path, typer.Argument(help="JSON file with stored entries")],
    by: Annotated[str, typer.Option("--by", help="Grouping: year, vessel, rank or company")] = "year",
    config_file: ConfigOption = None,
):
    """
    Show total seatime and totals per group.
    """
    config = _load(config_file)

    if by not in GROUPINGS:
        _fail(ValueError(f"Unknown grouping '{by}'. Use one of: {', '.join(GROUPINGS)}"))

    try:
        entries = JsonEntryStore(entries_file).entries()
    except SeatimeError as e:
        _fail(e)

    totals = calculate_total_seatime(entries)
    if by == "year":
        groups = GROUPINGS[by](entries, timezone=config.timezone)
    else:
        groups = GROUPINGS[by](entries)

    console.print(f"[bold cyan]Total seatime:[/bold cyan] {totals.total_days:.2f} days ({totals.total_hours:.2f} hours)")
    console.print()
    console.print(_totals_table(f"Seatime by {by}", by.capitalize(), groups))


@app.command()
def dashboard(
    entries_file: Annotated[Path, typer.Argument(help="JSON file with stored entries")],
    config_file: ConfigOption = None,
):
    """
    Show progress toward the sea-service targets of the renewal cycle.
    """
    config = _load(config_file)
    targets = config.targets

    try:
        entries = JsonEntryStore(entries_file).entries()
    except SeatimeError as e:
        _fail(e)

    result = summarize_cycle(
        entries,
        target_sea_days=targets.target_sea_days,
        target_sea_hours=targets.target_sea_hours,
        renewal_cycle_years=config.validation.renewal_cycle_years,
        cycle_start=targets.get_cycle_start(),
        timezone=config.timezone,
    )

    console.print(Panel.fit(
        f"Cycle: {result.cycle_start.format('DD.MM.YYYY')} - {result.cycle_end.format('DD.MM.YYYY')}\n"
        f"Entries: {result.total_entries} ({result.unverified_entries} unverified)\n"
        f"Sea service: {result.total_days:.2f} / {_format_number(result.target_sea_days)} days "
        f"({result.progress_days:.2f}%)\n"
        f"Hours: {result.total_hours:.2f} / {_format_number(result.target_sea_hours)} "
        f"({result.progress_hours:.2f}%)\n"
        f"Verified: {result.verified_days:.2f} days",
        title="Renewal cycle",
    ))
    console.print(_totals_table("Seatime by year", "Year", result.by_year))
    console.print(_totals_table("Seatime by vessel", "Vessel", result.by_vessel))
    console.print(_totals_table("Seatime by company", "Company", result.by_company))


@app.command("list")
def list_command(
    entries_file: Annotated[Path, typer.Argument(help="JSON file with stored entries")],
    start: Annotated[Optional[str], typer.Option("--from", help="Only entries signing on at or after this instant")] = None,
    end: Annotated[Optional[str], typer.Option("--to", help="Only entries signing off at or before this instant")] = None,
    vessel: Annotated[Optional[str], typer.Option("--vessel", help="Vessel id")] = None,
    company: Annotated[Optional[str], typer.Option("--company", help="Company id")] = None,
    rank: Annotated[Optional[str], typer.Option("--rank", help="Rank contains this text")] = None,
    verified: Annotated[Optional[bool], typer.Option("--verified/--unverified", help="Only verified or only unverified entries")] = None,
    limit: Annotated[int, typer.Option("--limit", min=1, help="Entries per page")] = 100,
    offset: Annotated[int, typer.Option("--offset", min=0, help="Entries to skip")] = 0,
):
    """
    List entries, most recent first, with totals over all matches.
    """
    try:
        entries = JsonEntryStore(entries_file).entries()
        entry_filter = EntryFilter(
            start=parse_instant(start) if start else None,
            end=parse_instant(end) if end else None,
            vessel_id=vessel,
            company_id=company,
            rank=rank,
            verified=verified,
        )
    except SeatimeError as e:
        _fail(e)

    page = list_entries(entries, entry_filter, limit=limit, offset=offset)

    if not page.entries:
        console.print("[yellow]No matching entries[/yellow]")
    else:
        console.print(_entries_table("Seatime entries", page.entries))
        console.print(
            f"Showing {page.offset + 1}-{page.offset + len(page.entries)} of {page.total}"
        )

    console.print(
        f"[bold cyan]Total:[/bold cyan] {page.totals.total_days:.2f} days "
        f"({page.totals.total_hours:.2f} hours) in {page.total} entries"
    )


@app.command()
def calendar(
    entries_file: Annotated[Path, typer.Argument(help="JSON file with stored entries")],
    year: Annotated[int, typer.Argument(help="Calendar year")],
    month: Annotated[int, typer.Argument(min=1, max=12, help="Calendar month (1-12)")],
    config_file: ConfigOption = None,
):
    """
    Show the entries that fall into a calendar month.
    """
    config = _load(config_file)

    try:
        entries = entries_in_month(
            JsonEntryStore(entries_file).entries(),
            year,
            month,
            timezone=config.timezone,
        )
    except SeatimeError as e:
        _fail(e)

    if not entries:
        console.print(f"[yellow]No entries in {year}-{month:02d}[/yellow]")
        return

    console.print(_entries_table(f"Seatime {year}-{month:02d}", entries))


@app.command("import")
def import_entries(
    csv_file: Annotated[Path, typer.Argument(help="CSV file with vessel, company, rank, start, end columns")],
    into: Annotated[Path, typer.Option("--into", help="JSON entry file to append to; created if missing")],
    owner: Annotated[Optional[str], typer.Option("--owner", help="Owner id stored with imported entries")] = None,
):
    """
    Import entries from a CSV file. Rows that fail are reported and skipped.
    """
    try:
        store = JsonEntryStore(into, create_missing=True)
        result = import_csv(csv_file, first_id=store.next_id())
        if result.entries:
            store.add(result.entries, owner_id=owner)
    except SeatimeError as e:
        _fail(e)

    console.print(f"[green]✓ Imported: {result.success}[/green]")
    if result.failed:
        console.print(f"[red]✗ Failed: {result.failed}[/red]")
        for error in result.errors:
            console.print(f"  [red]{error}[/red]")
