"""CLI entry point for availability and castability search."""

import json
import logging
from dataclasses import replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .availability import check_bulk_availability
from .combinations import estimate_count, validate_castability
from .config import ConfigLoader
from .constants import MAX_BULK_USERS
from .exceptions import AvailabilityError
from .exporters import get_exporter, load_request
from .intervals import ensure_valid
from .models import CharacterCandidates, TimeRange
from .search import find_availability_slots

app = typer.Typer(
    name="stage-availability",
    help="Find when plays and scenes can be cast",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _load(input_file: Path) -> dict[str, Any]:
    if not input_file.exists():
        _fail(f"File not found: {input_file}")
    try:
        data = load_request(input_file)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {input_file}: {e.msg} at line {e.lineno}")
    if not isinstance(data, dict):
        _fail(f"Expected a JSON object in {input_file}")
    return data


def _parse_ranges(items: list[dict]) -> list[TimeRange]:
    return [TimeRange.from_dict(item) for item in items]


def _parse_characters(data: dict[str, Any]) -> list[CharacterCandidates]:
    return [CharacterCandidates.from_dict(item) for item in data.get("characters", [])]


def _parse_window(data: dict[str, Any], key: str) -> TimeRange:
    if key not in data:
        _fail(f"Request has no '{key}'")
    window = TimeRange.from_dict(data[key])
    ensure_valid([window])
    return window


def _fmt(start: datetime, end: datetime) -> str:
    return f"{start:%Y-%m-%d %H:%M} - {end:%H:%M}"


@app.command()
def search(
    input_file: Annotated[
        Path,
        typer.Argument(help="Search request JSON file"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    multi_role: Annotated[
        Optional[bool],
        typer.Option("--multi-role/--exclusive", help="Allow actors to play several characters"),
    ] = None,
    min_duration: Annotated[
        Optional[int],
        typer.Option("--min-duration", help="Minimum slot length in minutes"),
    ] = None,
    max_combinations: Annotated[
        Optional[int],
        typer.Option("--max-combinations", help="Combination budget per segment"),
    ] = None,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config", help="Directory containing engine.json"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Find time slots in which a play or scene can be fully cast."""
    _setup_logging(verbose)
    data = _load(input_file)

    try:
        engine = ConfigLoader(config_dir).engine
        # Command line options override the request, which overrides engine.json
        overrides = {
            "min_duration_minutes": (
                min_duration if min_duration is not None else data.get("min_duration")
            ),
            "max_combinations": max_combinations,
        }
        engine = replace(engine, **{k: v for k, v in overrides.items() if v is not None})
        window = _parse_window(data, "window")
        characters = _parse_characters(data)
        actor_busy = {
            actor_id: _parse_ranges(ranges) for actor_id, ranges in data.get("busy", {}).items()
        }

        with console.status("[bold green]Searching availability..."):
            result = find_availability_slots(
                entity_id=data.get("entity_id", input_file.stem),
                entity_type=data.get("entity_type", "play"),
                window=window,
                characters=characters,
                actor_busy=actor_busy,
                min_duration=engine.min_duration_minutes,
                allow_multiple_roles=(
                    multi_role if multi_role is not None else data.get("allow_multiple_roles", False)
                ),
                exclude_user_ids=data.get("exclude_user_ids", []),
                max_combinations=engine.max_combinations,
                time_budget=engine.time_budget_seconds,
            )
    except (AvailabilityError, ValueError, KeyError) as e:
        _fail(str(e))

    console.print(f"\n[bold]Availability for {result.entity_type}:[/bold] {result.entity_id}")
    console.print(f"  Characters: {len(characters)}")
    console.print(f"  Slots found: {result.total_slots}")
    console.print(f"  Combinations: {result.combination_count}")
    console.print(f"  Search time: {result.search_time_ms:.1f} ms")

    if result.uncastable_characters:
        console.print(
            f"\n[bold yellow]Uncastable characters ({len(result.uncastable_characters)}):[/bold yellow]"
        )
        for character_id in result.uncastable_characters:
            console.print(f"  [yellow]• {character_id}[/yellow]")

    if result.slots:
        slots_table = Table(title="Slots")
        slots_table.add_column("Time", style="cyan")
        slots_table.add_column("Minutes", style="green")
        slots_table.add_column("Cast", style="magenta")

        for slot in result.slots[:20]:  # Limit to first 20
            cast = ", ".join(f"{a.character_id}={a.actor_id}" for a in slot.assignments)
            slots_table.add_row(_fmt(slot.start, slot.end), str(slot.duration_minutes), cast)

        if len(result.slots) > 20:
            slots_table.add_row("...", "...", "...")

        console.print(slots_table)

    if output:
        exporter = get_exporter(format.value)

        if format == OutputFormat.csv:
            # CSV exports to directory
            output_path = output if output.is_dir() else output.parent / output.stem
        else:
            if not output.suffix:
                output = output.with_suffix(".xlsx" if format == OutputFormat.excel else ".json")
            output_path = output

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


@app.command()
def check(
    input_file: Annotated[
        Path,
        typer.Argument(help="Availability check request JSON file"),
    ],
    min_block: Annotated[
        Optional[int],
        typer.Option("--min-block", help="Minimum free block length in minutes"),
    ] = None,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config", help="Directory containing engine.json"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Check free, tentative and busy time for a list of users."""
    _setup_logging(verbose)
    data = _load(input_file)

    users = data.get("users", {})
    if not users:
        console.print("[bold yellow]Warning:[/bold yellow] No users found in input file")
        raise typer.Exit(1)
    if len(users) > MAX_BULK_USERS:
        _fail(f"Maximum {MAX_BULK_USERS} users per request, got {len(users)}")

    try:
        engine = ConfigLoader(config_dir).engine
        if min_block is not None:
            engine = replace(engine, min_block_minutes=min_block)
        period = _parse_window(data, "period")
        parsed = {
            user_id: {
                "busy": _parse_ranges(blocks.get("busy", [])),
                "tentative": _parse_ranges(blocks.get("tentative", [])),
            }
            for user_id, blocks in users.items()
        }
        bulk = check_bulk_availability(
            period, parsed, min_block_minutes=engine.min_block_minutes
        )
    except (AvailabilityError, ValueError, KeyError) as e:
        _fail(str(e))

    console.print(f"\n[bold]Availability for:[/bold] {_fmt(period.start, period.end)}")

    table = Table(title="Users")
    table.add_column("User", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("Free", style="green")
    table.add_column("Tentative", style="yellow")
    table.add_column("Busy", style="red")

    for user in bulk.results:
        table.add_row(
            user.user_id,
            user.status.value,
            str(user.total_free_minutes),
            str(user.total_tentative_minutes),
            str(user.total_busy_minutes),
        )
    console.print(table)

    if verbose:
        for user in bulk.results:
            if user.free_blocks:
                console.print(f"\n[bold]{user.user_id} free blocks:[/bold]")
                for block in user.free_blocks:
                    console.print(f"  {_fmt(block.start, block.end)}")


@app.command()
def estimate(
    input_file: Annotated[
        Path,
        typer.Argument(help="Request JSON file with a 'characters' list"),
    ],
) -> None:
    """Check castability and estimate the number of cast combinations."""
    data = _load(input_file)

    try:
        characters = _parse_characters(data)
    except KeyError as e:
        _fail(f"Character entry missing {e}")

    verdict = validate_castability(characters)

    overview_table = Table(title="Castability", show_header=False)
    overview_table.add_column("Metric", style="cyan")
    overview_table.add_column("Value", style="green")

    overview_table.add_row("Characters", str(len(characters)))
    overview_table.add_row("Castable", "yes" if verdict.valid else "no")
    overview_table.add_row("Exclusive (upper bound)", str(estimate_count(characters, True)))
    overview_table.add_row("Multi-role (exact)", str(estimate_count(characters, False)))

    console.print(overview_table)

    if not verdict.valid:
        console.print(
            f"\n[bold red]Uncastable characters ({len(verdict.uncastable_character_ids)}):[/bold red]"
        )
        for character_id in verdict.uncastable_character_ids:
            console.print(f"  [red]• {character_id}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
