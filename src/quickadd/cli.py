"""Command-line interface for quickadd."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Config, ConfigModel, get_config, load_config, save_config
from .exceptions import ConfigError
from .formatter import effort_label, format_for_display, recurrence_label
from .parser import looks_parseable, parse as parse_text
from .task import ParsedTask


console = Console()


def _format_datetime(value: Optional[datetime], config: ConfigModel) -> str:
    if value is None:
        return ""
    return value.strftime(config.datetime_format)


def build_result_table(parsed: ParsedTask, config: ConfigModel) -> Table:
    """Lay out the populated fields of a parse result."""
    table = Table(title="Parsed task", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")

    rows = [
        ("Title", parsed.text),
        ("Due", _format_datetime(parsed.due_date, config)),
        ("Reminder", _format_datetime(parsed.reminder_time, config)),
        ("Reminder offset", parsed.reminder_offset.value if parsed.reminder_offset else ""),
        ("Repeat", recurrence_label(parsed) or ""),
        ("Priority", parsed.priority.value if parsed.priority else ""),
        ("Location", parsed.location or ""),
        ("Tags", ", ".join(f"#{tag}" for tag in parsed.tags or ())),
        ("Folder", f"@{parsed.folder_name}" if parsed.folder_name else ""),
        ("Estimate", effort_label(parsed.estimated_hours) if parsed.estimated_hours else ""),
        ("Description", parsed.description or ""),
    ]
    for field_name, value in rows:
        if value:
            table.add_row(field_name, escape(value))
    return table


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an ISO-8601 datetime", param_hint="--now")


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(__version__, prog_name="quickadd")
@click.pass_context
def main(ctx, config_path, verbose):
    """quickadd - turn one line of text into a structured task."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        if config_path:
            config = load_config(Path(config_path), strict=True)
        else:
            config = get_config()
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    ctx.obj["config"] = config
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    console.no_color = config.no_color


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--now", "now_value", help="Reference time (ISO-8601) instead of the current time")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def parse(ctx, text, now_value, as_json):
    """Parse TEXT and show what was extracted."""
    config: ConfigModel = ctx.obj["config"]
    raw = " ".join(text)
    now = _parse_now(now_value) or datetime.now()

    if config.detect_before_parse and not looks_parseable(raw):
        parsed = ParsedTask(text=raw.strip())
    else:
        parsed = parse_text(raw, now)

    if as_json:
        click.echo(json.dumps(parsed.to_dict(), indent=2, ensure_ascii=False))
        return

    if not parsed.has_metadata:
        console.print(f"[bold]{escape(parsed.text)}[/bold]")
        console.print("[dim]No dates, tags or other details detected.[/dim]")
        return

    console.print(build_result_table(parsed, config))
    if config.show_badges:
        badges = format_for_display(parsed, now=now, use_emoji=config.use_emoji)
        if badges:
            console.print("  ".join(f"[green]{escape(badge)}[/green]" for badge in badges))


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def check(ctx, text):
    """Report whether TEXT contains anything worth parsing."""
    raw = " ".join(text)
    if looks_parseable(raw):
        console.print("[green]✓ Parseable[/green]")
        ctx.exit(0)
    console.print("[yellow]No quick-add syntax detected[/yellow]")
    ctx.exit(1)


@main.group(name="config")
def config_group():
    """Inspect or create the configuration file."""


@config_group.command()
@click.pass_context
def show(ctx):
    """Print the active configuration as YAML."""
    config: ConfigModel = ctx.obj["config"]
    click.echo(config.to_yaml(), nl=False)


@config_group.command()
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init(ctx, force):
    """Write a default configuration file."""
    path = ctx.obj.get("config_path") or Config.default_path()
    if path.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {path} (use --force to overwrite)[/yellow]")
        ctx.exit(1)
    try:
        save_config(ConfigModel(), path)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    console.print(f"[green]✓ Created default configuration at {path}[/green]")


if __name__ == "__main__":
    main()
