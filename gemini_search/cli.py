"""
Command-line interface for gemini-search.

Provides a CLI with subcommands:
- auth: Log in to the Gemini CLI through an automated PTY session
- search: Answer one query and print the matching games
- parse: Show how a saved model response is parsed
- status: Show marker and settings
- reset: Remove the first-run marker
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .auth import FirstRunMarker
from .config import get_settings
from .errors import SearchError, format_error_response
from .notify import ConsoleNotifier
from .parser import AnnotatedEntry, CommentBlockClose, PlainEntry, parse_response
from .service import SearchService

console = Console()


def setup_logging(level: str) -> None:
    """Configure the root logger once, rendering through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def print_error(code: str, message: str) -> None:
    error = format_error_response(code, message)
    click.echo(click.style(f"Error [{error['code']}]: {error['message']}", fg="red"), err=True)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Gemini-powered game search."""
    settings = get_settings()
    setup_logging("DEBUG" if debug else settings.log_level)
    ctx.obj = settings


@cli.command()
@click.option('--force', is_flag=True, help='Run the session even if already authenticated')
@click.pass_obj
def auth(settings, force: bool):
    """Log in to the Gemini CLI (opens a browser for Google sign-in)."""
    service = SearchService(settings=settings, notifier=ConsoleNotifier())
    if force:
        service.marker.clear()

    async def run():
        try:
            return await service.on_connect()
        finally:
            await service.aclose()

    if not asyncio.run(run()):
        sys.exit(1)


@cli.command()
@click.argument('query')
@click.option('-n', '--max-results', type=click.IntRange(min=0), default=None,
              help='Maximum number of games to ask for')
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.pass_obj
def search(settings, query: str, max_results: Optional[int], as_json: bool):
    """Answer QUERY with games from the catalog."""
    # Nothing to debounce on a one-shot command
    settings = settings.model_copy(update={"quiescence_seconds": 0})
    service = SearchService(settings=settings, notifier=ConsoleNotifier())
    if max_results is not None:
        service.update_options({"max-results": max_results})
    service.connected = service.marker.exists()

    async def run():
        try:
            return await service.orchestrator.search(query)
        finally:
            await service.aclose()

    try:
        results = asyncio.run(run())
    except SearchError as e:
        print_error(e.code, e.message)
        if not service.connected:
            click.echo("Run 'gemini-search auth' first.", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    if not results:
        console.print("[yellow]No games found[/]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("ID", justify="right")
    table.add_column("Source", style="dim")
    for record in results:
        if record.resolved:
            table.add_row(record.name, str(record.id), record.source)
        else:
            table.add_row(f"[italic]{record.name}[/]", "", record.source)
    console.print(table)


@cli.command()
@click.argument('response_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def parse(response_file: Path):
    """Show the records parsed from a saved model response."""
    for record in parse_response(response_file.read_text(encoding="utf-8")):
        if isinstance(record, AnnotatedEntry):
            click.echo(f"{click.style('entry', fg='green')}     {record.name}  "
                       f"{click.style(f'({record.comment})', dim=True)}")
        elif isinstance(record, PlainEntry):
            click.echo(f"{click.style('entry', fg='green')}     {record.name}")
        elif isinstance(record, CommentBlockClose):
            click.echo(f"{click.style('comment', fg='cyan')}   {record.text}")


@cli.command()
@click.pass_obj
def status(settings):
    """Show authentication marker and settings."""
    marker = settings.get_marker_path()
    state = click.style("authenticated", fg="green") if marker.exists() else click.style("not authenticated", fg="yellow")
    click.echo(f"Status:       {state}")
    click.echo(f"Marker:       {marker}")
    click.echo(f"Prompter:     {settings.prompter} ({settings.model})")
    click.echo(f"CLI command:  {settings.cli_command}")
    click.echo(f"Max results:  {settings.max_results}")
    click.echo(f"Conversation: {'on' if settings.conversational else 'off'}")


@cli.command()
@click.pass_obj
def reset(settings):
    """Forget the completed authentication."""
    if FirstRunMarker(settings.get_marker_path()).clear():
        click.echo("Marker removed; the next connect runs the auth session again.")
    else:
        click.echo("Not authenticated; nothing to reset.")


def main():
    """Entry point for gemini-search."""
    cli()


if __name__ == '__main__':
    main()
