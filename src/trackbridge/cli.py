#!/usr/bin/env python3
"""Command-line interface for trackbridge.

This CLI is primarily for debugging and development.
For production use, import trackbridge as a library.
"""

import asyncio
import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from trackbridge import create_extractor
from trackbridge.exceptions import TrackBridgeError
from trackbridge.models.enums import QueryType
from trackbridge.models.track import ExtractorResult, Track
from trackbridge.services import SpotifyExtractor
from trackbridge.utils.url import parse_query

logger = logging.getLogger("trackbridge")

QUERY_TYPE_CHOICES = {
    "auto": QueryType.AUTO,
    "search": QueryType.SPOTIFY_SEARCH,
    "song": QueryType.SPOTIFY_SONG,
    "playlist": QueryType.SPOTIFY_PLAYLIST,
    "album": QueryType.SPOTIFY_ALBUM,
}


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Configure logging with Rich handler.

    Clears existing handlers first, so it can be called again to switch
    consoles.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
        console: Optional Console instance to use for RichHandler.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def print_tracks(console: Console, result: ExtractorResult) -> None:
    """Print resolved tracks as a table, titled with the playlist if any."""
    title = None
    if result.playlist is not None:
        playlist = result.playlist
        title = (
            f"[bold yellow]{playlist.type.value.capitalize()}: {playlist.title}"
            f"[/bold yellow] [dim]by {playlist.author.name}[/dim]"
        )

    table = Table(title=title, title_justify="left")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="bold cyan", overflow="fold")
    table.add_column("Artist", overflow="fold")
    table.add_column("Duration", justify="right")
    table.add_column("URL", style="dim", overflow="fold")

    for i, track in enumerate(result.tracks, 1):
        table.add_row(str(i), track.title, track.author, track.duration, track.url)

    console.print(table)
    console.print(f"\nResolved {len(result.tracks)} track(s)")


def result_to_dict(result: ExtractorResult) -> dict:
    """Serialize a result for JSON output."""
    return {
        "playlist": result.playlist.to_dict() if result.playlist else None,
        "tracks": [t.to_dict() for t in result.tracks],
    }


async def _resolve(
    extractor: SpotifyExtractor, query: str, query_type: QueryType
) -> ExtractorResult:
    async with extractor:
        return await extractor.handle(query, query_type)


async def _stream_first(extractor: SpotifyExtractor, query: str) -> tuple[Track, str]:
    async with extractor:
        result = await extractor.handle(query)
        if not result.tracks:
            raise click.ClickException(f"Nothing found for: {query}")
        track = result.tracks[0]
        handle = await extractor.stream(track)
        if not isinstance(handle, str):
            raise click.ClickException("Stream is not a URL")
        return track, handle


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Resolve Spotify links and searches into playable tracks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


@main.command(name="parse")
@click.argument("query", metavar="QUERY")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def parse_cmd(query: str, as_json: bool) -> None:
    """Classify QUERY without touching the network.

    \b
    Examples:
      trackbridge parse "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"
      trackbridge parse "spotify:album:1DFixLWuPkv3KT3TnV35m3"
    """
    console = Console()
    parsed = parse_query(query)
    query_type = parsed.kind.query_type if parsed.kind else QueryType.AUTO_SEARCH

    if as_json:
        data = {
            "kind": parsed.kind.value if parsed.kind else None,
            "id": parsed.id,
            "service": parsed.service,
            "query_type": query_type.value,
        }
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not parsed.is_match:
        console.print("[yellow]Not a link, will be resolved as a search[/yellow]")
        return

    table = Table(show_header=False, padding=(0, 1))
    table.add_column("Field", style="bold cyan", width=12)
    table.add_column("Value", overflow="fold")
    table.add_row("Service", parsed.service or "")
    table.add_row("Kind", parsed.kind.value if parsed.kind else "")
    table.add_row("ID", parsed.id or "")
    table.add_row("Query type", query_type.value)
    console.print(table)


@main.command(name="resolve")
@click.argument("query", metavar="QUERY")
@click.option(
    "--type",
    "type_name",
    type=click.Choice(list(QUERY_TYPE_CHOICES)),
    default="auto",
    show_default=True,
    help="How to resolve the query.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve_cmd(ctx: click.Context, query: str, type_name: str, as_json: bool) -> None:
    """Resolve QUERY into tracks.

    QUERY can be a Spotify track/playlist/album link, a spotify: URI,
    or free text to search for.

    \b
    Examples:
      trackbridge resolve "https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M"
      trackbridge resolve "daft punk one more time" --type search
    """
    console = Console()
    setup_logging(verbose=ctx.obj.get("verbose", False), console=console)

    try:
        result = asyncio.run(
            _resolve(create_extractor(), query, QUERY_TYPE_CHOICES[type_name])
        )
    except TrackBridgeError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    if result.is_empty:
        console.print(f"[yellow]Nothing found for: {query}[/yellow]")
        return

    if as_json:
        json.dump(
            result_to_dict(result),
            sys.stdout,
            indent=2,
            ensure_ascii=False,
            default=str,
        )
        sys.stdout.write("\n")
    else:
        print_tracks(console, result)


@main.command(name="stream")
@click.argument("query", metavar="QUERY")
@click.pass_context
def stream_cmd(ctx: click.Context, query: str) -> None:
    """Resolve QUERY and print the playable URL of its first track.

    \b
    Examples:
      trackbridge stream "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"
    """
    console = Console()
    setup_logging(verbose=ctx.obj.get("verbose", False), console=console)

    try:
        track, url = asyncio.run(_stream_first(create_extractor(), query))
    except TrackBridgeError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    console.print(f"[cyan]{track.title}[/cyan] [dim]by {track.author}[/dim]")
    click.echo(url)


if __name__ == "__main__":
    main()
