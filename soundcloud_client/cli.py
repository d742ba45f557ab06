"""
Command-line interface for soundcloud-client.

This module implements the CLI using Click; rich-click is used for the
output colors.

Commands:
    soundcloud resolve <url>                Print the canonical API URL
    soundcloud search [filters]             Search tracks
    soundcloud track <id>                   Print a track as JSON
    soundcloud download <id> [--output]     Download the original file
    soundcloud stream <id>                  Write the audio stream to stdout

Global Options:
    --client-id <id>                        Credential (skips config lookup)
    --config <path>                         Path to config.yaml
    --verbose                               Debug logging

Usage:
    soundcloud resolve "https://soundcloud.com/isqa/tree-eater-1"
    soundcloud search --query "d0df0dt snuffx" --filter public
    soundcloud search --id 18201932 --id 262681089
    soundcloud download 262681089 --output tree-eater.mp3
    soundcloud stream 262681089 > tree-eater.mp3

Exit Codes:
    0 success, 1 configuration error, 2 not found, 3 network error,
    4 any other API error.
"""

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import rich_click as click
from tqdm import tqdm

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

from soundcloud_client import __version__
from soundcloud_client.api import NO_RESULTS, Client, Filter
from soundcloud_client.core import (
    ClientConfig,
    ConfigError,
    NotFoundError,
    SoundCloudError,
    TransportError,
    get_logger,
    load_config,
    setup_logging,
)

logger = get_logger(__name__)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn library errors into a message on stderr and an exit code."""
    try:
        yield
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        click.echo("Set SOUNDCLOUD_CLIENT_ID or pass --client-id", err=True)
        sys.exit(1)
    except NotFoundError as e:
        click.echo(f"Not found: {e.message}", err=True)
        sys.exit(2)
    except TransportError as e:
        click.echo(f"Network error: {e.message}", err=True)
        sys.exit(3)
    except SoundCloudError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"Details: {e.details}")
        sys.exit(4)


def _client(ctx: click.Context) -> Client:
    """Build the Client from --client-id or the loaded configuration."""
    options = ctx.obj
    if options["client_id"]:
        config = ClientConfig(client_id=options["client_id"])
    else:
        config = load_config(options["config_path"])
    return Client.from_config(config)


@click.group()
@click.option(
    "--client-id",
    type=str,
    default=None,
    metavar="<client-id>",
    help="SoundCloud client_id (overrides config and environment)"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show debug output"
)
@click.version_option(__version__, prog_name="soundcloud-client")
@click.pass_context
def cli(
    ctx: click.Context,
    client_id: Optional[str],
    config_path: Optional[Path],
    verbose: bool
) -> None:
    """
    soundcloud-client: search, inspect and download SoundCloud tracks.
    """
    setup_logging("DEBUG" if verbose else "WARNING")
    ctx.obj = {"client_id": client_id, "config_path": config_path}


@cli.command()
@click.argument("url")
@click.pass_context
def resolve(ctx: click.Context, url: str) -> None:
    """Print the API URL a public soundcloud.com URL resolves to."""
    with _handle_errors():
        resolved = _client(ctx).resolve(url)
        click.echo(resolved.geturl())


@cli.command()
@click.option("--query", "-q", default=None, help="Free-text query")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option(
    "--filter", "filter_",
    type=click.Choice([f.value for f in Filter]),
    default=None,
    help="Visibility filter"
)
@click.option("--license", "license_", default=None, help="License, e.g. cc-by")
@click.option("--id", "ids", multiple=True, type=int, help="Track id (repeatable)")
@click.option("--genre", "genres", multiple=True, help="Genre (repeatable)")
@click.option("--type", "types", multiple=True, help="Track type (repeatable)")
@click.pass_context
def search(
    ctx: click.Context,
    query: Optional[str],
    tags: tuple[str, ...],
    filter_: Optional[str],
    license_: Optional[str],
    ids: tuple[int, ...],
    genres: tuple[str, ...],
    types: tuple[str, ...]
) -> None:
    """Search tracks and print one line per result: id, user, title."""
    with _handle_errors():
        builder = (
            _client(ctx).tracks()
            .query(query)
            .tags(tags or None)
            .filter(filter_)
            .license(license_)
            .ids(ids or None)
            .genres(genres or None)
            .types(types or None)
        )
        tracks = builder.get()

        if tracks is NO_RESULTS:
            click.echo("No tracks found.")
            return

        for track in tracks:
            click.echo(f"{track.id}\t{track.user.username}\t{track.title}")


@cli.command()
@click.argument("track_id", type=int)
@click.pass_context
def track(ctx: click.Context, track_id: int) -> None:
    """Print a track's metadata as JSON."""
    with _handle_errors():
        result = _client(ctx).track(track_id)
        click.echo(json.dumps(result.to_api_dict(), indent=2, ensure_ascii=False))


@cli.command()
@click.argument("track_id", type=int)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<file>",
    help="Destination file (default: <permalink>.<original_format>)"
)
@click.pass_context
def download(ctx: click.Context, track_id: int, output: Optional[Path]) -> None:
    """Download a track's original file."""
    with _handle_errors():
        client = _client(ctx)
        result = client.track(track_id)
        destination = output or Path(f"{result.permalink}.{result.original_format}")

        with tqdm(
            total=result.original_content_size or None,
            unit="B",
            unit_scale=True,
            desc=result.title,
            leave=False
        ) as bar:
            size = client.download(result, destination, progress=bar.update)

        click.echo(f"Saved {size} bytes to {destination}")


@cli.command()
@click.argument("track_id", type=int)
@click.pass_context
def stream(ctx: click.Context, track_id: int) -> None:
    """Write a track's audio stream to stdout."""
    with _handle_errors():
        client = _client(ctx)
        result = client.track(track_id)
        out = click.get_binary_stream("stdout")
        size = client.stream(result, out)
        out.flush()
        logger.info(f"Streamed {size} bytes of track {track_id}")


if __name__ == "__main__":
    cli()
