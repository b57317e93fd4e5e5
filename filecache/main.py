"""Main entry point for the filecache maintenance CLI.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from filecache.core.command_handler import EXIT_FAILURE, CommandHandler

# --- Domain Layer ---
from filecache.domain.exceptions import CacheDirectoryError

# --- Infrastructure Layer ---
# Cache
from filecache.infrastructure.cache.file_cache import FileCache
# UI
from filecache.infrastructure.cli.display import ConsoleDisplay
# Config
from filecache.infrastructure.config.settings import (
    get_cache_dir,
    get_log_file,
    get_log_format,
    get_log_level,
    load_configuration,
)
# Monitoring
from filecache.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)


def create_command_handler(cache_dir: Optional[Path] = None, verbose: bool = False) -> CommandHandler:
    """Creates and wires up all dependencies for a CLI invocation.

    This acts as the Composition Root.

    Raises:
        typer.Exit: If the cache directory is unusable.
    """
    # 1. Load Configuration First, then configure logging from it
    load_configuration()
    setup_logging(
        log_level=logging.DEBUG if verbose else get_log_level(),
        log_format=get_log_format(),
        log_file=get_log_file(),
    )

    # 2. Instantiate Infrastructure Adapters
    ui = ConsoleDisplay()
    directory = cache_dir or get_cache_dir()
    try:
        cache = FileCache(directory)
    except CacheDirectoryError as e:
        logger.error(f"Cache initialization failed: {e}")
        ui.display_error(str(e))
        raise typer.Exit(code=EXIT_FAILURE)

    # 3. Command Handler
    return CommandHandler(cache=cache, ui=ui)


# --- Typer App Definition ---
app = typer.Typer(
    name="filecache",
    help="Inspect and maintain a filecache directory.",
    add_completion=False,
    no_args_is_help=True,
)

# Shared TTL option
TtlOption = Annotated[
    Optional[int],
    typer.Option("--ttl", "-t", help="Time-to-live in seconds. Never expires if omitted.")
]


@app.callback()
def main_callback(
    ctx: typer.Context,
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", file_okay=False, help="Cache directory. Defaults to the configured cache.dir.")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Sets up the cache for the invoked command."""
    ctx.obj = create_command_handler(cache_dir, verbose)


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
    default: Annotated[Optional[str], typer.Option("--default", help="Printed when the key is missing.")] = None,
):
    """Print the value stored under KEY."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_get(key, default))


@app.command(name="get-many")
def get_many(
    ctx: typer.Context,
    keys: Annotated[List[str], typer.Argument(help="Cache keys.")],
):
    """Print the values stored under several keys."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_get_many(keys))


@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
    value: Annotated[str, typer.Argument(help="Value to store.")],
    ttl: TtlOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Decode VALUE as JSON before storing.")] = False,
):
    """Store VALUE under KEY."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_set(key, value, ttl, as_json))


@app.command()
def has(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
):
    """Report whether KEY holds a live value (exit status 1 if not)."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_has(key))


@app.command()
def delete(
    ctx: typer.Context,
    keys: Annotated[List[str], typer.Argument(help="Cache keys to delete.")],
):
    """Delete one or more keys."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_delete(keys))


@app.command()
def clear(ctx: typer.Context):
    """Remove every entry from the cache directory."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_clear())


@app.command()
def prune(ctx: typer.Context):
    """Remove expired and corrupt entries."""
    handler: CommandHandler = ctx.obj
    raise typer.Exit(code=handler.handle_prune())


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
