"""
Defines the command-line interface for the application using Typer.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from jlup import __version__
from jlup.core.channel_manager import ChannelManager
from jlup.utils.path import JlupPaths

from .formatters import print_status_table
from .progress_manager import ProgressManager

console = Console()
err_console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=err_console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            show_time=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("jlup")

app = typer.Typer(
    name="jlup",
    help="The Julia Version Manager. Use 'jlup <command> --help' for more info.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

SYMLINK_PROPERTIES = ("channelsymlinks",)
TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0")


def _manager(progress_manager: ProgressManager | None = None) -> ChannelManager:
    paths = JlupPaths.from_env()
    log.debug(f"Using jlup home '{paths.home}' and bin dir '{paths.bin_dir}'.")
    return ChannelManager.from_paths(paths, progress_manager)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """The Julia Version Manager"""
    if version:
        console.print(f"[bold]jlup[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("jlup").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def add(channel: str = typer.Argument(..., help="Julia version or channel name.")):
    """Add a specific Julia version or channel to your system."""
    with ProgressManager(err_console) as progress_manager:
        version = _manager(progress_manager).add(channel)
    console.print(f"[green]✓[/green] Added channel '{channel}' (Julia {version}).")


@app.command(context_settings={"ignore_unknown_options": True})
def link(
    channel: str = typer.Argument(..., help="Name of the new channel."),
    file: str = typer.Argument(..., help="Path to an existing Julia executable."),
    args: list[str] | None = typer.Argument(  # noqa: B008
        None, help="Extra arguments passed to Julia on every start."
    ),
):
    """Link an existing Julia binary to a custom channel name."""
    _manager().link(channel, file, args)
    console.print(f"[green]✓[/green] Linked channel '{channel}' to {file}.")


@app.command()
def update(
    channel: str | None = typer.Argument(
        None, help="Channel to update. All channels are updated when omitted."
    ),
):
    """Update all or a specific channel to the latest Julia version."""
    with ProgressManager(err_console) as progress_manager:
        updated = _manager(progress_manager).update(channel)
    if updated:
        console.print(f"[green]✓[/green] Updated: {', '.join(updated)}.")
    else:
        console.print("[green]✓[/green] All channels are up to date.")


@app.command()
def remove(channel: str = typer.Argument(..., help="Channel to remove.")):
    """Remove a Julia version from your system."""
    _manager().remove(channel)


@app.command()
def status(
    check_updates: bool = typer.Option(
        False, "--check-updates", help="Compare channels against the versions db."
    ),
):
    """Show all installed Julia versions."""
    manager = _manager()
    config = manager.status()
    catalog = manager.catalog if check_updates else None
    print_status_table(console, config, catalog)


@app.command()
def gc():
    """Garbage collect uninstalled Julia versions."""
    removed = _manager().gc()
    if removed:
        console.print(
            f"[green]✓[/green] Removed {len(removed)} unused version(s): "
            f"{', '.join(sorted(removed))}."
        )
    else:
        console.print("[green]✓[/green] Nothing to collect.")


@app.command()
def default(channel: str = typer.Argument(..., help="Channel to use by default.")):
    """Set the default Julia version."""
    _manager().set_default(channel)


@app.command()
def config(
    property_name: str = typer.Argument(..., metavar="PROPERTY", help="channelsymlinks"),
    value: str = typer.Argument(..., help="true or false"),
):
    """Change config values of jlup."""
    if property_name.lower() not in SYMLINK_PROPERTIES:
        console.print(f"[red]✗ Unknown property '{property_name}'.[/red]")
        raise typer.Exit(code=1)

    if value.lower() in TRUE_VALUES:
        enabled = True
    elif value.lower() in FALSE_VALUES:
        enabled = False
    else:
        console.print(f"[red]✗ '{value}' is not a valid boolean value.[/red]")
        raise typer.Exit(code=1)

    if _manager().set_symlinks(enabled):
        console.print(f"[green]✓[/green] Property '{property_name}' set to '{value}'.")
    else:
        console.print(f"Property '{property_name}' is already set to '{value}'.")


app.command(name="up", hidden=True)(update)
app.command(name="rm", hidden=True)(remove)
app.command(name="st", hidden=True)(status)
