"""
Functions for formatting and displaying data in the console using Rich.
"""

import shlex

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jlup.models.catalog import VersionCatalog
from jlup.models.config import JlupConfig, LinkedChannel


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigCorruptError": [
            "• The configuration file could not be parsed.",
            "• Fix or delete the file named above; deleting it forgets all channels.",
        ],
        "ConfigIOError": [
            "• Check the permissions of the jlup home directory.",
            "• Set JLUP_HOME to use a different location.",
        ],
        "CatalogIOError": [
            "• Check your internet connection.",
            "• Set JLUP_VERSIONDB_URL if you use a mirror.",
        ],
        "CatalogChannelMissingError": [
            "• Check the spelling of the channel name.",
            "• Run `jlup status` to list installed channels.",
        ],
        "ChannelNotInstalledError": [
            "• Run `jlup status` to list installed channels.",
            "• Use `jlup add <channel>` to install a channel.",
        ],
        "ChannelAlreadyInstalledError": [
            "• Use `jlup update <channel>` to move it to the latest version.",
            "• Use `jlup remove <channel>` first to replace it.",
        ],
        "LinkedChannelImmutableError": [
            "• Linked channels point at Julia installations jlup does not manage.",
            "• Update the linked installation directly.",
        ],
        "DefaultChannelRemovalError": [
            "• Select another default with `jlup default <channel>` first.",
        ],
        "UnsafeArchiveEntryError": [
            "• The downloaded archive is corrupted or has been tampered with.",
            "• Nothing was installed. Please try again later.",
        ],
        "DownloadError": [
            "• A network connection issue occurred.",
            "• The download server might be temporarily unavailable.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_status_table(
    console: Console, config: JlupConfig, catalog: VersionCatalog | None = None
):
    """Displays every installed channel, marking the default one."""
    if not config.installed_channels:
        console.print(
            "[yellow]No Julia channels installed.[/yellow] "
            "Try [cyan]jlup add release[/cyan]."
        )
        return

    table = Table(title="Installed Julia channels", header_style="bold cyan")
    table.add_column("Default", justify="center")
    table.add_column("Channel", style="bold")
    table.add_column("Version")
    if catalog is not None:
        table.add_column("Update")

    for name in sorted(config.installed_channels):
        channel = config.installed_channels[name]
        marker = "[green]*[/green]" if config.default == name else ""
        update = ""
        if isinstance(channel, LinkedChannel):
            command_line = shlex.join([channel.command, *(channel.args or [])])
            description = f"[dim]Linked to[/dim] {escape(command_line)}"
        else:
            description = channel.version
            latest = catalog.channel_version(name) if catalog else None
            if latest and latest != channel.version:
                update = f"[yellow]{latest}[/yellow]"

        row = [marker, name, description]
        if catalog is not None:
            row.append(update)
        table.add_row(*row)

    console.print(table)
