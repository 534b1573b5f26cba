"""
Reconciles installed channels against the version catalog.
"""

import logging

from jlup.exceptions import (
    CatalogChannelMissingError,
    ChannelNotInstalledError,
    LinkedChannelImmutableError,
)
from jlup.models.catalog import VersionCatalog
from jlup.models.config import JlupConfig, LinkedChannel, SystemChannel

from .aliases import AliasManager, alias_name_for
from .installer import Installer

log = logging.getLogger(__name__)


def update_channel(
    config: JlupConfig,
    channel: str,
    catalog: VersionCatalog,
    installer: Installer,
    aliases: AliasManager,
    allow_linked_skip: bool,
) -> bool:
    """
    Moves a System Channel to the version the catalog currently lists for it.

    Linked channels point at externally managed executables and are never
    modified: they are skipped when ``allow_linked_skip`` is set and rejected
    otherwise.

    Returns:
        True if the channel now points at a different version.

    Raises:
        ChannelNotInstalledError: If the channel is not installed.
        CatalogChannelMissingError: If the catalog no longer lists the channel.
        LinkedChannelImmutableError: If the channel is linked and skipping is
        not allowed.
    """
    current = config.installed_channels.get(channel)
    if current is None:
        raise ChannelNotInstalledError(
            f"'{channel}' cannot be updated because it is currently not installed."
        )

    if isinstance(current, LinkedChannel):
        if allow_linked_skip:
            log.debug(f"Skipping linked channel '{channel}'.")
            return False
        raise LinkedChannelImmutableError(
            f"Failed to update '{channel}' because it is a linked channel."
        )

    should_version = catalog.channel_version(channel)
    if should_version is None:
        raise CatalogChannelMissingError(
            f"Failed to update '{channel}' because it is no longer listed in the "
            "versions db."
        )

    if should_version == current.version:
        log.debug(f"Channel '{channel}' is up to date ({current.version}).")
        return False

    installer.install(should_version, config, catalog)
    config.installed_channels[channel] = SystemChannel(version=should_version)
    log.info(
        f"Updated channel [cyan]{channel}[/cyan] from {current.version} to "
        f"{should_version}."
    )

    if config.settings.create_channel_symlinks and aliases.supported:
        aliases.create_alias(
            installer.executable_path(config, should_version), alias_name_for(channel)
        )
    return True


def update_all(
    config: JlupConfig,
    catalog: VersionCatalog,
    installer: Installer,
    aliases: AliasManager,
) -> list[str]:
    """
    Updates every installed channel, skipping linked ones.

    The first failing channel aborts the remaining ones. Garbage collection and
    persisting the record are left to the caller.

    Returns:
        The names of the channels that moved to a new version.
    """
    updated = []
    for channel in sorted(config.installed_channels):
        if update_channel(
            config, channel, catalog, installer, aliases, allow_linked_skip=True
        ):
            updated.append(channel)
    return updated
