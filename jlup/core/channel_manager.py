"""
The command-level orchestrator. Every public method is one transaction over
the configuration record: load it, mutate it in memory, save it once.
"""

import logging
from collections.abc import Callable

from jlup.cli.progress_manager import ProgressManager
from jlup.exceptions import (
    CatalogChannelMissingError,
    ChannelAlreadyInstalledError,
    ChannelNotInstalledError,
    DefaultChannelRemovalError,
)
from jlup.media.downloader import Downloader
from jlup.models.catalog import VersionCatalog
from jlup.models.config import JlupConfig, LinkedChannel, SystemChannel
from jlup.storage.config_manager import ConfigStore
from jlup.utils.path import JlupPaths
from jlup.web.catalog_fetcher import load_catalog

from .aliases import AliasManager, alias_name_for
from .gc import garbage_collect_versions
from .installer import Installer
from .updater import update_all, update_channel

log = logging.getLogger(__name__)

CatalogLoader = Callable[[], VersionCatalog]


class ChannelManager:
    """Implements the add/link/update/remove/gc/default/config commands."""

    def __init__(
        self,
        paths: JlupPaths,
        store: ConfigStore,
        installer: Installer,
        aliases: AliasManager,
        catalog_loader: CatalogLoader = load_catalog,
    ):
        self.paths = paths
        self.store = store
        self.installer = installer
        self.aliases = aliases
        self._catalog_loader = catalog_loader
        self._catalog: VersionCatalog | None = None

    @classmethod
    def from_paths(
        cls,
        paths: JlupPaths,
        progress_manager: ProgressManager | None = None,
        catalog_loader: CatalogLoader = load_catalog,
    ) -> "ChannelManager":
        return cls(
            paths,
            ConfigStore(paths.config_file),
            Installer(paths, Downloader(progress_manager)),
            AliasManager(paths.bin_dir),
            catalog_loader,
        )

    @property
    def catalog(self) -> VersionCatalog:
        """The version catalog, fetched on first use."""
        if self._catalog is None:
            self._catalog = self._catalog_loader()
        return self._catalog

    def _create_channel_alias(self, config: JlupConfig, channel: str) -> None:
        entry = config.installed_channels[channel]
        if isinstance(entry, LinkedChannel):
            self.aliases.create_launcher(
                entry.command, entry.args, alias_name_for(channel)
            )
        else:
            self.aliases.create_alias(
                self.installer.executable_path(config, entry.version),
                alias_name_for(channel),
            )

    def _symlinks_enabled(self, config: JlupConfig) -> bool:
        return config.settings.create_channel_symlinks and self.aliases.supported

    def add(self, channel: str) -> str:
        """
        Installs the version a catalog channel currently points at and adds the
        channel. The first channel added becomes the default.

        Returns:
            The installed version id.
        """
        required_version = self.catalog.channel_version(channel)
        if required_version is None:
            raise CatalogChannelMissingError(
                f"'{channel}' is not a valid Julia version or channel name."
            )

        config = self.store.load()
        if channel in config.installed_channels:
            raise ChannelAlreadyInstalledError(f"'{channel}' is already installed.")

        self.installer.install(required_version, config, self.catalog)
        config.installed_channels[channel] = SystemChannel(version=required_version)
        if config.default is None:
            config.default = channel

        self.store.save(config)

        if self._symlinks_enabled(config):
            self._create_channel_alias(config, channel)
        return required_version

    def link(self, channel: str, command: str, args: list[str] | None = None) -> None:
        """Adds a channel that runs an externally managed Julia executable."""
        config = self.store.load()
        if channel in config.installed_channels:
            raise ChannelAlreadyInstalledError(
                f"Channel name '{channel}' is already used."
            )

        config.installed_channels[channel] = LinkedChannel(
            command=command, args=list(args) if args else None
        )
        self.store.save(config)

        if self._symlinks_enabled(config):
            self._create_channel_alias(config, channel)

    def update(self, channel: str | None = None) -> list[str]:
        """
        Updates one channel, or every installed channel when ``channel`` is None,
        then garbage-collects unreferenced versions.

        Linked channels are skipped when updating everything and rejected when
        named explicitly.

        Returns:
            The channels that moved to a new version.
        """
        config = self.store.load()

        if channel is None:
            updated = update_all(config, self.catalog, self.installer, self.aliases)
        else:
            if channel not in config.installed_channels:
                raise ChannelNotInstalledError(
                    f"'{channel}' cannot be updated because it is currently not "
                    "installed."
                )
            moved = update_channel(
                config,
                channel,
                self.catalog,
                self.installer,
                self.aliases,
                allow_linked_skip=False,
            )
            updated = [channel] if moved else []

        garbage_collect_versions(config, self.paths)
        self.store.save(config)
        return updated

    def remove(self, channel: str) -> None:
        """Removes a channel and garbage-collects the versions it released."""
        config = self.store.load()
        if channel not in config.installed_channels:
            raise ChannelNotInstalledError(
                f"'{channel}' cannot be removed because it is currently not installed."
            )
        if config.default == channel:
            raise DefaultChannelRemovalError(
                f"'{channel}' cannot be removed because it is currently configured "
                "as the default channel."
            )

        del config.installed_channels[channel]
        garbage_collect_versions(config, self.paths)
        self.store.save(config)

        if self._symlinks_enabled(config):
            self.aliases.remove_alias(alias_name_for(channel))
        log.info(f"Julia '{channel}' successfully removed.")

    def gc(self) -> set[str]:
        """Removes every installed version no System Channel references."""
        config = self.store.load()
        removed = garbage_collect_versions(config, self.paths)
        self.store.save(config)
        return removed

    def set_default(self, channel: str) -> None:
        config = self.store.load()

        if channel not in config.installed_channels:
            if self.catalog.channel_version(channel) is None:
                raise CatalogChannelMissingError(
                    f"'{channel}' is not a valid Julia version."
                )
            raise ChannelNotInstalledError(
                f"'{channel}' is not an installed Julia version, run "
                f"`jlup add {channel}` first."
            )

        config.default = channel
        self.store.save(config)
        log.info(f"Configured the default Julia version to be '{channel}'.")

    def set_symlinks(self, enabled: bool) -> bool:
        """
        Turns channel symlinks on or off, creating or removing the aliases of
        every installed channel accordingly.

        Returns:
            True if the setting changed.
        """
        config = self.store.load()
        if config.settings.create_channel_symlinks == enabled:
            return False

        config.settings.create_channel_symlinks = enabled
        self.store.save(config)

        if self.aliases.supported:
            for channel in sorted(config.installed_channels):
                if enabled:
                    self._create_channel_alias(config, channel)
                else:
                    self.aliases.remove_alias(alias_name_for(channel))
        return True

    def status(self) -> JlupConfig:
        """Loads the record for display; nothing is written."""
        return self.store.load()
