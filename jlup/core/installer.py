"""
Installs Julia builds into the jlup home directory and registers them in the
configuration record.
"""

import logging
import os
import shutil
import tarfile
import tempfile
from pathlib import Path

from rich.markup import escape

from jlup.exceptions import (
    CatalogEntryMissingError,
    FileSystemError,
)
from jlup.media.archive import extract_sans_parent
from jlup.media.downloader import Downloader
from jlup.models.catalog import VersionCatalog
from jlup.models.config import InstalledVersion, JlupConfig
from jlup.utils.path import JlupPaths, create_dir, version_dir_name

log = logging.getLogger(__name__)

JULIA_EXECUTABLE = "julia"


def parse_version_string(version_id: str) -> tuple[str, str]:
    """
    Splits a full version id such as ``1.9.3+0.x64.linux.gnu`` into its
    platform (``x64.linux.gnu``) and version (``1.9.3``) parts.
    """
    version, sep, build = version_id.partition("+")
    if not sep:
        return "", version
    _, _, platform = build.partition(".")
    return platform, version


class Installer:
    """Downloads, extracts and registers Julia versions."""

    def __init__(self, paths: JlupPaths, downloader: Downloader | None = None):
        self.paths = paths
        self.downloader = downloader or Downloader()

    def executable_path(self, config: JlupConfig, version_id: str) -> Path:
        """Returns the julia executable inside an installed version's directory."""
        install_dir = self.paths.resolve(config.installed_versions[version_id].path)
        return install_dir / "bin" / JULIA_EXECUTABLE

    def install(
        self, version_id: str, config: JlupConfig, catalog: VersionCatalog
    ) -> bool:
        """
        Ensures ``version_id`` is present on disk and registered in ``config``.

        The version is only registered once extraction has completed, so a
        failed install never leaves a dangling entry in the record.

        Returns:
            True if the version was installed, False if it already was.

        Raises:
            CatalogEntryMissingError: If the catalog has no download url.
            UnsafeArchiveEntryError: If the archive contains unsafe paths.
            DownloadError: If the archive could not be downloaded.
            FileSystemError: If the target directory cannot be prepared or the
            archive is unreadable.
        """
        if version_id in config.installed_versions:
            log.debug(f"Version {version_id} is already installed.")
            return False

        download_url = catalog.download_url(version_id)
        if download_url is None:
            raise CatalogEntryMissingError(
                f"Failed to find download url in versions db for '{version_id}'."
            )

        dir_name = version_dir_name(version_id)
        target_path = self.paths.resolve(dir_name)

        if any(
            self.paths.resolve(installed.path) == target_path
            for installed in config.installed_versions.values()
        ):
            raise FileSystemError(
                f"Install directory '{target_path}' for '{version_id}' already holds "
                "another installed version."
            )

        try:
            create_dir(self.paths.home)
            if target_path.exists():
                log.debug(f"Removing stale install directory '{target_path}'.")
                shutil.rmtree(target_path)
        except OSError as e:
            raise FileSystemError(
                f"Failed to prepare install directory '{target_path}': {e}"
            ) from e

        platform, version = parse_version_string(version_id)
        suffix = f" ({platform})" if platform else ""
        log.info(f"[bold green]Installing[/bold green] Julia {escape(version)}{suffix}.")

        try:
            self._download_and_extract(download_url, target_path, version)
        except Exception:
            self._discard_partial_install(target_path)
            raise

        config.installed_versions[version_id] = InstalledVersion(path=dir_name)
        return True

    def _download_and_extract(self, url: str, target_path: Path, version: str) -> None:
        archive_path = None
        try:
            fd, archive_name = tempfile.mkstemp(
                dir=self.paths.home, prefix=".download-", suffix=".tar.gz"
            )
            os.close(fd)
            archive_path = Path(archive_name)
            self.downloader.fetch(url, archive_path, description=f"Julia {version}")
            extract_sans_parent(archive_path, target_path)
        except (tarfile.TarError, EOFError, OSError) as e:
            raise FileSystemError(
                f"Failed to download and extract '{url}': {e}"
            ) from e
        finally:
            if archive_path is not None:
                archive_path.unlink(missing_ok=True)

    def _discard_partial_install(self, target_path: Path) -> None:
        if not target_path.exists():
            return
        try:
            shutil.rmtree(target_path)
        except OSError as e:
            log.warning(
                f"[yellow]Could not remove partial install at '{target_path}':[/] {e}"
            )
