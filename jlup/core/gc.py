"""
Garbage collection of installed versions that no channel references anymore.
"""

import logging
import shutil

from jlup.models.config import JlupConfig
from jlup.utils.path import JlupPaths

log = logging.getLogger(__name__)


def garbage_collect_versions(config: JlupConfig, paths: JlupPaths) -> set[str]:
    """
    Removes every installed version that no System Channel points at.

    Deleting a version's directory is best effort: a failure is reported as a
    warning and the version is dropped from the index anyway.

    Returns:
        The version ids removed from ``config.installed_versions``.
    """
    live_versions = config.referenced_versions()
    dead_versions = {
        version_id: entry
        for version_id, entry in config.installed_versions.items()
        if version_id not in live_versions
    }

    for version_id, entry in dead_versions.items():
        path_to_delete = paths.resolve(entry.path)
        log.debug(f"Removing unreferenced version {version_id} at '{path_to_delete}'.")
        try:
            shutil.rmtree(path_to_delete)
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning(
                f"[yellow]Failed to delete {path_to_delete}.[/yellow] It is no longer "
                f"tracked and has to be removed manually. ({e})"
            )
        del config.installed_versions[version_id]

    return set(dead_versions)
