"""
Creates and removes the ``julia-<channel>`` command aliases.
"""

import logging
import os
import shlex
from pathlib import Path

from jlup.exceptions import FileSystemError

log = logging.getLogger(__name__)


def alias_name_for(channel: str) -> str:
    return f"julia-{channel}"


def launcher_script(command: str, args: list[str] | None = None) -> str:
    """Renders a POSIX shell script that runs ``command`` with ``args`` prepended."""
    return f'#!/bin/sh\nexec {shlex.join([command, *(args or [])])} "$@"\n'


class AliasManager:
    """
    Manages the command aliases in the alias directory.

    Installed versions are exposed as symlinks to their julia executable.
    Linked channels get a small launcher script instead, so that their
    extra arguments are kept and a bare command name is looked up on PATH.

    Windows exposes channels through a different mechanism, so on that
    platform every operation is a no-op.
    """

    def __init__(self, bin_dir: Path, supported: bool | None = None):
        self.bin_dir = bin_dir
        self.supported = os.name != "nt" if supported is None else supported

    def alias_path(self, alias_name: str) -> Path:
        return self.bin_dir / alias_name

    def create_alias(self, target_executable_path: Path, alias_name: str) -> None:
        """
        Points ``alias_name`` at ``target_executable_path``, replacing any file
        or symlink already at that location.

        Raises:
            FileSystemError: If the alias cannot be created.
        """
        if not self.supported:
            return

        self.remove_alias(alias_name, quiet=True)
        alias_path = self.alias_path(alias_name)

        log.info(f"[bold cyan]Creating symlink[/bold cyan] {alias_name}.")
        try:
            os.symlink(target_executable_path, alias_path)
        except OSError as e:
            raise FileSystemError(
                f"Failed to create symlink '{alias_path}' -> "
                f"'{target_executable_path}': {e}"
            ) from e

        self._warn_if_not_on_path(alias_name)

    def create_launcher(
        self, command: str, args: list[str] | None, alias_name: str
    ) -> None:
        """
        Writes an executable launcher named ``alias_name`` that runs
        ``command`` with ``args`` followed by the caller's own arguments.

        Raises:
            FileSystemError: If the launcher cannot be written.
        """
        if not self.supported:
            return

        self.remove_alias(alias_name, quiet=True)
        alias_path = self.alias_path(alias_name)

        log.info(f"[bold cyan]Creating launcher[/bold cyan] {alias_name}.")
        try:
            alias_path.write_text(launcher_script(command, args), encoding="utf-8")
            alias_path.chmod(0o755)
        except OSError as e:
            raise FileSystemError(
                f"Failed to create launcher '{alias_path}' for '{command}': {e}"
            ) from e

        self._warn_if_not_on_path(alias_name)

    def remove_alias(self, alias_name: str, quiet: bool = False) -> None:
        """
        Deletes an alias if it exists.

        Raises:
            FileSystemError: If the alias exists but cannot be removed.
        """
        if not self.supported:
            return

        alias_path = self.alias_path(alias_name)
        try:
            self.bin_dir.mkdir(parents=True, exist_ok=True)
            if alias_path.is_symlink() or alias_path.exists():
                if not quiet:
                    log.info(f"[bold cyan]Deleting symlink[/bold cyan] {alias_name}.")
                alias_path.unlink()
        except OSError as e:
            raise FileSystemError(f"Failed to remove symlink '{alias_path}': {e}") from e

    def _warn_if_not_on_path(self, alias_name: str) -> None:
        if not self._bin_dir_on_path():
            log.warning(
                f"[yellow]Symlink {alias_name} added in {self.bin_dir}. Add this "
                "directory to the system PATH to make the command available in "
                "your shell.[/yellow]"
            )

    def _bin_dir_on_path(self) -> bool:
        search_path = os.getenv("PATH", "")
        entries = [Path(p).expanduser() for p in search_path.split(os.pathsep) if p]
        return any(entry == self.bin_dir for entry in entries)
