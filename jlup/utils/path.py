"""
Utilities for locating the jlup home, alias and installation directories.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from pathvalidate import sanitize_filename

CONFIG_FILE_NAME = "juliaup.json"


def get_home_dir() -> Path:
    if home := os.getenv("JLUP_HOME"):
        return Path(home).expanduser()
    if os.name == "nt":
        base_dir = Path(os.getenv("LOCALAPPDATA", "~\\AppData\\Local"))
        return base_dir.expanduser() / "juliaup"
    return Path("~/.julia/juliaup").expanduser()


def get_bin_dir(home_dir: Path) -> Path:
    if bin_dir := os.getenv("JLUP_BIN_DIR"):
        return Path(bin_dir).expanduser()
    return home_dir / "bin"


def version_dir_name(version_id: str) -> str:
    """Derives the install directory name for a version id (e.g. 'julia-1.9.3')."""
    return sanitize_filename(f"julia-{version_id}", replacement_text="_")


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class JlupPaths:
    """Filesystem locations used by a single jlup invocation."""

    home: Path
    bin_dir: Path

    @classmethod
    def from_env(cls) -> "JlupPaths":
        home = get_home_dir()
        return cls(home=home, bin_dir=get_bin_dir(home))

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILE_NAME

    def resolve(self, relative_path: str) -> Path:
        """Resolves a path stored in the configuration record against the home dir."""
        return self.home / relative_path
