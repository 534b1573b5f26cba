"""
Safe extraction of gzip-compressed Julia tarballs.

Julia release archives wrap their contents in a single top-level directory
(``julia-1.9.3/``). Extraction strips that component and refuses any entry
that could land outside of the target directory.
"""

import logging
import posixpath
import tarfile
from pathlib import Path, PurePosixPath, PureWindowsPath

from jlup.exceptions import UnsafeArchiveEntryError

log = logging.getLogger(__name__)


def _strip_top_level(name: str) -> PurePosixPath | None:
    """
    Removes the leading directory component of an archive member name.

    Returns None for the top-level directory itself. Raises for any name that
    is not a plain relative path.
    """
    if not name or "\\" in name or PureWindowsPath(name).drive:
        raise UnsafeArchiveEntryError(f"Archive entry '{name}' is not a relative path.")

    path = PurePosixPath(name)
    if path.is_absolute():
        raise UnsafeArchiveEntryError(f"Archive entry '{name}' is an absolute path.")
    if any(part == ".." for part in path.parts):
        raise UnsafeArchiveEntryError(
            f"Archive entry '{name}' contains a parent directory reference."
        )

    stripped = path.parts[1:]
    if not stripped:
        return None
    return PurePosixPath(*stripped)


def _check_link_target(member: tarfile.TarInfo, stripped: PurePosixPath) -> str:
    """Validates a link member and returns its rewritten link name."""
    linkname = member.linkname
    if (
        not linkname
        or PurePosixPath(linkname).is_absolute()
        or PureWindowsPath(linkname).drive
    ):
        raise UnsafeArchiveEntryError(
            f"Archive entry '{member.name}' links to absolute path '{linkname}'."
        )

    if member.islnk():
        # Hard link targets are other members of the same archive.
        target = _strip_top_level(linkname)
        if target is None:
            raise UnsafeArchiveEntryError(
                f"Archive entry '{member.name}' links to the archive root."
            )
        return str(target)

    resolved = posixpath.normpath(posixpath.join(str(stripped.parent), linkname))
    if resolved == ".." or resolved.startswith("../"):
        raise UnsafeArchiveEntryError(
            f"Archive entry '{member.name}' links outside of the install "
            f"directory ('{linkname}')."
        )
    return linkname


def plan_extraction(members: list[tarfile.TarInfo]) -> list[tarfile.TarInfo]:
    """
    Validates every archive member and returns copies renamed relative to the
    extraction directory.

    Raises:
        UnsafeArchiveEntryError: On the first member that is not safe to extract.
    """
    planned = []
    for member in members:
        stripped = _strip_top_level(member.name)
        if stripped is None:
            continue

        if not (member.isfile() or member.isdir() or member.issym() or member.islnk()):
            raise UnsafeArchiveEntryError(
                f"Archive entry '{member.name}' is not a regular file, directory "
                "or link."
            )

        changes = {"name": str(stripped)}
        if member.issym() or member.islnk():
            changes["linkname"] = _check_link_target(member, stripped)
        planned.append(member.replace(**changes, deep=False))
    return planned


def extract_sans_parent(archive_path: Path, target_dir: Path) -> int:
    """
    Extracts a ``.tar.gz`` archive into ``target_dir``, dropping its top-level
    directory.

    Every member is validated before anything is written, so an unsafe archive
    leaves no files behind.

    Returns:
        The number of extracted entries.

    Raises:
        UnsafeArchiveEntryError: If any member is not a plain relative path.
        tarfile.TarError: If the archive itself is unreadable.
    """
    with tarfile.open(archive_path, mode="r:gz") as tar:
        planned = plan_extraction(tar.getmembers())

        target_dir.mkdir(parents=True, exist_ok=True)
        for member in planned:
            try:
                tar.extract(member, path=target_dir, filter="data")
            except tarfile.FilterError as e:
                raise UnsafeArchiveEntryError(
                    f"Archive entry '{member.name}' was rejected: {e}"
                ) from e

    log.debug(f"Extracted {len(planned)} entries into '{target_dir}'.")
    return len(planned)
