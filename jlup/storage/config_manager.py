"""
Manages loading and saving of the JSON configuration record.
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from pydantic import ValidationError

from jlup.exceptions import ConfigCorruptError, ConfigIOError
from jlup.models.config import JlupConfig

log = logging.getLogger(__name__)


class ConfigStore:
    """Handles all operations related to the application's configuration record."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path

    def load(self) -> JlupConfig:
        """
        Loads the configuration record from disk.

        A missing file is not an error: a fresh, empty record is returned.

        Returns:
            The parsed configuration record.

        Raises:
            ConfigCorruptError: If the file exists but cannot be parsed.
            ConfigIOError: If the file cannot be opened or read.
        """
        try:
            with open(self.config_file_path, encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            log.debug(
                f"No configuration file at '{self.config_file_path}', "
                "starting with an empty record."
            )
            return JlupConfig()
        except OSError as e:
            raise ConfigIOError(
                f"Problem opening the configuration file '{self.config_file_path}': {e}"
            ) from e

        try:
            return JlupConfig.model_validate(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise ConfigCorruptError(
                f"Failed to parse configuration file '{self.config_file_path}': {e}"
            ) from e

    def save(self, config: JlupConfig) -> None:
        """
        Writes the full configuration record back to disk.

        The record is written to a temporary file in the same directory and
        then renamed over the target, so an interrupted save never leaves a
        truncated record behind.

        Raises:
            ConfigIOError: If the directory cannot be created or the write fails.
        """
        config_dir = self.config_file_path.parent
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOError(
                f"Failed to create jlup home directory '{config_dir}': {e}"
            ) from e

        payload = json.dumps(config.to_json_dict(), indent=2)

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=config_dir,
                prefix=f".{self.config_file_path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.config_file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise ConfigIOError(
                f"Failed to write configuration file '{self.config_file_path}': {e}"
            ) from e

        log.debug(f"Saved configuration to '{self.config_file_path}'.")

    def _file_mode(self) -> int:
        """The permissions of the existing record, or the umask default for a new one."""
        try:
            return stat.S_IMODE(os.stat(self.config_file_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
