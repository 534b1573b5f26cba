"""
Pydantic models for the persisted configuration record (``juliaup.json``).

Channels are stored as a tagged union: every entry carries an explicit
``Kind`` so a System Channel and a Linked Channel can never be confused.
Records written by older tools without ``Kind`` are tagged on load from the
fields they carry.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class InstalledVersion(BaseModel):
    """An installed Julia build, located relative to the jlup home directory."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    path: str = Field(alias="Path")


class SystemChannel(BaseModel):
    """A channel pointing at a build installed and managed by jlup."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: Literal["system"] = Field(default="system", alias="Kind")
    version: str = Field(alias="Version")


class LinkedChannel(BaseModel):
    """A channel pointing at an externally managed Julia executable."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: Literal["linked"] = Field(default="linked", alias="Kind")
    command: str = Field(alias="Command")
    args: list[str] | None = Field(default=None, alias="Args")


Channel = Annotated[Union[SystemChannel, LinkedChannel], Field(discriminator="kind")]


class Settings(BaseModel):
    """Global options stored alongside the channel index."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    create_channel_symlinks: bool = Field(default=False, alias="CreateChannelSymlinks")


def _tag_channel(name: str, entry: Any) -> Any:
    if isinstance(entry, BaseModel):
        return entry.model_dump(by_alias=True)
    if not isinstance(entry, dict) or "Kind" in entry:
        return entry

    has_version = "Version" in entry
    has_command = "Command" in entry
    if has_version and not has_command:
        return {**entry, "Kind": "system"}
    if has_command and not has_version:
        return {**entry, "Kind": "linked"}
    raise ValueError(
        f"Channel '{name}' is ambiguous: it must define either 'Version' or "
        "'Command', but not both."
    )


class JlupConfig(BaseModel):
    """The full local state record: installed builds, channels and options."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    default: str | None = Field(default=None, alias="Default")
    installed_versions: dict[str, InstalledVersion] = Field(
        default_factory=dict, alias="InstalledVersions"
    )
    installed_channels: dict[str, Channel] = Field(
        default_factory=dict, alias="InstalledChannels"
    )
    settings: Settings = Field(default_factory=Settings, alias="Settings")

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_settings(cls, data: Any) -> Any:
        """Moves the old top-level ``CreateSymlinks`` flag into ``Settings``."""
        if isinstance(data, dict) and "CreateSymlinks" in data:
            data = dict(data)
            legacy_flag = data.pop("CreateSymlinks")
            if "Settings" not in data:
                data["Settings"] = {"CreateChannelSymlinks": bool(legacy_flag)}
        return data

    @field_validator("installed_channels", mode="before")
    @classmethod
    def tag_channels(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {name: _tag_channel(name, entry) for name, entry in v.items()}

    def referenced_versions(self) -> set[str]:
        """Returns every version id referenced by at least one System Channel."""
        return {
            channel.version
            for channel in self.installed_channels.values()
            if isinstance(channel, SystemChannel)
        }

    def to_json_dict(self) -> dict[str, Any]:
        """Serializes the record with its on-disk field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
