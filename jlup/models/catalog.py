"""
Pydantic models for the remote version catalog.
"""

from pydantic import BaseModel, ConfigDict, Field


class CatalogVersion(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str = Field(alias="Url")


class CatalogChannel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str = Field(alias="Version")


class VersionCatalog(BaseModel):
    """Maps channels to their current version and versions to download URLs."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    available_versions: dict[str, CatalogVersion] = Field(
        default_factory=dict, alias="AvailableVersions"
    )
    available_channels: dict[str, CatalogChannel] = Field(
        default_factory=dict, alias="AvailableChannels"
    )

    def channel_version(self, channel: str) -> str | None:
        """Returns the current version id for a channel, if the catalog lists it."""
        entry = self.available_channels.get(channel)
        return entry.version if entry else None

    def download_url(self, version_id: str) -> str | None:
        entry = self.available_versions.get(version_id)
        return entry.url if entry else None
