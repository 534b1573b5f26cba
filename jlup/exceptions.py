"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class JlupError(Exception):
    """Base exception for all application-specific errors."""


class ConfigIOError(JlupError):
    """Raised when the configuration file cannot be read or written."""


class ConfigCorruptError(JlupError):
    """Raised when the configuration file exists but cannot be parsed."""


class CatalogIOError(JlupError):
    """Raised when the version catalog cannot be fetched or parsed."""


class CatalogEntryMissingError(JlupError):
    """Raised when a version has no download location in the catalog."""


class CatalogChannelMissingError(JlupError):
    """Raised when a channel name is not listed in the catalog."""


class ChannelNotInstalledError(JlupError):
    """Raised when an operation targets a channel that is not installed."""


class ChannelAlreadyInstalledError(JlupError):
    """Raised when adding or linking a channel name that is already taken."""


class LinkedChannelImmutableError(JlupError):
    """Raised when an explicit update targets a linked channel."""


class DefaultChannelRemovalError(JlupError):
    """Raised when attempting to remove the current default channel."""


class UnsafeArchiveEntryError(JlupError):
    """
    Raised when a downloaded archive contains an entry that would be written
    outside of its extraction directory.
    """


class DownloadError(JlupError):
    """Raised when a Julia archive could not be downloaded."""


class FileSystemError(JlupError):
    """Raised for failing directory or alias operations."""
