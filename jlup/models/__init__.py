"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application: the local configuration record and the
remote version catalog.
"""

from .catalog import CatalogChannel, CatalogVersion, VersionCatalog
from .config import (
    Channel,
    InstalledVersion,
    JlupConfig,
    LinkedChannel,
    Settings,
    SystemChannel,
)

__all__ = [
    "CatalogChannel",
    "CatalogVersion",
    "Channel",
    "InstalledVersion",
    "JlupConfig",
    "LinkedChannel",
    "Settings",
    "SystemChannel",
    "VersionCatalog",
]
