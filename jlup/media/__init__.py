"""
Media Handling Layer.

This package downloads Julia release archives and unpacks them safely.
"""

from .archive import extract_sans_parent
from .downloader import Downloader

__all__ = ["Downloader", "extract_sans_parent"]
