"""
Storage Layer.

This package handles persistence of the configuration record.
"""

from .config_manager import ConfigStore

__all__ = ["ConfigStore"]
