"""
Core channel/version lifecycle engine.

The `ChannelManager` is the command-level coordinator. It delegates
installing builds to the `Installer`, moving channels to the updater,
reclaiming unreferenced builds to the garbage collector and exposing
channels on the command line to the `AliasManager`.
"""

from .aliases import AliasManager, alias_name_for
from .channel_manager import ChannelManager
from .gc import garbage_collect_versions
from .installer import Installer
from .updater import update_all, update_channel

__all__ = [
    "AliasManager",
    "ChannelManager",
    "Installer",
    "alias_name_for",
    "garbage_collect_versions",
    "update_all",
    "update_channel",
]
