"""
Storage module for cosmogen.

Provides JSON persistence for snapshots, configs and statistics.
"""

from .json_storage import JSONStorage, save_snapshot, load_snapshot

__all__ = [
    "JSONStorage",
    "save_snapshot",
    "load_snapshot",
]
