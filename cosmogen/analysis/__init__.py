"""
Analysis module for cosmogen.

- Statistics: totals per body type, belts, disks, black holes
- Integrity: structural checks of generated snapshots
"""

from .stats import GenerationStats, compute_generation_stats
from .integrity import check_snapshot

__all__ = [
    "GenerationStats",
    "compute_generation_stats",
    "check_snapshot",
]
