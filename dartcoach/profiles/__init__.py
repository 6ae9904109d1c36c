"""
Profiles module - long-term player statistics.
"""
from .store import (
    HistoryPoint,
    ProfileStats,
    ProfileStore,
    SavedProfile,
    merge_rtc_stats,
    merge_x01_stats,
)

__all__ = [
    "HistoryPoint",
    "ProfileStats",
    "ProfileStore",
    "SavedProfile",
    "merge_rtc_stats",
    "merge_x01_stats",
]
