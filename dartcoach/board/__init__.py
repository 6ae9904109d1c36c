"""
Board module - dartboard number layout.
"""
from .layout import SECTOR_SEQUENCE, sector_neighbors

__all__ = [
    "SECTOR_SEQUENCE",
    "sector_neighbors",
]
