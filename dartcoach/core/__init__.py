"""
Core module - shared data types and file utilities.
"""
from .types import (
    GameMode,
    MatchUnit,
    MatchSettings,
    Throw,
)
from .yaml_files import (
    backup_path,
    read_yaml,
    write_yaml,
)

__all__ = [
    # Types
    "GameMode",
    "MatchUnit",
    "MatchSettings",
    "Throw",
    # I/O
    "backup_path",
    "read_yaml",
    "write_yaml",
]
