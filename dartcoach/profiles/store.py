"""
Saved player profiles.

Long-term statistics live in a YAML file. At the end of a match the
engine's per-player stats are merged in: totals are summed, bests are
kept, histograms are merged and one history point per match is appended
for the progress charts.
"""
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from dartcoach.core import GameMode, read_yaml, write_yaml
from dartcoach.game.match import MatchResult
from dartcoach.game.stats import LEG_DART_BUCKETS, SectorTally, StatsBlock

logger = logging.getLogger(__name__)

DEFAULT_PROFILES_PATH = Path("config/profiles.yaml")

# Counters that are simply added up match after match
SUMMED_FIELDS = (
    "total_score",
    "total_darts",
    "scores_60_plus",
    "scores_80_plus",
    "scores_100_plus",
    "scores_120_plus",
    "scores_140_plus",
    "scores_180",
    "ton_plus_finishes",
    "first9_sum",
    "first9_darts",
)


@dataclass
class HistoryPoint:
    """One match on the progress chart."""
    game_value: float  # Value for this match alone
    cumulative_value: float  # Lifetime value after this match
    date: str


@dataclass
class ProfileStats:
    """Lifetime statistics of a saved player."""
    # X01
    games_played: int = 0
    legs_won: int = 0
    sets_won: int = 0
    total_score: int = 0
    total_darts: int = 0
    highest_checkout: int = 0
    scores_60_plus: int = 0
    scores_80_plus: int = 0
    scores_100_plus: int = 0
    scores_120_plus: int = 0
    scores_140_plus: int = 0
    scores_180: int = 0
    ton_plus_finishes: int = 0
    first9_sum: int = 0
    first9_darts: int = 0
    legs_won_darts: Dict[int, int] = field(
        default_factory=lambda: {bucket: 0 for bucket in LEG_DART_BUCKETS}
    )

    # Round the Clock
    rtc_games_played: int = 0
    rtc_best_darts: Optional[int] = None
    rtc_total_throws: int = 0
    rtc_total_hits: int = 0
    rtc_sector_history: Dict[int, SectorTally] = field(default_factory=dict)

    history_x01: List[HistoryPoint] = field(default_factory=list)
    history_rtc: List[HistoryPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileStats":
        data = dict(data)
        sectors = data.pop("rtc_sector_history", None) or {}
        buckets = data.pop("legs_won_darts", None) or {}
        history_x01 = data.pop("history_x01", None) or []
        history_rtc = data.pop("history_rtc", None) or []

        known = set(cls.__dataclass_fields__)
        stats = cls(**{k: v for k, v in data.items() if k in known})

        for bucket, count in buckets.items():
            stats.legs_won_darts[int(bucket)] = count
        stats.rtc_sector_history = {
            int(target): SectorTally(**tally) for target, tally in sectors.items()
        }
        stats.history_x01 = [HistoryPoint(**point) for point in history_x01]
        stats.history_rtc = [HistoryPoint(**point) for point in history_rtc]
        return stats

    @property
    def three_dart_average(self) -> float:
        if self.total_darts == 0:
            return 0.0
        return self.total_score / self.total_darts * 3

    @property
    def rtc_hit_rate(self) -> float:
        if self.rtc_total_throws == 0:
            return 0.0
        return self.rtc_total_hits / self.rtc_total_throws * 100


@dataclass
class SavedProfile:
    """A named player with lifetime statistics."""
    id: str
    name: str
    stats: ProfileStats = field(default_factory=ProfileStats)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedProfile":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            stats=ProfileStats.from_dict(data.get("stats") or {}),
        )


class ProfileStore:
    """
    YAML-backed collection of saved profiles.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize store and load existing profiles.

        Args:
            path: Profiles file (default: config/profiles.yaml)

        Raises:
            yaml.YAMLError: If the existing file is malformed
            ValueError: If the file is not a YAML mapping
        """
        self.path = Path(path) if path else DEFAULT_PROFILES_PATH
        self.profiles: Dict[str, SavedProfile] = {}
        self.load()

    def load(self) -> None:
        """Read profiles from disk (an absent file means no profiles)."""
        data = read_yaml(self.path, missing_ok=True)
        self.profiles = {}
        for entry in data.get("profiles") or []:
            profile = SavedProfile.from_dict(entry)
            self.profiles[profile.id] = profile

        logger.info(f"Loaded {len(self.profiles)} profiles from {self.path}")

    def save(self) -> None:
        """Write all profiles back to disk."""
        write_yaml(
            self.path,
            {"profiles": [asdict(p) for p in self.profiles.values()]},
            keep_backup=True,
        )
        logger.debug(f"Saved {len(self.profiles)} profiles to {self.path}")

    def get(self, profile_id: str) -> Optional[SavedProfile]:
        return self.profiles.get(profile_id)

    def create_profile(self, name: str) -> Optional[SavedProfile]:
        """
        Create and save a new profile.

        Args:
            name: Display name

        Returns:
            The profile, or None for a blank name
        """
        name = name.strip()
        if not name:
            return None

        profile = SavedProfile(id=uuid.uuid4().hex[:12], name=name)
        self.profiles[profile.id] = profile
        self.save()

        logger.info(f"Profile created: {name}")
        return profile

    def delete_profile(self, profile_id: str) -> bool:
        """
        Remove a profile.

        Returns:
            True if removed, False if not found
        """
        profile = self.profiles.pop(profile_id, None)
        if profile is None:
            return False

        self.save()
        logger.info(f"Profile deleted: {profile.name}")
        return True

    def apply_match(self, result: MatchResult, now: Optional[datetime] = None) -> int:
        """
        Merge a finished match into the profiles of its human players.

        Args:
            result: Final match result
            now: Timestamp for history points (current UTC time if None)

        Returns:
            Number of profiles updated
        """
        date = (now or datetime.now(timezone.utc)).isoformat()
        updated = 0

        for player in result.players:
            if player.is_bot or player.profile_id is None:
                continue

            profile = self.profiles.get(player.profile_id)
            if profile is None:
                logger.warning(f"No saved profile for {player.name} ({player.profile_id})")
                continue

            if result.mode == GameMode.X01:
                merge_x01_stats(profile.stats, player.stats, player.sets_won, date)
            else:
                finished_darts = player.stats.rtc_darts_thrown if player.rtc_finished else None
                merge_rtc_stats(profile.stats, player.stats, finished_darts, date)
            updated += 1

        if updated:
            self.save()
        logger.info(f"Match stats merged into {updated} profiles")
        return updated


def merge_x01_stats(
        lifetime: ProfileStats,
        match: StatsBlock,
        sets_won: int,
        date: str
) -> None:
    """Add one X01 match to lifetime statistics."""
    game_average = match.three_dart_average

    lifetime.games_played += 1
    lifetime.legs_won += match.legs_won
    lifetime.sets_won += sets_won
    for name in SUMMED_FIELDS:
        setattr(lifetime, name, getattr(lifetime, name) + getattr(match, name))

    lifetime.highest_checkout = max(lifetime.highest_checkout, match.highest_checkout)
    for bucket, count in match.legs_won_darts.items():
        lifetime.legs_won_darts[bucket] = lifetime.legs_won_darts.get(bucket, 0) + count

    if match.total_darts:
        lifetime.history_x01.append(HistoryPoint(
            game_value=round(game_average, 2),
            cumulative_value=round(lifetime.three_dart_average, 2),
            date=date,
        ))


def merge_rtc_stats(
        lifetime: ProfileStats,
        match: StatsBlock,
        finished_darts: Optional[int],
        date: str
) -> None:
    """Add one Round-the-Clock match to lifetime statistics."""
    lifetime.rtc_games_played += 1
    lifetime.rtc_total_throws += match.rtc_darts_thrown
    lifetime.rtc_total_hits += match.rtc_targets_hit

    if finished_darts is not None:
        if lifetime.rtc_best_darts is None:
            lifetime.rtc_best_darts = finished_darts
        else:
            lifetime.rtc_best_darts = min(lifetime.rtc_best_darts, finished_darts)

    for target, tally in match.rtc_sector_history.items():
        merged = lifetime.rtc_sector_history.setdefault(target, SectorTally())
        merged.attempts += tally.attempts
        merged.hits += tally.hits

    if match.rtc_darts_thrown:
        lifetime.history_rtc.append(HistoryPoint(
            game_value=round(match.rtc_hit_rate, 1),
            cumulative_value=round(lifetime.rtc_hit_rate, 1),
            date=date,
        ))
