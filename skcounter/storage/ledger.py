"""
Player profile ledger.

Keeps a cross-game record per player name: cumulative points over every
finished game and the number of games played. The ledger is updated once per
finished game from the final ranking.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from skcounter.game.session import (
    DuplicateNameException,
    Player,
    normalize_name,
)
from skcounter.storage.store import read_json, write_json_atomic

logger = logging.getLogger(__name__)


@dataclass
class PlayerProfile:
    """
    Cross-game identity of a player.

    Attributes:
        name: Display name (profiles are keyed by the normalized name)
        cumulative_points: Points summed over all finished games
        played_count: Number of finished games
        last_played_at: ISO-8601 timestamp of the last finished game
    """

    name: str
    cumulative_points: int = 0
    played_count: int = 0
    last_played_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerProfile':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in data.items() if k in valid_keys})


class ProfileLedger:
    """
    JSON-backed collection of player profiles.

    Attributes:
        filepath: JSON file holding the profiles
        profiles: Profiles keyed by normalized name
    """

    def __init__(self, filepath: Union[str, Path]):
        """
        Initialize the ledger and load any saved profiles.

        An unreadable profiles file is logged and the ledger starts empty.
        """
        self.filepath = Path(filepath)
        self.profiles: Dict[str, PlayerProfile] = {}
        try:
            self.load()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load profiles, starting empty: {e}")

    def load(self) -> None:
        """
        Reload profiles from disk.

        Malformed entries are skipped with a warning.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON object
        """
        data = read_json(self.filepath) or {}
        entries = data.get('profiles', [])
        if not isinstance(entries, list):
            raise ValueError(f"{self.filepath}: 'profiles' must be a list")

        self.profiles = {}
        for entry in entries:
            try:
                profile = PlayerProfile.from_dict(entry)
                key = normalize_name(profile.name)
            except (TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed profile {entry!r}: {e}")
                continue
            self.profiles[key] = profile

    def save(self) -> bool:
        """Write profiles to disk. Returns False on failure."""
        data = {'profiles': [asdict(p) for p in self.profiles.values()]}
        return write_json_atomic(self.filepath, data)

    def get(self, name: str) -> Optional[PlayerProfile]:
        return self.profiles.get(normalize_name(name))

    def record_game_result(
        self,
        ranking: Sequence[Tuple[int, Player]],
        played_at: Optional[datetime] = None,
    ) -> bool:
        """
        Add a finished game to the ledger.

        Every ranked player's final points are added to their profile and
        their play count is incremented; missing profiles are created.

        Args:
            ranking: Final (rank, player) standings
            played_at: Time of the game (defaults to now)

        Returns:
            True if the ledger was saved
        """
        timestamp = (played_at or datetime.now()).isoformat(timespec='seconds')

        for rank, player in ranking:
            key = normalize_name(player.name)
            profile = self.profiles.get(key)
            if profile is None:
                profile = PlayerProfile(name=player.name.strip())
                self.profiles[key] = profile

            profile.cumulative_points += player.cumulative_points
            profile.played_count += 1
            profile.last_played_at = timestamp
            logger.info(
                f"Profile {profile.name}: rank {rank}, {player.cumulative_points:+d} pts "
                f"({profile.cumulative_points} total, {profile.played_count} games)"
            )

        return self.save()

    def top_profiles(self, limit: int = 5) -> List[PlayerProfile]:
        """Profiles with the most cumulative points, best first."""
        ordered = sorted(
            self.profiles.values(), key=lambda p: p.cumulative_points, reverse=True
        )
        return ordered[:limit]

    def rename(self, old_name: str, new_name: str) -> bool:
        """
        Rename a profile.

        Raises:
            KeyError: If no profile has old_name
            ValueError: If new_name is empty
            DuplicateNameException: If another profile already uses new_name
        """
        old_key = normalize_name(old_name)
        if old_key not in self.profiles:
            raise KeyError(f"No profile named '{old_name}'")

        trimmed = new_name.strip()
        if not trimmed:
            raise ValueError("Profile name cannot be empty")
        new_key = normalize_name(trimmed)
        if new_key != old_key and new_key in self.profiles:
            raise DuplicateNameException(trimmed)

        profile = self.profiles.pop(old_key)
        profile.name = trimmed
        self.profiles[new_key] = profile
        return self.save()

    def reset_points(self, name: str) -> bool:
        """
        Set a profile's cumulative points back to 0.

        Raises:
            KeyError: If no profile has that name
        """
        profile = self.get(name)
        if profile is None:
            raise KeyError(f"No profile named '{name}'")

        profile.cumulative_points = 0
        return self.save()

    def delete(self, name: str) -> bool:
        """
        Remove a profile.

        Raises:
            KeyError: If no profile has that name
        """
        key = normalize_name(name)
        if key not in self.profiles:
            raise KeyError(f"No profile named '{name}'")

        del self.profiles[key]
        return self.save()
