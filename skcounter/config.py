"""
Score Counter Configuration

Centralized configuration for file locations, default player names and
logging.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional


@dataclass
class CounterConfig:
    """Configuration for the score counter."""

    # Storage
    data_dir: str = '~/.skcounter'
    state_filename: str = 'game.json'
    profiles_filename: str = 'profiles.json'

    # New games
    player_name_template: str = 'Player {n}'  # {n} = 1-based seat number

    # Display
    top_profiles: int = 5

    # Logging
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    @property
    def state_path(self) -> Path:
        """Path of the saved game file."""
        return Path(self.data_dir).expanduser() / self.state_filename

    @property
    def profiles_path(self) -> Path:
        """Path of the profile ledger file."""
        return Path(self.data_dir).expanduser() / self.profiles_filename

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'CounterConfig':
        """Build a config, ignoring keys that are not config fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in config_dict.items() if k in known})

    @classmethod
    def from_file(cls, filepath: str) -> 'CounterConfig':
        """
        Load config from a JSON file written by save() or by hand.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON object
        """
        with open(Path(filepath).expanduser(), 'r') as f:
            config_dict = json.load(f)
        if not isinstance(config_dict, dict):
            raise ValueError(f"Config file {filepath} must hold a JSON object")
        return cls.from_dict(config_dict)

    def save(self, filepath: str):
        """
        Write the config as JSON, creating the parent directory.

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(filepath).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if config is valid

        Raises:
            ValueError: If config values are invalid
        """
        if not self.state_filename:
            raise ValueError("state_filename must not be empty")

        if not self.profiles_filename:
            raise ValueError("profiles_filename must not be empty")

        if self.state_filename == self.profiles_filename:
            raise ValueError(
                f"state_filename and profiles_filename must differ, "
                f"both are {self.state_filename}"
            )

        if '{n}' not in self.player_name_template:
            raise ValueError(
                f"player_name_template must contain '{{n}}', "
                f"got {self.player_name_template!r}"
            )

        if self.top_profiles <= 0:
            raise ValueError(f"top_profiles must be positive, got {self.top_profiles}")

        if self.log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR'):
            raise ValueError(
                f"log_level must be DEBUG, INFO, WARNING or ERROR, got {self.log_level}"
            )

        return True

    def __str__(self) -> str:
        """String representation of config."""
        lines = ["Score Counter Configuration:"]
        lines.append(f"  Game state: {self.state_path}")
        lines.append(f"  Profiles: {self.profiles_path}")
        lines.append(f"  Player names: {self.player_name_template}")
        lines.append(f"  Logging: {self.log_level}" + (f" -> {self.log_file}" if self.log_file else ""))
        return "\n".join(lines)
