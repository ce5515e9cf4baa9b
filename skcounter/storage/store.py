"""
JSON file store for the active game.

The store keeps one JSON document holding the roster and the session fields
(round, phase, Kraken flag, preview baseline), so an interrupted game can be
resumed. Writes are atomic and never raise: a failed save is logged and
reported as False, leaving the in-memory session authoritative.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from skcounter.game.session import GameSession, Player

logger = logging.getLogger(__name__)


def write_json_atomic(filepath: Path, data: Dict[str, Any]) -> bool:
    """
    Write JSON to a temp file, then rename it over the target.

    Args:
        filepath: Destination file
        data: JSON-serializable document

    Returns:
        True on success, False if the write failed
    """
    tmp_file = filepath.with_suffix(filepath.suffix + '.tmp')
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_file, 'w') as f:
            json.dump(data, f, indent=2)

        # Atomic rename (POSIX guarantees atomicity)
        tmp_file.replace(filepath)
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to write {filepath}: {e}")
        # Clean up temp file if it exists
        if tmp_file.exists():
            try:
                tmp_file.unlink()
            except OSError:
                pass
        return False


def read_json(filepath: Path) -> Optional[Dict[str, Any]]:
    """
    Read a JSON document.

    Returns:
        The document, or None if the file does not exist

    Raises:
        ValueError: If the file is not valid JSON or not a JSON object
    """
    if not filepath.exists():
        return None

    with open(filepath, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{filepath} does not hold a JSON object")
    return data


class GameStore:
    """
    Persists the roster and session of the active game.

    Attributes:
        filepath: JSON file holding the game state
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)

    def exists(self) -> bool:
        """Whether a saved game is available."""
        return self.filepath.exists()

    def load_session(self) -> Optional[GameSession]:
        """
        Load the saved session.

        Returns:
            The session, or None if nothing has been saved

        Raises:
            ValueError: If the saved file is corrupt
        """
        data = read_json(self.filepath)
        if data is None:
            return None

        try:
            return GameSession.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid game state in {self.filepath}: {e}") from e

    def load_roster(self) -> List[Player]:
        """Players of the saved game in seat order (empty if none)."""
        session = self.load_session()
        if session is None:
            return []
        return session.players

    def save_session(self, session: GameSession) -> bool:
        """Save the session and its roster. Returns False on failure."""
        saved = write_json_atomic(self.filepath, session.to_dict())
        if saved:
            logger.debug(f"Saved game state to {self.filepath}")
        return saved

    def save_roster(self, players: Sequence[Player]) -> bool:
        """
        Save the roster, keeping the stored session fields.

        Returns False on failure (including an unreadable existing file).
        """
        try:
            data = read_json(self.filepath) or {}
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {self.filepath}: {e}")
            return False

        data['players'] = [p.to_dict() for p in players]
        return write_json_atomic(self.filepath, data)

    def clear(self) -> bool:
        """Delete the saved game. Returns False on failure."""
        try:
            self.filepath.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to delete {self.filepath}: {e}")
            return False
        return True
