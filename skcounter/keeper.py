"""
Score keeper facade.

Wires the game session to the game store and the profile ledger: every
mutating operation is applied to the in-memory session first, then saved.
Saving is fire-and-forget: a failed save is logged, remembered in
``last_save_ok`` and never rolls back or corrupts the session.
"""

import logging
from typing import List, Optional

from skcounter.config import CounterConfig
from skcounter.game.session import (
    GameOver,
    GameSession,
    GameStateException,
    Player,
    Rejected,
    RoundResult,
    ensure_unique_name,
    start_game,
)
from skcounter.storage.ledger import PlayerProfile, ProfileLedger
from skcounter.storage.store import GameStore

logger = logging.getLogger(__name__)


class ScoreKeeper:
    """
    Caller-facing entry point for running a game.

    Attributes:
        store: Persistence for the active game
        ledger: Cross-game player profiles
        name_template: Default player name format for new games
        session: Active game, or None
        last_save_ok: Whether the most recent save succeeded
    """

    def __init__(
        self,
        store: GameStore,
        ledger: ProfileLedger,
        name_template: str = 'Player {n}',
    ):
        self.store = store
        self.ledger = ledger
        self.name_template = name_template
        self.session: Optional[GameSession] = None
        self.last_save_ok = True

    @classmethod
    def from_config(cls, config: CounterConfig) -> 'ScoreKeeper':
        """Create a keeper using the configured file locations."""
        return cls(
            store=GameStore(config.state_path),
            ledger=ProfileLedger(config.profiles_path),
            name_template=config.player_name_template,
        )

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _persist(self) -> bool:
        if self.session is None:
            return True

        saved = self.store.save_session(self.session)
        if not saved:
            logger.warning("Game state not saved, keeping in-memory state")
        self.last_save_ok = saved
        return saved

    def require_session(self) -> GameSession:
        """
        The active session.

        Raises:
            GameStateException: If no game is in progress
        """
        if self.session is None:
            raise GameStateException("No game in progress")
        return self.session

    def resume(self) -> Optional[GameSession]:
        """
        Load the saved game, if any.

        A corrupt or unreadable save is logged and treated as no game.
        """
        try:
            self.session = self.store.load_session()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load saved game: {e}")
            self.session = None

        if self.session is not None:
            logger.info(
                f"Resumed game at round {self.session.current_round}/"
                f"{self.session.max_rounds} ({self.session.phase.value})"
            )
        return self.session

    def start_game(self, player_count: int) -> GameSession:
        """
        Start a new game, replacing any game in progress.

        Raises:
            InvalidPlayerCountException: If player_count is outside [2, 12]
        """
        session = start_game(player_count, self.name_template)
        self.session = session
        self._persist()
        return session

    def new_game(self) -> None:
        """Discard the current game and its saved state."""
        self.session = None
        self.last_save_ok = self.store.clear()

    # ------------------------------------------------------------------
    # Round operations
    # ------------------------------------------------------------------

    def adjust_bid(self, player: Player, delta: int) -> bool:
        changed = self.require_session().adjust_bid(player, delta)
        if changed:
            self._persist()
        return changed

    def adjust_tricks(self, player: Player, delta: int) -> bool:
        changed = self.require_session().adjust_tricks(player, delta)
        if changed:
            self._persist()
        return changed

    def toggle_kraken(self) -> bool:
        changed = self.require_session().toggle_kraken()
        if changed:
            self._persist()
        return changed

    def apply_bonus(self, player: Player, total: int) -> None:
        self.require_session().apply_bonus(player, total)
        self._persist()

    def begin_scoring(self) -> None:
        self.require_session().begin_scoring()
        self._persist()

    def current_preview_points(self, player: Player) -> int:
        return self.require_session().preview_points(player)

    def validate_and_advance(self) -> RoundResult:
        """
        Validate and commit the round.

        On game over the final ranking is recorded in the profile ledger.
        A rejected round is not saved since nothing changed.
        """
        result = self.require_session().validate_and_advance()
        if isinstance(result, Rejected):
            return result

        self._persist()
        if isinstance(result, GameOver):
            if not self.ledger.record_game_result(result.ranking):
                logger.warning("Game result not saved to profiles")
                self.last_save_ok = False
        return result

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_player(self, name: str) -> Player:
        """
        Add a player to the current game.

        Raises:
            DuplicateNameException: If the name is already used
        """
        session = self.require_session()
        name = ensure_unique_name(session.players, name)
        player = session.add_player(name)
        self._persist()
        return player

    def remove_player(self, player: Player) -> None:
        self.require_session().remove_player(player)
        self._persist()

    def rename_player(self, player: Player, new_name: str) -> None:
        """
        Rename a player of the current game.

        Raises:
            DuplicateNameException: If another player already uses the name
        """
        session = self.require_session()
        new_name = ensure_unique_name(session.players, new_name, exclude=player)
        session.rename_player(player, new_name)
        self._persist()

    def move_player(self, player: Player, new_index: int) -> None:
        self.require_session().move_player(player, new_index)
        self._persist()

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def standings(self, limit: int = 5) -> List[PlayerProfile]:
        """Top profiles by cumulative points over all finished games."""
        return self.ledger.top_profiles(limit)
