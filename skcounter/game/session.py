"""
Turn state machine for the Skull King score counter.

This module implements the game session: the player roster, the
bidding/scoring phase cycle of each round, the trick-count validation that
gates advancing a round, point commits and the end of the game.

A round goes through two phases:
    1. BIDDING: each player sets how many tricks they expect to win
    2. SCORING: each player reports tricks won and capture bonuses; a live
       preview shows the points they would have if the round were committed

Validating the scoring phase checks that the reported tricks (plus one
phantom trick when the Kraken discarded a trick) add up to the number of
cards dealt, then commits the points and either starts the next round or
ends the game.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from skcounter.game.constants import (
    MIN_PLAYERS,
    MAX_PLAYERS,
    KRAKEN_PHANTOM_TRICKS,
    max_rounds_for,
    cards_in_round,
)
from skcounter.game.ranking import compute_ranking
from skcounter.game.scoring import round_points

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exceptions
# ============================================================================


class ScoreKeeperException(Exception):
    """Base exception for score counter errors."""

    pass


class InvalidPlayerCountException(ScoreKeeperException, ValueError):
    """Raised when a game would have fewer or more players than allowed."""

    def __init__(self, player_count: int):
        self.player_count = player_count
        super().__init__(
            f"player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
            f"got {player_count}"
        )


class DuplicateNameException(ScoreKeeperException):
    """Raised when a proposed player name is already used in the roster."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A player named '{name}' already exists")


class GameStateException(ScoreKeeperException):
    """Raised when the session is in an invalid state for requested action."""

    pass


# ============================================================================
# Phase and Round Results
# ============================================================================


class Phase(str, Enum):
    """Phase of the current round."""

    BIDDING = "bidding"
    SCORING = "scoring"


@dataclass(frozen=True)
class TrickCountMismatch:
    """
    Reported tricks do not add up to the cards dealt.

    Attributes:
        expected: Cards dealt this round
        reported: Sum of tricks won reported by the players
        adjusted: Reported sum plus the Kraken's phantom trick, if any
    """

    expected: int
    reported: int
    adjusted: int

    def __str__(self) -> str:
        if self.adjusted != self.reported:
            return (
                f"Expected {self.expected} tricks, found {self.reported} "
                f"(+{self.adjusted - self.reported} kraken = {self.adjusted})"
            )
        return f"Expected {self.expected} tricks, found {self.reported}"


@dataclass(frozen=True)
class Advanced:
    """Round committed; play continues with new_round."""

    new_round: int


@dataclass(frozen=True)
class GameOver:
    """Final round committed; ranking holds (rank, player) best first."""

    ranking: List[Tuple[int, "Player"]]


@dataclass(frozen=True)
class Rejected:
    """Validation failed; nothing was committed."""

    mismatch: TrickCountMismatch


RoundResult = Union[Advanced, GameOver, Rejected]


# ============================================================================
# Player
# ============================================================================


@dataclass
class RoundEntry:
    """Per-round values of one player, recreated at the start of every round."""

    bid: int = 0
    tricks_won: int = 0
    bonus: int = 0


class Player:
    """
    Player in a game session.

    Players are compared by identity: two players with the same name are
    still distinct entries in the session baseline.

    Attributes:
        name: Display name, unique within the session
        order: Seat / display order (0-indexed)
        cumulative_points: Points committed over all rounds played so far
        entry: Bid, tricks won and bonus for the current round
    """

    def __init__(self, name: str, order: int = 0, cumulative_points: int = 0):
        """
        Initialize a player.

        Args:
            name: Player name
            order: Seat position (0-indexed)
            cumulative_points: Starting total (0 for a new game)
        """
        self.name = name
        self.order = order
        self.cumulative_points = cumulative_points
        self.entry = RoundEntry()

    @property
    def bid(self) -> int:
        return self.entry.bid

    @property
    def tricks_won(self) -> int:
        return self.entry.tricks_won

    @property
    def bonus(self) -> int:
        return self.entry.bonus

    def reset_round(self) -> None:
        """Clear round-specific state."""
        self.entry = RoundEntry()

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view of the player."""
        return {
            "name": self.name,
            "order": self.order,
            "cumulative_points": self.cumulative_points,
            "bid": self.entry.bid,
            "tricks_won": self.entry.tricks_won,
            "bonus": self.entry.bonus,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Rebuild a player saved with to_dict()."""
        player = cls(
            name=data["name"],
            order=data.get("order", 0),
            cumulative_points=data.get("cumulative_points", 0),
        )
        player.entry = RoundEntry(
            bid=data.get("bid", 0),
            tricks_won=data.get("tricks_won", 0),
            bonus=data.get("bonus", 0),
        )
        return player

    def __str__(self) -> str:
        """String representation."""
        return f"Player({self.name}, order={self.order}, points={self.cumulative_points})"

    def __repr__(self) -> str:
        """Developer representation."""
        return self.__str__()


def normalize_name(name: str) -> str:
    """Key used to compare player names (trimmed, case-insensitive)."""
    return name.strip().casefold()


def ensure_unique_name(
    players: Sequence[Player], name: str, exclude: Optional[Player] = None
) -> str:
    """
    Check a proposed name against the roster before renaming or adding.

    Args:
        players: Current roster
        name: Proposed name
        exclude: Player being renamed (its current name does not conflict)

    Returns:
        The trimmed name

    Raises:
        ValueError: If the name is empty
        DuplicateNameException: If another player already uses the name
    """
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("Player name cannot be empty")

    key = normalize_name(trimmed)
    for player in players:
        if player is not exclude and normalize_name(player.name) == key:
            raise DuplicateNameException(trimmed)
    return trimmed


# ============================================================================
# GameSession (Turn State Machine)
# ============================================================================


class GameSession:
    """
    The single active game.

    Attributes:
        players: Roster in seat order
        current_round: Round number (1-indexed); round n deals n cards
        max_rounds: Round limit for the current roster size
        phase: BIDDING or SCORING
        points_baseline: Cumulative points of each player when SCORING began
        kraken_discarded: Whether one trick was discarded by the Kraken
        game_over: True once the final round has been committed
    """

    def __init__(
        self,
        players: List[Player],
        current_round: int = 1,
        phase: Phase = Phase.BIDDING,
        kraken_discarded: bool = False,
        points_baseline: Optional[Dict[Player, int]] = None,
        game_over: bool = False,
    ):
        self.players = players
        self.current_round = current_round
        self.max_rounds = max_rounds_for(len(players))
        self.phase = phase
        self.kraken_discarded = kraken_discarded
        self.points_baseline: Dict[Player, int] = dict(points_baseline or {})
        self.game_over = game_over

    @property
    def cards(self) -> int:
        """Cards dealt in the current round."""
        return cards_in_round(self.current_round)

    @property
    def is_final_round(self) -> bool:
        return self.current_round >= self.max_rounds

    def find_player(self, ref: str) -> Optional[Player]:
        """
        Look up a player by name (case-insensitive) or 1-based seat number.

        Args:
            ref: Player name or seat number as text

        Returns:
            Matching player, or None
        """
        key = normalize_name(ref)
        for player in self.players:
            if normalize_name(player.name) == key:
                return player

        if key.isdigit():
            seat = int(key)
            if 1 <= seat <= len(self.players):
                return self.players[seat - 1]
        return None

    # ------------------------------------------------------------------
    # Bids, tricks, bonus
    # ------------------------------------------------------------------

    def _step(self, current: int, delta: int) -> Optional[int]:
        if delta not in (-1, 1):
            raise ValueError(f"delta must be +1 or -1, got {delta}")
        value = current + delta
        if value < 0 or value > self.cards:
            return None
        return value

    def adjust_bid(self, player: Player, delta: int) -> bool:
        """
        Raise or lower a player's bid by one.

        Only applies during BIDDING; a bid outside [0, cards] is not applied.

        Args:
            player: Player bidding
            delta: +1 or -1

        Returns:
            True if the bid changed
        """
        if self.game_over or self.phase != Phase.BIDDING:
            return False

        value = self._step(player.entry.bid, delta)
        if value is None:
            return False

        player.entry.bid = value
        logger.debug(f"{player.name} bids {value} in round {self.current_round}")
        return True

    def adjust_tricks(self, player: Player, delta: int) -> bool:
        """
        Raise or lower a player's tricks won by one.

        Only applies during SCORING; a count outside [0, cards] is not applied.

        Args:
            player: Player reporting tricks
            delta: +1 or -1

        Returns:
            True if the tricks won changed
        """
        if self.game_over or self.phase != Phase.SCORING:
            return False

        value = self._step(player.entry.tricks_won, delta)
        if value is None:
            return False

        player.entry.tricks_won = value
        logger.debug(f"{player.name} won {value} tricks in round {self.current_round}")
        return True

    def toggle_kraken(self) -> bool:
        """
        Flip the Kraken flag during SCORING.

        Returns:
            True if the flag was toggled, False outside SCORING
        """
        if self.game_over or self.phase != Phase.SCORING:
            return False

        self.kraken_discarded = not self.kraken_discarded
        logger.debug(f"Kraken discarded: {self.kraken_discarded}")
        return True

    def apply_bonus(self, player: Player, total: int) -> None:
        """
        Replace a player's capture bonus for this round.

        The bonus only reaches the player's points through the preview or
        when the round is committed.

        Args:
            player: Player who made the captures
            total: Bonus total (see CaptureBonus.total)

        Raises:
            ValueError: If total is negative
        """
        if total < 0:
            raise ValueError(f"bonus total must be non-negative, got {total}")

        player.entry.bonus = total
        logger.debug(f"{player.name} bonus set to {total}")

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def begin_scoring(self) -> None:
        """
        Move from BIDDING to SCORING.

        Snapshots every player's cumulative points as the preview baseline and
        clears the Kraken flag. No points change.

        Raises:
            GameStateException: If not in BIDDING or the game is over
        """
        if self.game_over:
            raise GameStateException("Cannot begin scoring: the game is over")
        if self.phase != Phase.BIDDING:
            raise GameStateException(
                f"Cannot begin scoring: round is in '{self.phase.value}' phase"
            )

        self.points_baseline = {p: p.cumulative_points for p in self.players}
        self.kraken_discarded = False
        self.phase = Phase.SCORING
        logger.debug(f"Round {self.current_round}: scoring started")

    def check_tricks(self) -> Optional[TrickCountMismatch]:
        """
        Compare reported tricks with the cards dealt.

        Returns:
            None if they agree, otherwise the mismatch details
        """
        reported = sum(p.tricks_won for p in self.players)
        adjusted = reported + (KRAKEN_PHANTOM_TRICKS if self.kraken_discarded else 0)
        expected = self.cards

        if adjusted != expected:
            return TrickCountMismatch(expected, reported, adjusted)
        return None

    def preview_points(self, player: Player) -> int:
        """
        Points the player would have if the round were committed now.

        During SCORING this is the baseline plus the live round score;
        otherwise it is the stored cumulative total.
        """
        if self.phase != Phase.SCORING or self.game_over:
            return player.cumulative_points

        baseline = self.points_baseline.get(player, player.cumulative_points)
        return baseline + round_points(
            self.cards, player.bid, player.tricks_won, player.bonus
        )

    # Name used by callers showing a live score next to each player
    current_preview_points = preview_points

    def validate_and_advance(self) -> RoundResult:
        """
        Validate reported tricks and commit the round.

        Returns:
            Rejected(mismatch) if the tricks do not add up (nothing changes),
            Advanced(new_round) after a regular round,
            GameOver(ranking) after the final round

        Raises:
            GameStateException: If not in SCORING or the game is over
        """
        if self.game_over:
            raise GameStateException("Cannot validate: the game is over")
        if self.phase != Phase.SCORING:
            raise GameStateException(
                f"Cannot validate: round is in '{self.phase.value}' phase"
            )

        mismatch = self.check_tricks()
        if mismatch is not None:
            logger.warning(f"Round {self.current_round} rejected: {mismatch}")
            return Rejected(mismatch)

        for player in self.players:
            player.cumulative_points = self.preview_points(player)

        if not self.is_final_round:
            for player in self.players:
                player.reset_round()
            self.points_baseline = {}
            self.kraken_discarded = False
            self.current_round += 1
            self.phase = Phase.BIDDING
            logger.info(f"Round {self.current_round - 1} committed, starting round {self.current_round}")
            return Advanced(self.current_round)

        self.game_over = True
        ranking = compute_ranking(self.players)
        logger.info(f"Final round {self.current_round} committed, game over")
        return GameOver(ranking)

    def ranking(self) -> List[Tuple[int, Player]]:
        """Current standings of the roster."""
        return compute_ranking(self.players)

    # ------------------------------------------------------------------
    # Roster maintenance
    # ------------------------------------------------------------------

    def _renumber(self) -> None:
        for index, player in enumerate(self.players):
            player.order = index

    def _apply_round_limit(self) -> None:
        """Recompute max_rounds for the roster size and clamp the round."""
        self.max_rounds = max_rounds_for(len(self.players))
        if self.current_round > self.max_rounds:
            logger.info(
                f"Round {self.current_round} exceeds limit of {self.max_rounds} "
                f"for {len(self.players)} players, clamping"
            )
            self.current_round = self.max_rounds
            for player in self.players:
                player.entry.bid = min(player.entry.bid, self.cards)
                player.entry.tricks_won = min(player.entry.tricks_won, self.cards)

    def add_player(self, name: str) -> Player:
        """
        Add a player at the end of the roster.

        The caller is responsible for name uniqueness (ensure_unique_name).

        Raises:
            GameStateException: If the game is over
            InvalidPlayerCountException: If the roster is already full
        """
        if self.game_over:
            raise GameStateException("Cannot add a player: the game is over")
        if len(self.players) >= MAX_PLAYERS:
            raise InvalidPlayerCountException(len(self.players) + 1)

        player = Player(name, order=len(self.players))
        self.players.append(player)
        if self.phase == Phase.SCORING:
            self.points_baseline[player] = player.cumulative_points
        self._apply_round_limit()
        logger.info(f"Added {name} ({len(self.players)} players)")
        return player

    def remove_player(self, player: Player) -> None:
        """
        Remove a player from the roster.

        Raises:
            GameStateException: If the game is over
            InvalidPlayerCountException: If fewer than MIN_PLAYERS would remain
        """
        if self.game_over:
            raise GameStateException("Cannot remove a player: the game is over")
        if len(self.players) <= MIN_PLAYERS:
            raise InvalidPlayerCountException(len(self.players) - 1)

        self.players.remove(player)
        self.points_baseline.pop(player, None)
        self._renumber()
        self._apply_round_limit()
        logger.info(f"Removed {player.name} ({len(self.players)} players)")

    def rename_player(self, player: Player, new_name: str) -> None:
        """Rename a player. The caller checks uniqueness first."""
        logger.info(f"Renamed {player.name} to {new_name}")
        player.name = new_name

    def move_player(self, player: Player, new_index: int) -> None:
        """Move a player to another seat and renumber the roster."""
        new_index = max(0, min(new_index, len(self.players) - 1))
        self.players.remove(player)
        self.players.insert(new_index, player)
        self._renumber()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable snapshot of the session, roster included.

        The baseline is stored on each player entry since player identity does
        not survive serialization.
        """
        players = []
        for player in self.players:
            data = player.to_dict()
            data["baseline"] = self.points_baseline.get(player)
            players.append(data)

        return {
            "current_round": self.current_round,
            "max_rounds": self.max_rounds,
            "phase": self.phase.value,
            "kraken_discarded": self.kraken_discarded,
            "game_over": self.game_over,
            "players": players,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSession":
        """
        Rebuild a session saved with to_dict().

        Raises:
            ValueError: If the phase is unknown
        """
        players = []
        baseline: Dict[Player, int] = {}
        for entry in data.get("players", []):
            player = Player.from_dict(entry)
            players.append(player)
            if entry.get("baseline") is not None:
                baseline[player] = entry["baseline"]
        players.sort(key=lambda p: p.order)

        session = cls(
            players,
            current_round=max(1, data.get("current_round", 1)),
            phase=Phase(data.get("phase", Phase.BIDDING.value)),
            kraken_discarded=data.get("kraken_discarded", False),
            points_baseline=baseline,
            game_over=data.get("game_over", False),
        )
        session._apply_round_limit()
        return session


def start_game(player_count: int, name_template: str = "Player {n}") -> GameSession:
    """
    Create a new session with fresh players.

    Args:
        player_count: Number of players (2-12)
        name_template: Default name format, {n} is the 1-based seat number

    Returns:
        Session at round 1 in BIDDING phase

    Raises:
        InvalidPlayerCountException: If player_count is outside [2, 12]

    Example:
        >>> session = start_game(4)
        >>> session.max_rounds, session.current_round, session.phase
        (10, 1, <Phase.BIDDING: 'bidding'>)
    """
    if player_count < MIN_PLAYERS or player_count > MAX_PLAYERS:
        raise InvalidPlayerCountException(player_count)

    players = [
        Player(name_template.format(n=i + 1), order=i) for i in range(player_count)
    ]
    session = GameSession(players)
    logger.info(
        f"New game: {player_count} players, {session.max_rounds} rounds"
    )
    return session
