"""
Skull King score counter engine package.

This package contains the core scoring logic: the round scoring formula,
the round-limit policy, the bidding/scoring turn state machine and the
end-of-game ranking.
"""

from skcounter.game.constants import (
    MIN_PLAYERS,
    MAX_PLAYERS,
    ROUND_LIMITS,
    DEFAULT_MAX_ROUNDS,
    KRAKEN_PHANTOM_TRICKS,
    max_rounds_for,
    cards_in_round,
)
from skcounter.game.scoring import round_points, CaptureBonus
from skcounter.game.ranking import compute_ranking
from skcounter.game.session import (
    ScoreKeeperException,
    InvalidPlayerCountException,
    DuplicateNameException,
    GameStateException,
    Phase,
    TrickCountMismatch,
    Advanced,
    GameOver,
    Rejected,
    RoundEntry,
    Player,
    GameSession,
    ensure_unique_name,
    normalize_name,
    start_game,
)

__all__ = [
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "ROUND_LIMITS",
    "DEFAULT_MAX_ROUNDS",
    "KRAKEN_PHANTOM_TRICKS",
    "max_rounds_for",
    "cards_in_round",
    "round_points",
    "CaptureBonus",
    "compute_ranking",
    "ScoreKeeperException",
    "InvalidPlayerCountException",
    "DuplicateNameException",
    "GameStateException",
    "Phase",
    "TrickCountMismatch",
    "Advanced",
    "GameOver",
    "Rejected",
    "RoundEntry",
    "Player",
    "GameSession",
    "ensure_unique_name",
    "normalize_name",
    "start_game",
]
