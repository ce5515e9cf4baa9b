"""
Game constants for the Skull King score counter.

This module defines the player-count limits, the round-limit policy table,
the scoring rates and the capture bonus values used throughout the engine.
"""

from typing import Dict

# Game constraints
MIN_PLAYERS = 2
MAX_PLAYERS = 12

# Round-limit policy: player count -> maximum playable rounds
ROUND_LIMITS: Dict[int, int] = {
    8: 9,
    9: 9,
    10: 7,
    11: 6,
    12: 6,
}
DEFAULT_MAX_ROUNDS = 10

# Scoring
ZERO_BID_POINTS_PER_CARD = 10  # Reward (or penalty) per card for a zero bid
EXACT_BID_POINTS_PER_TRICK = 20  # Reward per trick for making a nonzero bid
MISS_PENALTY_PER_TRICK = 10  # Penalty per trick of difference on a missed bid

# Kraken: one trick discarded out of play, nobody wins it
KRAKEN_PHANTOM_TRICKS = 1

# Capture bonuses (only scored when tricks won == bid)
PIRATE_CAPTURE_BONUS = 30  # Each pirate captured by the Skull King
MERMAID_CAPTURE_BONUS = 20  # Each mermaid captured by a pirate
SKULL_KING_CAPTURE_BONUS = 40  # Skull King captured by a mermaid
COLORED_FOURTEEN_BONUS = 10  # Yellow, purple or green 14 in a won trick
BLACK_FOURTEEN_BONUS = 20  # Black 14 in a won trick
COLORED_FOURTEENS = 3


def max_rounds_for(player_count: int) -> int:
    """
    Maximum number of rounds playable with a given number of players.

    Args:
        player_count: Number of players at the table

    Returns:
        Round limit from ROUND_LIMITS, or DEFAULT_MAX_ROUNDS for any other count

    Examples:
        >>> max_rounds_for(4)
        10
        >>> max_rounds_for(10)
        7
    """
    return ROUND_LIMITS.get(player_count, DEFAULT_MAX_ROUNDS)


def cards_in_round(round_number: int) -> int:
    """Hand size for a round: round n deals n cards."""
    return max(0, round_number)
