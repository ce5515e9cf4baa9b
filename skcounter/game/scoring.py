"""
Round scoring for the Skull King score counter.

Pure functions converting a player's bid, tricks won and capture bonus into
the point delta for a single round, plus the capture bonus calculator used to
build the bonus total.
"""

from dataclasses import dataclass

from skcounter.game.constants import (
    ZERO_BID_POINTS_PER_CARD,
    EXACT_BID_POINTS_PER_TRICK,
    MISS_PENALTY_PER_TRICK,
    PIRATE_CAPTURE_BONUS,
    MERMAID_CAPTURE_BONUS,
    SKULL_KING_CAPTURE_BONUS,
    COLORED_FOURTEEN_BONUS,
    BLACK_FOURTEEN_BONUS,
    COLORED_FOURTEENS,
)


def round_points(cards: int, bid: int, tricks_won: int, bonus: int = 0) -> int:
    """
    Calculate a player's points for one round.

    Scoring rules:
        - Bid 0 and won 0: +10 per card in the round
        - Bid 0 and won any trick: -10 per card in the round
        - Won exactly the bid: +20 per trick bid, plus the capture bonus
        - Otherwise: -10 per trick of difference (bonus is lost)

    Args:
        cards: Number of cards dealt this round (equals the round number)
        bid: Tricks the player announced
        tricks_won: Tricks the player actually won
        bonus: Capture bonus total, only counted on an exact nonzero bid

    Returns:
        Point delta for the round (may be negative)

    Examples:
        >>> round_points(3, 0, 0)
        30
        >>> round_points(3, 2, 2, bonus=30)
        70
        >>> round_points(5, 1, 3)
        -20
    """
    cards = max(0, cards)

    if bid == 0 and tricks_won == 0:
        return cards * ZERO_BID_POINTS_PER_CARD
    elif bid == 0:
        return -(cards * ZERO_BID_POINTS_PER_CARD)
    elif tricks_won == bid:
        return EXACT_BID_POINTS_PER_TRICK * bid + bonus
    else:
        return -(abs(tricks_won - bid) * MISS_PENALTY_PER_TRICK)


@dataclass(frozen=True)
class CaptureBonus:
    """
    Special captures made by a player during a round.

    Attributes:
        pirates: Pirates captured with the Skull King
        mermaids: Mermaids captured with a pirate
        skull_king: Whether the Skull King was captured with a mermaid
        colored_fourteens: Yellow, purple and green 14s won (0-3)
        black_fourteen: Whether the black 14 was won
    """

    pirates: int = 0
    mermaids: int = 0
    skull_king: bool = False
    colored_fourteens: int = 0
    black_fourteen: bool = False

    def __post_init__(self):
        """Validate capture counts."""
        if self.pirates < 0:
            raise ValueError(f"pirates must be non-negative, got {self.pirates}")
        if self.mermaids < 0:
            raise ValueError(f"mermaids must be non-negative, got {self.mermaids}")
        if not 0 <= self.colored_fourteens <= COLORED_FOURTEENS:
            raise ValueError(
                f"colored_fourteens must be between 0 and {COLORED_FOURTEENS}, "
                f"got {self.colored_fourteens}"
            )

    def total(self) -> int:
        """Bonus points for these captures."""
        points = self.pirates * PIRATE_CAPTURE_BONUS
        points += self.mermaids * MERMAID_CAPTURE_BONUS
        if self.skull_king:
            points += SKULL_KING_CAPTURE_BONUS
        points += self.colored_fourteens * COLORED_FOURTEEN_BONUS
        if self.black_fourteen:
            points += BLACK_FOURTEEN_BONUS
        return points
