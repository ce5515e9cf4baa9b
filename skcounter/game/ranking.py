"""
End-of-game standings.

Competition ranking ("1-2-2-4"): tied players share a rank and the next
distinct score takes its 1-based position in the sorted standings.
"""

from typing import List, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from skcounter.game.session import Player


def compute_ranking(players: Sequence["Player"]) -> List[Tuple[int, "Player"]]:
    """
    Rank players by cumulative points.

    Players with equal points keep their roster order (stable sort) and share
    the same rank.

    Args:
        players: Final roster

    Returns:
        List of (rank, player) tuples, best first

    Example:
        Points [750, 500, 300, 300, 100] rank as [1, 2, 3, 3, 5].
    """
    standings = sorted(players, key=lambda p: p.cumulative_points, reverse=True)

    ranked: List[Tuple[int, "Player"]] = []
    last_points = None
    last_rank = 0
    for position, player in enumerate(standings, start=1):
        if position == 1 or player.cumulative_points != last_points:
            last_rank = position
            last_points = player.cumulative_points
        ranked.append((last_rank, player))

    return ranked
