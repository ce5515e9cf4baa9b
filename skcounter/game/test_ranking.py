"""
Tests for end-of-game competition ranking.
"""

from skcounter.game.ranking import compute_ranking
from skcounter.game.session import Player


def make_players(points):
    return [
        Player(f"P{i + 1}", order=i, cumulative_points=p)
        for i, p in enumerate(points)
    ]


class TestComputeRanking:
    """Test competition ranking ("1-2-2-4")."""

    def test_tie_in_middle(self):
        """Tied players share a rank and the next rank skips ahead."""
        players = make_players([300, 750, 100, 500, 300])

        ranking = compute_ranking(players)

        assert [rank for rank, _ in ranking] == [1, 2, 3, 3, 5]
        assert [p.cumulative_points for _, p in ranking] == [750, 500, 300, 300, 100]

    def test_tie_at_top(self):
        """Two leaders both rank first, the next player is third."""
        players = make_players([200, 200, 150, 90])

        ranking = compute_ranking(players)

        assert [rank for rank, _ in ranking] == [1, 1, 3, 4]

    def test_all_tied(self):
        """Everyone shares first place."""
        ranking = compute_ranking(make_players([40, 40, 40]))
        assert [rank for rank, _ in ranking] == [1, 1, 1]

    def test_no_ties(self):
        """Distinct scores rank 1..n."""
        ranking = compute_ranking(make_players([10, 30, 20]))
        assert [rank for rank, _ in ranking] == [1, 2, 3]
        assert [p.name for _, p in ranking] == ["P2", "P3", "P1"]

    def test_ties_keep_roster_order(self):
        """Equal scores stay in their original order."""
        players = make_players([50, 80, 50, 50])

        ranking = compute_ranking(players)

        assert [p.name for _, p in ranking] == ["P2", "P1", "P3", "P4"]

    def test_negative_points(self):
        """Negative totals rank below zero."""
        ranking = compute_ranking(make_players([-20, 0, -20]))
        assert [(rank, p.cumulative_points) for rank, p in ranking] == [
            (1, 0),
            (2, -20),
            (2, -20),
        ]

    def test_points_non_increasing(self):
        """Standings are sorted best first."""
        ranking = compute_ranking(make_players([5, 90, -10, 90, 40, 5]))
        points = [p.cumulative_points for _, p in ranking]
        assert points == sorted(points, reverse=True)

    def test_empty(self):
        """No players, no ranking."""
        assert compute_ranking([]) == []

    def test_does_not_mutate_roster(self):
        """Ranking leaves the roster order untouched."""
        players = make_players([10, 30, 20])
        compute_ranking(players)
        assert [p.name for p in players] == ["P1", "P2", "P3"]
