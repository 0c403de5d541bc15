"""
Unit tests for the post-match PMR adjustment.

Tests the adjustment logic to ensure:
- Winners gain, losers lose
- Bigger wins move ratings at least as much as narrow ones
- Upsets move ratings more than expected results
- Low reliability means bigger swings
- Outputs always stay within [0.1, 8.9] and [0, 100]
- Invalid scores are rejected before anything is computed
"""

import pytest

from pmr.exceptions import InvalidScoreError
from pmr.rating.adjuster import (
    AdjustmentParams,
    PlayerState,
    adjust_after_match,
    clamp_rating,
    clamp_reliability,
    expected_win_probability,
)
from pmr.rating.score import parse_match_score


def _player(pid: str, rating: float, reliability: float = 50.0) -> PlayerState:
    return PlayerState(id=pid, display_name=pid.upper(), rating=rating, reliability=reliability)


class TestAdjustAfterMatch:
    """Tests for adjust_after_match()."""

    def test_bagel_win(self, team1, team2):
        """Team 1 winning 6-0 6-0 gains; team 2 does not."""
        results = adjust_after_match(team1, team2, [(6, 0), (6, 0)])

        assert results[0].delta > 0
        assert results[1].delta > 0
        assert results[2].delta <= 0
        assert results[3].delta <= 0

    def test_result_order_and_identity(self, team1, team2):
        results = adjust_after_match(team1, team2, [(6, 4), (6, 4)])

        assert [r.player_id for r in results] == ["p1", "p2", "p3", "p4"]
        assert [r.display_name for r in results] == ["Joueur A", "Joueur B", "Joueur C", "Joueur D"]

    def test_team2_win(self, team1, team2):
        results = adjust_after_match(team1, team2, [(4, 6), (6, 3), (5, 7)])

        assert results[0].delta < 0
        assert results[2].delta > 0

    def test_mirror_deltas_with_equal_reliability(self, team1, team2):
        """With equal reliabilities one team gains what the other loses."""
        results = adjust_after_match(team1, team2, [(6, 3), (7, 5)])

        assert results[0].delta == pytest.approx(-results[2].delta)
        assert results[1].delta == pytest.approx(-results[3].delta)

    def test_margin_monotonicity(self, team1, team2):
        """A wider win never gives the winners a smaller delta."""
        deltas = []
        for score in ["7-6 7-6", "7-5 6-4", "6-4 6-4", "6-3 6-2", "6-1 6-1", "6-0 6-0"]:
            results = adjust_after_match(team1, team2, parse_match_score(score))
            deltas.append(results[0].delta)

        assert deltas == sorted(deltas)
        assert deltas[-1] > deltas[0]

    def test_three_set_margin_monotonicity(self):
        """
        In a 2-1 win a wider game lead never gives the winners a smaller delta.

        7-6 0-6 7-6 is a worse game count for the winners than 7-6 0-6 7-5
        and must not move them further.
        """
        team1 = [_player("a", 5.0), _player("b", 5.0)]
        team2 = [_player("c", 5.0), _player("d", 5.0)]

        worse = adjust_after_match(team1, team2, parse_match_score("7-6 0-6 7-6"))
        better = adjust_after_match(team1, team2, parse_match_score("7-6 0-6 7-5"))
        assert better[0].delta >= worse[0].delta

        deltas = []
        for score in ["7-6 0-6 7-6", "7-6 0-6 7-5", "6-4 4-6 6-4", "6-2 4-6 6-1", "6-0 6-7 6-0"]:
            deltas.append(adjust_after_match(team1, team2, parse_match_score(score))[0].delta)

        assert deltas == sorted(deltas)
        assert deltas[-1] > deltas[0] > 0

    def test_team2_three_set_margin_monotonicity(self):
        """The same holds when team 2 wins: its players gain more for a wider lead."""
        team1 = [_player("a", 5.0), _player("b", 5.0)]
        team2 = [_player("c", 5.0), _player("d", 5.0)]

        deltas = []
        for score in ["6-7 6-0 6-7", "4-6 6-4 4-6", "2-6 6-4 1-6"]:
            deltas.append(adjust_after_match(team1, team2, parse_match_score(score))[2].delta)

        assert deltas == sorted(deltas)
        assert deltas[-1] > deltas[0] > 0

    def test_upset_moves_more(self):
        """The weaker team winning gains more than the stronger team winning."""
        strong = [_player("s1", 6.0), _player("s2", 6.0)]
        weak = [_player("w1", 4.0), _player("w2", 4.0)]

        expected = adjust_after_match(strong, weak, [(6, 3), (6, 3)])
        upset = adjust_after_match(weak, strong, [(6, 3), (6, 3)])

        assert upset[0].delta > expected[0].delta > 0

    def test_low_reliability_swings_more(self):
        """A new player's rating moves more than a settled player's."""
        team1 = [_player("new", 5.0, reliability=0), _player("settled", 5.0, reliability=100)]
        team2 = [_player("c", 5.0), _player("d", 5.0)]

        results = adjust_after_match(team1, team2, [(6, 2), (6, 2)])

        assert results[0].delta > results[1].delta > 0

    def test_reliability_increases(self, team1, team2):
        """Every player's reliability grows by one match, win or lose."""
        results = adjust_after_match(team1, team2, [(6, 2), (6, 2)])

        for r in results:
            assert r.new_reliability > r.previous_reliability
            assert r.delta_reliability == pytest.approx(r.new_reliability - r.previous_reliability)

    def test_full_reliability_stays_full(self):
        team1 = [_player("a", 5.0, 100), _player("b", 5.0, 100)]
        team2 = [_player("c", 5.0, 100), _player("d", 5.0, 100)]

        results = adjust_after_match(team1, team2, [(6, 2), (6, 2)])

        assert all(r.new_reliability == 100.0 for r in results)
        assert all(r.delta_reliability == 0.0 for r in results)

    def test_rating_clamped_at_top(self):
        """A player already at 8.9 cannot go higher."""
        team1 = [_player("a", 8.9, 0), _player("b", 8.9, 0)]
        team2 = [_player("c", 0.1, 0), _player("d", 0.1, 0)]

        results = adjust_after_match(team2, team1, [(6, 0), (6, 0)])

        # Massive upset: the 0.1 team wins, the 8.9 team loses
        assert results[2].new_rating < 8.9
        assert results[0].new_rating > 0.1

        results = adjust_after_match(team1, team2, [(6, 0), (6, 0)])
        assert results[0].new_rating <= 8.9
        assert results[2].new_rating >= 0.1

    def test_out_of_range_inputs_clamped(self):
        """Ratings and reliabilities outside their ranges are clamped first."""
        team1 = [_player("a", 12.0, 150), _player("b", -3.0, -20)]
        team2 = [_player("c", 5.0), _player("d", 5.0)]

        results = adjust_after_match(team1, team2, [(6, 4), (6, 4)])

        assert results[0].previous_rating == 8.9
        assert results[0].previous_reliability == 100.0
        assert results[1].previous_rating == 0.1
        assert results[1].previous_reliability == 0.0

    @pytest.mark.parametrize("score", ["6-0 6-0", "0-6 0-6", "7-6 6-7 7-6", "6-4 3-6 6-1"])
    @pytest.mark.parametrize("ratings", [(0.1, 0.1, 8.9, 8.9), (8.9, 8.9, 0.1, 0.1), (4.0, 4.5, 5.0, 5.5)])
    @pytest.mark.parametrize("reliability", [0.0, 50.0, 100.0])
    def test_outputs_in_bounds(self, score, ratings, reliability):
        team1 = [_player("a", ratings[0], reliability), _player("b", ratings[1], reliability)]
        team2 = [_player("c", ratings[2], reliability), _player("d", ratings[3], reliability)]

        for r in adjust_after_match(team1, team2, parse_match_score(score)):
            assert 0.1 <= r.new_rating <= 8.9
            assert 0.0 <= r.new_reliability <= 100.0

    def test_deterministic(self, team1, team2):
        first = adjust_after_match(team1, team2, [(6, 4), (3, 6), (7, 6)])
        second = adjust_after_match(team1, team2, [(6, 4), (3, 6), (7, 6)])

        assert first == second

    def test_invalid_score_rejected(self, team1, team2):
        with pytest.raises(InvalidScoreError):
            adjust_after_match(team1, team2, [(6, 4), (4, 6)])

        with pytest.raises(InvalidScoreError):
            adjust_after_match(team1, team2, [(8, 6), (6, 4)])

    def test_team_size(self, team1, team2):
        with pytest.raises(ValueError, match="exactly two players"):
            adjust_after_match(team1 + [_player("x", 5.0)], team2, [(6, 4), (6, 4)])

    def test_custom_params(self, team1, team2):
        """A larger K moves ratings further."""
        default = adjust_after_match(team1, team2, [(6, 4), (6, 4)])
        doubled = adjust_after_match(
            team1, team2, [(6, 4), (6, 4)], params=AdjustmentParams(k_factor=0.5)
        )

        assert doubled[0].delta == pytest.approx(2 * default[0].delta)


class TestExpectedWinProbability:
    """Tests for expected_win_probability()."""

    def test_equal_teams(self):
        assert expected_win_probability(5.0, 5.0, 1.25) == pytest.approx(0.5)

    def test_stronger_team_favoured(self):
        prob = expected_win_probability(6.0, 5.0, 1.25)

        assert prob == pytest.approx(1 / (1 + 10 ** -0.8))
        assert prob > 0.8

    def test_symmetry(self):
        assert expected_win_probability(3.2, 6.1, 1.25) == pytest.approx(
            1 - expected_win_probability(6.1, 3.2, 1.25)
        )


class TestClamps:
    """Tests for the rating and reliability clamps."""

    def test_clamp_rating(self):
        assert clamp_rating(9.5) == 8.9
        assert clamp_rating(0.0) == 0.1
        assert clamp_rating(4.3) == 4.3

    def test_clamp_reliability(self):
        assert clamp_reliability(120) == 100
        assert clamp_reliability(-5) == 0
        assert clamp_reliability(42.5) == 42.5
