"""
Margin-of-victory and upset factors for the post-match adjustment.

A 6-0 6-0 and a 7-6 7-6 should not move ratings by the same amount. The
margin factor scales the rating step by how dominant the win was:

    m = max(0, games_winner - games_loser) / max(1, games1 + games2)
    F_margin = margin_min + (1 - margin_min) * m^margin_gamma

The games are counted from the match winner's side, so a 2-1 winner who
dropped more games than they took gets margin_min, never more. F_margin runs
from margin_min (level or losing game count) up to 1.0 (6-0 6-0).

The upset factor adds movement when the result went against the odds:

    surprise = 1 - E1 if team 1 won, else E1
    F_upset = 1 + upset_beta * surprise^upset_gamma
"""

from dataclasses import dataclass
from typing import Optional

from pmr.rating.constants import ADJUSTMENT_DEFAULTS
from pmr.rating.score import MatchScore


@dataclass(frozen=True)
class MarginResult:
    """
    Result of the margin-of-victory calculation.

    Attributes:
        factor: Step multiplier in [margin_min, 1.0]
        games_team1: Total games won by team 1
        games_team2: Total games won by team 2
        sets_team1: Sets won by team 1
        sets_team2: Sets won by team 2
        dominance_ratio: Match winner's game lead over total games (0.0 to 1.0)
    """
    factor: float
    games_team1: int
    games_team2: int
    sets_team1: int
    sets_team2: int
    dominance_ratio: float


def calculate_margin_factor(
    score: MatchScore,
    margin_min: Optional[float] = None,
    margin_gamma: Optional[float] = None,
) -> MarginResult:
    """
    Margin-of-victory factor for a played match.

    Args:
        score: The match score (only complete sets are counted)
        margin_min: Factor for a level game count. Default from ADJUSTMENT_DEFAULTS.
        margin_gamma: Curvature of the factor. Default from ADJUSTMENT_DEFAULTS.

    Returns:
        MarginResult with the factor and the counts it was computed from

    Examples:
        # 6-0 6-0: dominance 1.0, factor 1.0
        calculate_margin_factor(parse_match_score("6-0 6-0"))

        # 7-6 6-7 7-6: dominance ~0.03, factor close to margin_min
        calculate_margin_factor(parse_match_score("7-6 6-7 7-6"))
    """
    if margin_min is None:
        margin_min = ADJUSTMENT_DEFAULTS["margin_min"]
    if margin_gamma is None:
        margin_gamma = ADJUSTMENT_DEFAULTS["margin_gamma"]

    games1, games2 = score.games_won()
    sets1, sets2 = score.sets_won()

    if score.winner == 1:
        games_winner, games_loser = games1, games2
    else:
        games_winner, games_loser = games2, games1

    total_games = max(1, games1 + games2)
    dominance_ratio = max(0, games_winner - games_loser) / total_games

    factor = margin_min + (1.0 - margin_min) * dominance_ratio ** margin_gamma

    return MarginResult(
        factor=factor,
        games_team1=games1,
        games_team2=games2,
        sets_team1=sets1,
        sets_team2=sets2,
        dominance_ratio=dominance_ratio,
    )


def calculate_upset_factor(
    expected_team1: float,
    team1_won: bool,
    upset_beta: Optional[float] = None,
    upset_gamma: Optional[float] = None,
) -> float:
    """
    Extra step multiplier for a surprising result.

    Args:
        expected_team1: Pre-match win probability of team 1
        team1_won: Whether team 1 won
        upset_beta: Maximum extra movement. Default from ADJUSTMENT_DEFAULTS.
        upset_gamma: Curvature. Default from ADJUSTMENT_DEFAULTS.

    Returns:
        Multiplier in [1.0, 1.0 + upset_beta]
    """
    if upset_beta is None:
        upset_beta = ADJUSTMENT_DEFAULTS["upset_beta"]
    if upset_gamma is None:
        upset_gamma = ADJUSTMENT_DEFAULTS["upset_gamma"]

    surprise = (1.0 - expected_team1) if team1_won else expected_team1
    return 1.0 + upset_beta * surprise ** upset_gamma
