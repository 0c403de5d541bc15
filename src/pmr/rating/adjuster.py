"""
Post-match PMR adjustment for padel doubles.

Applies an Elo-style update on the PMR scale to each team, scaled by the
margin of victory and by how surprising the result was, then spreads it to
each player according to their reliability:

  Team expectation: E1 = 1 / (1 + 10^(-(PMR_1 - PMR_2) / elo_scale))
  Team step:        D1 = K * (A1 - E1) * F_margin * F_upset,   D2 = -D1
  Player step:      d  = D * V(reliability)

Where:
  PMR_1, PMR_2 = mean PMR of each team's two players
  A1 = 1 if team 1 won, else 0
  F_margin, F_upset = see pmr.rating.margin
  V = volatility multiplier, see pmr.rating.reliability

New ratings are clamped to [0.1, 8.9] and every player's reliability moves
one match further along the reliability curve.

The score is validated before anything is computed; an invalid score raises
InvalidScoreError.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Optional, Sequence

from pmr.exceptions import InvalidScoreError
from pmr.rating.constants import (
    ADJUSTMENT_DEFAULTS,
    RATING_MAX,
    RATING_MIN,
    RELIABILITY_MAX,
    RELIABILITY_MIN,
)
from pmr.rating.evidence import clamp
from pmr.rating.margin import calculate_margin_factor, calculate_upset_factor
from pmr.rating.reliability import update_reliability, volatility_multiplier
from pmr.rating.score import validate_match_score

logger = logging.getLogger(__name__)


def clamp_rating(rating: float) -> float:
    """Clamp a PMR into [0.1, 8.9]."""
    return clamp(rating, RATING_MIN, RATING_MAX)


def clamp_reliability(reliability: float) -> float:
    """Clamp a reliability into [0, 100]."""
    return clamp(reliability, RELIABILITY_MIN, RELIABILITY_MAX)


@dataclass(frozen=True)
class PlayerState:
    """
    A player's rating state going into a match.

    rating and reliability are clamped when the adjustment reads them.
    """
    id: str
    display_name: str
    rating: float
    reliability: float


@dataclass(frozen=True)
class AdjustmentParams:
    """
    All tunable coefficients of the post-match adjustment.

    Defaults come from ADJUSTMENT_DEFAULTS. Use from_settings() to pick up
    overrides from the environment.
    """
    k_factor: float = ADJUSTMENT_DEFAULTS["k_factor"]
    elo_scale: float = ADJUSTMENT_DEFAULTS["elo_scale"]
    margin_min: float = ADJUSTMENT_DEFAULTS["margin_min"]
    margin_gamma: float = ADJUSTMENT_DEFAULTS["margin_gamma"]
    upset_beta: float = ADJUSTMENT_DEFAULTS["upset_beta"]
    upset_gamma: float = ADJUSTMENT_DEFAULTS["upset_gamma"]
    v_max: float = ADJUSTMENT_DEFAULTS["v_max"]
    v_gamma: float = ADJUSTMENT_DEFAULTS["v_gamma"]
    rel_tau: float = ADJUSTMENT_DEFAULTS["rel_tau"]
    rel_curve_gamma: float = ADJUSTMENT_DEFAULTS["rel_curve_gamma"]

    @classmethod
    def from_settings(cls, settings=None) -> "AdjustmentParams":
        """Build params from Settings (the cached application settings by default)."""
        if settings is None:
            from pmr.config import get_settings

            settings = get_settings()
        return cls(**{f.name: getattr(settings, f.name) for f in fields(cls)})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AdjustmentResult:
    """
    One player's rating and reliability change after a match.

    delta is new_rating - previous_rating after clamping, so it can be
    smaller than the raw step for a player near the edge of the scale.
    """
    player_id: str
    display_name: str
    previous_rating: float
    new_rating: float
    delta: float
    previous_reliability: float
    new_reliability: float
    delta_reliability: float

    def __repr__(self) -> str:
        return (
            f"<AdjustmentResult({self.player_id}: {self.previous_rating:.2f} -> {self.new_rating:.2f}, "
            f"reliability {self.previous_reliability:.1f} -> {self.new_reliability:.1f})>"
        )


def expected_win_probability(team1_rating: float, team2_rating: float, elo_scale: float) -> float:
    """
    Probability that team 1 beats team 2.

    Example:
        expected_win_probability(5.0, 5.0, 1.25)  # -> 0.5
        expected_win_probability(6.0, 5.0, 1.25)  # -> ~0.86
    """
    d = team1_rating - team2_rating
    return 1.0 / (1.0 + 10.0 ** (-d / elo_scale))


def _check_team(team: Sequence[PlayerState], name: str) -> tuple[PlayerState, PlayerState]:
    if len(team) != 2:
        raise ValueError(f"{name} must have exactly two players, got {len(team)}")
    return team[0], team[1]


def _player_result(player: PlayerState, team_delta: float, params: AdjustmentParams) -> AdjustmentResult:
    rating = clamp_rating(player.rating)
    reliability = clamp_reliability(player.reliability)

    step = team_delta * volatility_multiplier(reliability, params.v_max, params.v_gamma)
    new_rating = clamp_rating(rating + step)
    new_reliability = clamp_reliability(
        update_reliability(reliability, params.rel_tau, params.rel_curve_gamma)
    )

    return AdjustmentResult(
        player_id=player.id,
        display_name=player.display_name,
        previous_rating=rating,
        new_rating=new_rating,
        delta=new_rating - rating,
        previous_reliability=reliability,
        new_reliability=new_reliability,
        delta_reliability=new_reliability - reliability,
    )


def adjust_after_match(
    team1: Sequence[PlayerState],
    team2: Sequence[PlayerState],
    sets,
    params: Optional[AdjustmentParams] = None,
) -> list[AdjustmentResult]:
    """
    Compute every player's new PMR and reliability after a match.

    Args:
        team1: The two players of team 1
        team2: The two players of team 2
        sets: MatchScore, or two/three sets as (team1_games, team2_games)
            pairs with None for an unplayed set
        params: Coefficients. Defaults to AdjustmentParams().

    Returns:
        Four AdjustmentResult, ordered team1[0], team1[1], team2[0], team2[1]

    Raises:
        InvalidScoreError: If the score breaks the set rules
        ValueError: If a team does not have exactly two players

    Example:
        results = adjust_after_match(
            team1=[PlayerState("p1", "A", 4.5, 50), PlayerState("p2", "B", 5.0, 50)],
            team2=[PlayerState("p3", "C", 4.8, 50), PlayerState("p4", "D", 5.2, 50)],
            sets=[(6, 4), (6, 3)],
        )
        # Team 1 players gain, team 2 players lose the mirror amount
    """
    if params is None:
        params = AdjustmentParams()

    a, b = _check_team(team1, "team1")
    c, d = _check_team(team2, "team2")

    try:
        score = validate_match_score(sets)
    except InvalidScoreError as e:
        logger.info("Rejected match score: %s", e.reason)
        raise

    team1_rating = (clamp_rating(a.rating) + clamp_rating(b.rating)) / 2
    team2_rating = (clamp_rating(c.rating) + clamp_rating(d.rating)) / 2

    team1_won = score.winner == 1
    expected_team1 = expected_win_probability(team1_rating, team2_rating, params.elo_scale)
    actual_team1 = 1.0 if team1_won else 0.0

    margin = calculate_margin_factor(score, params.margin_min, params.margin_gamma)
    upset = calculate_upset_factor(expected_team1, team1_won, params.upset_beta, params.upset_gamma)

    delta_team1 = params.k_factor * (actual_team1 - expected_team1) * margin.factor * upset
    delta_team2 = -delta_team1

    logger.debug(
        "Adjusting %s: team1=%.2f team2=%.2f E1=%.4f margin=%.4f upset=%.4f delta_team1=%.4f",
        score.to_display_string(),
        team1_rating,
        team2_rating,
        expected_team1,
        margin.factor,
        upset,
        delta_team1,
    )

    return [
        _player_result(a, delta_team1, params),
        _player_result(b, delta_team1, params),
        _player_result(c, delta_team2, params),
        _player_result(d, delta_team2, params),
    ]
