"""
Reliability: how settled a player's PMR is.

Reliability grows with matches played along the curve

    R(n) = 100 * (1 - exp(-n / rel_tau))^rel_curve_gamma

(~24% after 5 matches, ~55% after 30, ~85% after 100). After each match a
player's reliability is mapped back to an equivalent match count, one match
is added, and the curve is read again. Reliability therefore only goes up,
and 100 stays at 100.

Low reliability lets a rating move faster. The volatility multiplier scales a
player's rating step:

    V(R) = 1 + (v_max - 1) * (1 - R/100)^v_gamma

V(0) = v_max for a brand-new player, V(100) = 1.0 for a settled one.
"""

import math
from typing import Optional

from pmr.rating.constants import ADJUSTMENT_DEFAULTS, RELIABILITY_MAX, RELIABILITY_MIN
from pmr.rating.evidence import clamp


def reliability_from_matches(
    matches: float,
    rel_tau: Optional[float] = None,
    rel_curve_gamma: Optional[float] = None,
) -> float:
    """
    Reliability after a number of matches.

    Examples:
        reliability_from_matches(0)    # -> 0.0
        reliability_from_matches(30)   # -> ~55
        reliability_from_matches(100)  # -> ~85
    """
    if rel_tau is None:
        rel_tau = ADJUSTMENT_DEFAULTS["rel_tau"]
    if rel_curve_gamma is None:
        rel_curve_gamma = ADJUSTMENT_DEFAULTS["rel_curve_gamma"]

    if matches <= 0:
        return 0.0
    base = 1.0 - math.exp(-matches / rel_tau)
    return RELIABILITY_MAX * base ** rel_curve_gamma


def matches_from_reliability(
    reliability: float,
    rel_tau: Optional[float] = None,
    rel_curve_gamma: Optional[float] = None,
) -> float:
    """
    Equivalent match count for a reliability (inverse of reliability_from_matches).

    Returns math.inf for reliability >= 100.
    """
    if rel_tau is None:
        rel_tau = ADJUSTMENT_DEFAULTS["rel_tau"]
    if rel_curve_gamma is None:
        rel_curve_gamma = ADJUSTMENT_DEFAULTS["rel_curve_gamma"]

    if reliability <= 0:
        return 0.0
    if reliability >= RELIABILITY_MAX:
        return math.inf

    x = (reliability / RELIABILITY_MAX) ** (1.0 / rel_curve_gamma)
    one_minus_x = 1.0 - x
    if one_minus_x <= 0:
        return math.inf

    return -rel_tau * math.log(one_minus_x)


def update_reliability(
    reliability: float,
    rel_tau: Optional[float] = None,
    rel_curve_gamma: Optional[float] = None,
) -> float:
    """
    Reliability after one more match, clamped to [0, 100].

    Every match counts as one, whatever the result.
    """
    n = matches_from_reliability(reliability, rel_tau, rel_curve_gamma)
    if math.isinf(n):
        return RELIABILITY_MAX

    new_reliability = reliability_from_matches(n + 1, rel_tau, rel_curve_gamma)
    return clamp(new_reliability, RELIABILITY_MIN, RELIABILITY_MAX)


def volatility_multiplier(
    reliability: float,
    v_max: Optional[float] = None,
    v_gamma: Optional[float] = None,
) -> float:
    """
    Rating step multiplier for a player's reliability.

    Examples:
        volatility_multiplier(0)    # -> 3.0 (v_max)
        volatility_multiplier(100)  # -> 1.0
    """
    if v_max is None:
        v_max = ADJUSTMENT_DEFAULTS["v_max"]
    if v_gamma is None:
        v_gamma = ADJUSTMENT_DEFAULTS["v_gamma"]

    r = clamp(reliability, RELIABILITY_MIN, RELIABILITY_MAX) / RELIABILITY_MAX
    return 1.0 + (v_max - 1.0) * (1.0 - r) ** v_gamma
