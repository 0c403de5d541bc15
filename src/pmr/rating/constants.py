"""
PMR rating system constants.

The questionnaire evidence tables were hand-tuned so that answering the lowest
tier on every question lands a player around 1.0, and so that no single high
answer can inflate an otherwise low profile.

Each evidence entry is (expected_value, tolerance, weight, hard_min, hard_max):
  expected_value: the rating this answer points to
  tolerance: sigma of the Gaussian penalty (higher = more permissive)
  weight: relative importance in the combined log-likelihood (1.0 = baseline)
  hard_min / hard_max: absolute exclusion bounds, None when absent

Ratings are handled internally as integer tenths (1..89 for 0.1..8.9) so the
grid never drifts with float steps.
"""

from types import MappingProxyType

# Rating grid, in tenths
RATING_MIN_INT = 1
RATING_MAX_INT = 89
RATING_SCALE = 10

RATING_MIN = RATING_MIN_INT / RATING_SCALE
RATING_MAX = RATING_MAX_INT / RATING_SCALE

# Default anchor (4.0), second tie-break criterion
DEFAULT_RATING_INT = 40

# Floor applied to tolerances before dividing by them
TOLERANCE_EPSILON = 1e-6

RELIABILITY_MIN = 0.0
RELIABILITY_MAX = 100.0

QUESTION_IDS = ("Q1", "Q2", "Q3", "Q4", "Q5")

# Q1: self-assessed level on a 1-8 scale.
# Permissive tolerance because self-assessment is biased.
SELF_ASSESSMENT_LEVELS = MappingProxyType({
    "debutant": 1,
    "debutant-avance": 2,
    "loisir-regulier": 3,
    "intermediaire": 4,
    "confirme": 5,
    "avance": 6,
    "expert": 7,
    "elite": 8,
})
SELF_ASSESSMENT_TOLERANCE = 1.2
SELF_ASSESSMENT_WEIGHT = 2.0

# Q2: years of racket-sport experience.
# Acts as an upper bound more than a booster: low weights, hard caps on the
# short-experience answers.
EXPERIENCE_EVIDENCE = MappingProxyType({
    "moins-1an": (1.5, 2.0, 0.7, None, 4.0),
    "1-3ans": (2.8, 1.5, 0.7, None, 5.5),
    "3-6ans": (3.5, 1.2, 0.7, None, 6.5),
    "6-10ans": (3.8, 1.3, 0.5, None, None),
    "plus-10ans": (4.0, 1.5, 0.4, None, None),
})

# Q3: competition tier. Soft evidence only, players confuse P100/P250.
# "loisir" is close to neutral (wide tolerance, very low weight).
COMPETITION_EVIDENCE = MappingProxyType({
    "loisir": (2.0, 3.0, 0.2, None, None),
    "debut-competition": (4.0, 1.2, 0.8, None, None),
    "competiteur-regulier": (5.5, 1.0, 0.9, None, None),
    "competiteur-avance": (7.5, 0.9, 0.9, None, None),
})

# Q4: volley (net play) quality, 1-5
VOLLEY_EVIDENCE = MappingProxyType({
    "1": (1.1, 1.3, 0.8, None, 3.0),
    "2": (2.5, 1.3, 0.8, None, 4.0),
    "3": (3.8, 1.4, 0.9, None, 5.0),
    "4": (5.0, 1.7, 1.0, None, None),
    "5": (6.0, 1.8, 1.0, None, None),
})

# Q5: wall play (reading rebounds off the glass), 1-5
WALL_PLAY_EVIDENCE = MappingProxyType({
    "1": (1.0, 1.3, 0.8, None, 3.0),
    "2": (2.5, 1.3, 0.8, None, 4.0),
    "3": (3.8, 1.4, 0.9, None, 5.0),
    "4": (5.0, 1.7, 1.0, None, None),
    "5": (6.0, 1.8, 1.0, None, None),
})


# Default parameters for the post-match adjustment.
# k_factor / elo_scale: Elo-style step size and spread on the PMR scale
# margin_min / margin_gamma: floor and curvature of the margin-of-victory factor
# upset_beta / upset_gamma: extra movement when the result was unexpected
# v_max / v_gamma: volatility multiplier at reliability 0, and its curve
# rel_tau / rel_curve_gamma: reliability progression R(n) = 100*(1-exp(-n/tau))^g
#   (~24% after 5 matches, ~55% after 30, ~85% after 100)
ADJUSTMENT_DEFAULTS = MappingProxyType({
    "k_factor": 0.25,
    "elo_scale": 1.25,
    "margin_min": 0.25,
    "margin_gamma": 1.3,
    "upset_beta": 0.8,
    "upset_gamma": 1.2,
    "v_max": 3.0,
    "v_gamma": 1.2,
    "rel_tau": 77.0,
    "rel_curve_gamma": 0.52,
})

# Valid completed set results, from the winner's side
VALID_SET_RESULTS = frozenset({
    (6, 0), (6, 1), (6, 2), (6, 3), (6, 4),
    (7, 5), (7, 6),
})
