"""
PMR - Player Match Rating engine for padel

Computes a player's PMR (0.1 to 8.9) and keeps it up to date.

Main components:
- rating.estimator: onboarding questionnaire -> initial PMR
- rating.adjuster: completed match -> new PMR and reliability for 4 players
- rating.score: padel score validity rules and parsing
- config: settings from environment variables
"""

from pmr.exceptions import InvalidAnswerError, InvalidScoreError, PmrError
from pmr.rating import adjust_after_match, estimate_from_onboarding

__version__ = "1.0.0"

__all__ = [
    "InvalidAnswerError",
    "InvalidScoreError",
    "PmrError",
    "adjust_after_match",
    "estimate_from_onboarding",
]
