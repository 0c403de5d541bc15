"""
PMR rating module.

Implements the two PMR computations:
- Onboarding estimate: grid search over 0.1..8.9 maximising weighted
  Gaussian log-likelihood of the questionnaire answers, with hard bounds
  and a deterministic tie-break
- Post-match adjustment: Elo-style update scaled by margin of victory,
  upset and player reliability
"""

from pmr.rating.adjuster import (
    AdjustmentParams,
    AdjustmentResult,
    PlayerState,
    adjust_after_match,
    clamp_rating,
    clamp_reliability,
    expected_win_probability,
)
from pmr.rating.estimator import (
    CandidateRating,
    QuestionDebugScore,
    RatingResult,
    estimate_from_evidence,
    estimate_from_onboarding,
)
from pmr.rating.evidence import (
    Competition,
    Evidence,
    Experience,
    OnboardingAnswers,
    SelfAssessment,
    SkillLevel,
)
from pmr.rating.score import (
    MatchScore,
    SetScore,
    clear_deciding_set,
    is_valid_match_score,
    is_valid_set,
    parse_match_score,
    validate_match_score,
)

__all__ = [
    "AdjustmentParams",
    "AdjustmentResult",
    "PlayerState",
    "adjust_after_match",
    "clamp_rating",
    "clamp_reliability",
    "expected_win_probability",
    "CandidateRating",
    "QuestionDebugScore",
    "RatingResult",
    "estimate_from_evidence",
    "estimate_from_onboarding",
    "Competition",
    "Evidence",
    "Experience",
    "OnboardingAnswers",
    "SelfAssessment",
    "SkillLevel",
    "MatchScore",
    "SetScore",
    "clear_deciding_set",
    "is_valid_match_score",
    "is_valid_set",
    "parse_match_score",
    "validate_match_score",
]
