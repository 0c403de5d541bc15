"""
Questionnaire evidence for the onboarding estimator.

Each onboarding answer is turned into a piece of soft evidence about the
player's level: an expected rating, a tolerance around it, a weight, and
optional hard bounds. The estimator combines the evidence in log space:

    log_gaussian(x, mu, tau) = -((x - mu)^2) / (2 * tau^2)

which is 0 when x == mu and grows more negative as x moves away. Working in
log space means five small likelihoods never underflow to 0.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pmr.exceptions import InvalidAnswerError
from pmr.rating.constants import (
    COMPETITION_EVIDENCE,
    EXPERIENCE_EVIDENCE,
    QUESTION_IDS,
    SELF_ASSESSMENT_LEVELS,
    SELF_ASSESSMENT_TOLERANCE,
    SELF_ASSESSMENT_WEIGHT,
    TOLERANCE_EPSILON,
    VOLLEY_EVIDENCE,
    WALL_PLAY_EVIDENCE,
)


@dataclass(frozen=True)
class Evidence:
    """
    Statistical contribution of one answer.

    Attributes:
        expected_value: Rating this answer points to (mu)
        tolerance: Gaussian sigma around expected_value (tau), floored near 0
        weight: Relative importance in the combined likelihood
        hard_min: Ratings below this are forbidden
        hard_max: Ratings above this are forbidden
    """
    expected_value: float
    tolerance: float
    weight: float
    hard_min: Optional[float] = None
    hard_max: Optional[float] = None


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def log_gaussian(rating: float, expected_value: float, tolerance: float) -> float:
    """
    Gaussian log-score of a rating against an expected value.

    Args:
        rating: Candidate rating
        expected_value: Centre of the penalty (mu)
        tolerance: Sigma (tau). Values <= 0 are floored to TOLERANCE_EPSILON.

    Returns:
        A value <= 0, exactly 0 at rating == expected_value
    """
    sigma = max(tolerance, TOLERANCE_EPSILON)
    d = rating - expected_value
    return -(d * d) / (2 * sigma * sigma)


def is_forbidden(rating: float, evidence: Evidence) -> bool:
    """Whether the evidence's hard bounds exclude this rating."""
    if evidence.hard_min is not None and rating < evidence.hard_min:
        return True
    if evidence.hard_max is not None and rating > evidence.hard_max:
        return True
    return False


def weighted_log_score(rating: float, evidence: Evidence) -> float:
    """weight * log_gaussian, or -inf if the rating is forbidden."""
    if is_forbidden(rating, evidence):
        return -math.inf
    return evidence.weight * log_gaussian(rating, evidence.expected_value, evidence.tolerance)


# =============================================================================
# Answer types
# =============================================================================

class SelfAssessment(str, Enum):
    """Q1: how the player rates themselves."""
    DEBUTANT = "debutant"
    DEBUTANT_AVANCE = "debutant-avance"
    LOISIR_REGULIER = "loisir-regulier"
    INTERMEDIAIRE = "intermediaire"
    CONFIRME = "confirme"
    AVANCE = "avance"
    EXPERT = "expert"
    ELITE = "elite"


class Experience(str, Enum):
    """Q2: years of racket-sport experience."""
    LESS_THAN_1 = "moins-1an"
    YEARS_1_3 = "1-3ans"
    YEARS_3_6 = "3-6ans"
    YEARS_6_10 = "6-10ans"
    MORE_THAN_10 = "plus-10ans"


class Competition(str, Enum):
    """Q3: competition tier."""
    LOISIR = "loisir"
    DEBUT_COMPETITION = "debut-competition"
    COMPETITEUR_REGULIER = "competiteur-regulier"
    COMPETITEUR_AVANCE = "competiteur-avance"


class SkillLevel(str, Enum):
    """Q4 / Q5: 1-5 skill scale for volleys and wall play."""
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"


class OnboardingAnswers(BaseModel):
    """
    The five onboarding answers.

    Accepts either the question keys (q1..q5) or the questionnaire form
    names (niveau, experience, competition, volee, rebonds).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    q1: SelfAssessment = Field(alias="niveau")
    q2: Experience = Field(alias="experience")
    q3: Competition = Field(alias="competition")
    q4: SkillLevel = Field(alias="volee")
    q5: SkillLevel = Field(alias="rebonds")

    def as_pairs(self) -> list[tuple[str, str]]:
        """(question_id, answer value) in question order."""
        values = (self.q1, self.q2, self.q3, self.q4, self.q5)
        return [(qid, v.value) for qid, v in zip(QUESTION_IDS, values)]


_FIELD_TO_QUESTION = {
    "q1": "Q1", "niveau": "Q1",
    "q2": "Q2", "experience": "Q2",
    "q3": "Q3", "competition": "Q3",
    "q4": "Q4", "volee": "Q4",
    "q5": "Q5", "rebonds": "Q5",
}


def parse_answers(answers) -> OnboardingAnswers:
    """
    Validate raw answers into an OnboardingAnswers.

    Args:
        answers: OnboardingAnswers instance or a mapping of answer values

    Raises:
        InvalidAnswerError: If a question is missing or an answer is not one
            of the allowed values. The pydantic error is chained.
    """
    if isinstance(answers, OnboardingAnswers):
        return answers

    try:
        return OnboardingAnswers.model_validate(answers)
    except ValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ("?",)
        field = str(loc[0])
        question_id = _FIELD_TO_QUESTION.get(field)
        answer = None if first.get("type") == "missing" else first.get("input")
        raise InvalidAnswerError(
            f"Invalid answer for {question_id or field}: {answer!r} ({first.get('msg')})",
            question_id=question_id,
            answer=answer,
        ) from e


# =============================================================================
# Evidence lookups (one per question)
# =============================================================================

def _from_row(row: tuple) -> Evidence:
    mu, tau, weight, hard_min, hard_max = row
    return Evidence(
        expected_value=mu,
        tolerance=tau,
        weight=weight,
        hard_min=hard_min,
        hard_max=hard_max,
    )


def evidence_self_assessment(answer: SelfAssessment) -> Evidence:
    """Q1: self-assessed level, 1..8."""
    level = SELF_ASSESSMENT_LEVELS[SelfAssessment(answer).value]
    return Evidence(
        expected_value=float(clamp(level, 1, 8)),
        tolerance=SELF_ASSESSMENT_TOLERANCE,
        weight=SELF_ASSESSMENT_WEIGHT,
    )


def evidence_experience(answer: Experience) -> Evidence:
    """Q2: experience, with hard caps for short experience."""
    return _from_row(EXPERIENCE_EVIDENCE[Experience(answer).value])


def evidence_competition(answer: Competition) -> Evidence:
    """Q3: competition tier."""
    return _from_row(COMPETITION_EVIDENCE[Competition(answer).value])


def evidence_volley(answer: SkillLevel) -> Evidence:
    """Q4: volley skill."""
    return _from_row(VOLLEY_EVIDENCE[SkillLevel(answer).value])


def evidence_wall_play(answer: SkillLevel) -> Evidence:
    """Q5: wall play skill."""
    return _from_row(WALL_PLAY_EVIDENCE[SkillLevel(answer).value])


def evidences_for(answers: OnboardingAnswers) -> list[Evidence]:
    """Evidence for all five answers, in question order."""
    return [
        evidence_self_assessment(answers.q1),
        evidence_experience(answers.q2),
        evidence_competition(answers.q3),
        evidence_volley(answers.q4),
        evidence_wall_play(answers.q5),
    ]
