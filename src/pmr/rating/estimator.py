"""
Onboarding PMR estimator.

Finds the rating that maximises the combined log-likelihood of the
questionnaire evidence:

    log L(r) = sum_i weight_i * log_gaussian(r, mu_i, tau_i)

over the fixed grid 0.1, 0.2, ..., 8.9. A candidate excluded by any hard bound
scores -inf. The search is brute force: 89 points, 5 evidences.

When several candidates share the exact best log-score the winner is chosen by:
  1. closest to the mean of the evidences' expected values
  2. then closest to the default anchor (4.0)
  3. then the lower rating

If every candidate is forbidden they all tie at -inf, so the same policy
picks the grid point nearest the mean expected value.

Usage:
    result = estimate_from_onboarding({
        "q1": "intermediaire",
        "q2": "3-6ans",
        "q3": "debut-competition",
        "q4": "3",
        "q5": "3",
    })
    print(result.rating)  # e.g. 3.9
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from pmr.rating.constants import (
    DEFAULT_RATING_INT,
    RATING_MAX_INT,
    RATING_MIN_INT,
    RATING_SCALE,
)
from pmr.rating.evidence import (
    Evidence,
    clamp,
    evidences_for,
    is_forbidden,
    log_gaussian,
    parse_answers,
    weighted_log_score,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateRating:
    """
    One point of the rating grid after scoring.

    Attributes:
        rating: Grid value (0.1 to 8.9)
        log_score: Combined log-score (<= 0), -inf if forbidden
        normalized_score: exp(log_score - best_log_score) in (0, 1], for display.
            0 if forbidden or if every candidate is forbidden.
    """
    rating: float
    log_score: float
    normalized_score: float


@dataclass(frozen=True)
class QuestionDebugScore:
    """
    How one question scored at the winning rating.

    score_at_winner_base is exp(log_gaussian) at the winner, and
    score_at_winner_weighted is that base raised to the question's weight
    (the factor actually used in the combined likelihood). Both are 0 when the
    question's hard bounds forbid the winner.
    """
    question_id: str
    answer: str
    expected_value: float
    tolerance: float
    weight: float
    hard_min: Optional[float]
    hard_max: Optional[float]
    score_at_winner_base: float
    score_at_winner_weighted: float

    def to_dict(self) -> dict:
        """Dict form for display; hard bounds are omitted when absent."""
        data = {
            "question_id": self.question_id,
            "answer": self.answer,
            "expected_value": self.expected_value,
            "tolerance": self.tolerance,
            "weight": self.weight,
            "score_at_winner_base": self.score_at_winner_base,
            "score_at_winner_weighted": self.score_at_winner_weighted,
        }
        if self.hard_min is not None:
            data["hard_min"] = self.hard_min
        if self.hard_max is not None:
            data["hard_max"] = self.hard_max
        return data


@dataclass(frozen=True)
class RatingResult:
    """
    Result of an estimation.

    Attributes:
        rating: Winning PMR (0.1 to 8.9, on the 0.1 grid)
        per_question_debug: Per-question breakdown at the winner, in input order
        log_score: Winner's combined log-score (-inf if every candidate was forbidden)
        candidates: The whole scored grid, lowest rating first
    """
    rating: float
    per_question_debug: tuple[QuestionDebugScore, ...]
    log_score: float
    candidates: tuple[CandidateRating, ...]

    @property
    def is_fallback(self) -> bool:
        """Whether no candidate was feasible and the rating came from the tie-break alone."""
        return self.log_score == -math.inf

    def __repr__(self) -> str:
        return f"<RatingResult(rating={self.rating:.1f}, log_score={self.log_score:.4f})>"


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def tie_break_target(evidences: Sequence[Evidence]) -> int:
    """
    Grid level (in tenths) that ties are resolved towards.

    The mean expected value of the evidence, rounded to the grid and clamped
    into it. Falls back to the default anchor when there is no evidence.
    """
    if not evidences:
        return DEFAULT_RATING_INT
    avg_mu = sum(e.expected_value for e in evidences) / len(evidences)
    return int(clamp(_round_half_up(avg_mu * RATING_SCALE), RATING_MIN_INT, RATING_MAX_INT))


def tie_break_prefers(level_int: int, best_int: int, target_int: int) -> bool:
    """
    Whether level_int should replace best_int when both have the same log-score.

    Closest to target_int wins, then closest to the default anchor, then
    the lower level.
    """
    current_dist = abs(level_int - target_int)
    best_dist = abs(best_int - target_int)
    if current_dist != best_dist:
        return current_dist < best_dist

    current_def = abs(level_int - DEFAULT_RATING_INT)
    best_def = abs(best_int - DEFAULT_RATING_INT)
    if current_def != best_def:
        return current_def < best_def

    return level_int < best_int


def combined_log_score(rating: float, evidences: Sequence[Evidence]) -> float:
    """Sum of weighted log-scores, or -inf as soon as one evidence forbids the rating."""
    total = 0.0
    for e in evidences:
        score = weighted_log_score(rating, e)
        if score == -math.inf:
            return score
        total += score
    return total


def search_rating(evidences: Sequence[Evidence]) -> tuple[int, float, tuple[CandidateRating, ...]]:
    """
    Grid search for the best rating.

    Args:
        evidences: Evidence to combine

    Returns:
        (winner level in tenths, winner log-score, scored candidates)
    """
    target_int = tie_break_target(evidences)

    best_int = DEFAULT_RATING_INT
    best_log = -math.inf
    raw: list[tuple[float, float]] = []

    for level_int in range(RATING_MIN_INT, RATING_MAX_INT + 1):
        rating = level_int / RATING_SCALE
        log_score = combined_log_score(rating, evidences)
        raw.append((rating, log_score))

        if log_score > best_log:
            best_log = log_score
            best_int = level_int
        elif log_score == best_log and tie_break_prefers(level_int, best_int, target_int):
            best_int = level_int

    candidates = []
    for rating, log_score in raw:
        if log_score == -math.inf or best_log == -math.inf:
            normalized = 0.0
        else:
            normalized = math.exp(log_score - best_log)
        candidates.append(CandidateRating(rating=rating, log_score=log_score, normalized_score=normalized))

    return best_int, best_log, tuple(candidates)


def question_debug(question_id: str, answer: str, evidence: Evidence, winner: float) -> QuestionDebugScore:
    """Score one question's evidence at the winning rating."""
    if is_forbidden(winner, evidence):
        base = 0.0
        weighted = 0.0
    else:
        log_base = log_gaussian(winner, evidence.expected_value, evidence.tolerance)
        base = math.exp(log_base)
        weighted = math.exp(evidence.weight * log_base)

    return QuestionDebugScore(
        question_id=question_id,
        answer=answer,
        expected_value=evidence.expected_value,
        tolerance=evidence.tolerance,
        weight=evidence.weight,
        hard_min=evidence.hard_min,
        hard_max=evidence.hard_max,
        score_at_winner_base=base,
        score_at_winner_weighted=weighted,
    )


def estimate_from_evidence(
    evidences: Sequence[Evidence],
    labels: Optional[Sequence[tuple[str, str]]] = None,
) -> RatingResult:
    """
    Estimate a rating from arbitrary evidence.

    Args:
        evidences: Evidence to combine
        labels: Optional (question_id, answer) per evidence, used in the debug
            trace. Defaults to ("E1", ""), ("E2", ""), ...

    Returns:
        RatingResult for the winning grid point
    """
    evidences = list(evidences)
    if labels is None:
        labels = [(f"E{i + 1}", "") for i in range(len(evidences))]
    elif len(labels) != len(evidences):
        raise ValueError(
            f"labels must match evidences ({len(labels)} labels for {len(evidences)} evidences)"
        )

    best_int, best_log, candidates = search_rating(evidences)
    winner = best_int / RATING_SCALE

    if best_log == -math.inf:
        logger.warning(
            "Every candidate rating is forbidden by hard bounds, falling back to %.1f",
            winner,
        )
    else:
        logger.debug("PMR estimate: %.1f (log_score=%.6f)", winner, best_log)

    debug = tuple(
        question_debug(question_id, answer, e, winner)
        for (question_id, answer), e in zip(labels, evidences)
    )

    return RatingResult(
        rating=winner,
        per_question_debug=debug,
        log_score=best_log,
        candidates=candidates,
    )


def estimate_from_onboarding(answers) -> RatingResult:
    """
    Estimate a player's PMR from the five onboarding answers.

    Args:
        answers: OnboardingAnswers, or a mapping with keys q1..q5 (or the
            form names niveau, experience, competition, volee, rebonds)

    Returns:
        RatingResult with the rating and one debug entry per question

    Raises:
        InvalidAnswerError: If an answer is missing or not an allowed value

    Example:
        result = estimate_from_onboarding({
            "q1": "debutant", "q2": "moins-1an", "q3": "loisir",
            "q4": "1", "q5": "1",
        })
        # result.rating is close to 1.0
    """
    parsed = parse_answers(answers)
    return estimate_from_evidence(evidences_for(parsed), labels=parsed.as_pairs())
