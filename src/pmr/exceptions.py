"""Exceptions raised by the PMR engine."""

from typing import Optional


class PmrError(Exception):
    """Base class for all PMR engine errors."""
    pass


class InvalidAnswerError(PmrError, ValueError):
    """
    Raised when a questionnaire answer is missing or outside its enumerated set.

    Attributes:
        question_id: Question the bad answer belongs to ('Q1'..'Q5'), if known
        answer: The rejected value
    """

    def __init__(self, message: str, question_id: Optional[str] = None, answer: object = None):
        super().__init__(message)
        self.question_id = question_id
        self.answer = answer


class InvalidScoreError(PmrError, ValueError):
    """
    Raised when a match score breaks the set validity rules or cannot be parsed.

    Attributes:
        reason: Human-readable explanation of the rule that failed
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
