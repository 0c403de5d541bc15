"""
Padel match scores: structure, validity rules, and text parsing.

A match is best of three sets. Each set slot holds two optional game counts,
and a slot with both counts missing is an unplayed set.

Validity rules:
- A set is either empty or complete (no partial sets)
- A complete set is 6-0 through 6-4, 7-5 or 7-6 (either way round)
- Sets 1 and 2 are mandatory
- Set 3 is mandatory when sets 1 and 2 are split 1-1, and must be empty otherwise

Text formats accepted by parse_match_score():
- "6-4 6-3"
- "6-4, 4-6, 7-5"
- "7-6(5) 6-4" (tiebreak points are ignored)
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from pmr.exceptions import InvalidScoreError
from pmr.rating.constants import VALID_SET_RESULTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetScore:
    """
    Games won by each team in one set.

    Both counts None means the set was not played.
    """
    team1_games: Optional[int] = None
    team2_games: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.team1_games is None and self.team2_games is None

    @property
    def is_complete(self) -> bool:
        return self.team1_games is not None and self.team2_games is not None

    @property
    def winner(self) -> Optional[int]:
        """1 or 2 for a complete set, None otherwise."""
        if not self.is_complete:
            return None
        return 1 if self.team1_games > self.team2_games else 2

    def __repr__(self) -> str:
        if self.is_empty:
            return "-"
        g1 = "?" if self.team1_games is None else self.team1_games
        g2 = "?" if self.team2_games is None else self.team2_games
        return f"{g1}-{g2}"


EMPTY_SET = SetScore()


@dataclass(frozen=True)
class MatchScore:
    """
    The three set slots of a best-of-three match.

    Attributes:
        sets: Exactly three SetScore, set 3 empty when not played
    """
    sets: tuple[SetScore, SetScore, SetScore]

    @property
    def played_sets(self) -> list[SetScore]:
        """Complete sets, in order."""
        return [s for s in self.sets if s.is_complete]

    def sets_won(self) -> tuple[int, int]:
        """(team1 sets, team2 sets) over the played sets."""
        team1 = sum(1 for s in self.played_sets if s.winner == 1)
        return team1, len(self.played_sets) - team1

    def games_won(self) -> tuple[int, int]:
        """(team1 games, team2 games) over the played sets."""
        played = self.played_sets
        return (
            sum(s.team1_games for s in played),
            sum(s.team2_games for s in played),
        )

    @property
    def winner(self) -> int:
        """1 if team 1 won more sets, else 2."""
        team1, team2 = self.sets_won()
        return 1 if team1 > team2 else 2

    @property
    def needs_deciding_set(self) -> bool:
        """Whether sets 1 and 2 are complete and split 1-1."""
        set1, set2 = self.sets[0], self.sets[1]
        if not (set1.is_complete and set2.is_complete):
            return False
        return set1.winner != set2.winner

    def to_display_string(self) -> str:
        """Format like '6-4 4-6 7-5'."""
        return " ".join(repr(s) for s in self.played_sets)

    def to_structured(self) -> list[dict]:
        """Played sets as dicts with 'team1' and 'team2' game counts."""
        return [{"team1": s.team1_games, "team2": s.team2_games} for s in self.played_sets]

    def __repr__(self) -> str:
        return f"<MatchScore({self.to_display_string()})>"


SetLike = Union[SetScore, Sequence[Optional[int]], Mapping[str, Optional[int]], None]


def _coerce_set(value: SetLike) -> SetScore:
    if value is None:
        return EMPTY_SET
    if isinstance(value, SetScore):
        return value
    if isinstance(value, Mapping):
        return SetScore(value.get("team1_games"), value.get("team2_games"))
    if len(value) != 2:
        raise InvalidScoreError(f"A set must have two game counts, got {value!r}")
    return SetScore(value[0], value[1])


def coerce_match_score(sets: Union[MatchScore, Sequence[SetLike]]) -> MatchScore:
    """
    Build a MatchScore from a MatchScore or a sequence of two or three sets.

    Each set can be a SetScore, a (team1, team2) pair, a dict with
    team1_games/team2_games keys, or None for an unplayed set.

    Raises:
        InvalidScoreError: If the input does not have two or three sets
    """
    if isinstance(sets, MatchScore):
        return sets

    slots = [_coerce_set(s) for s in sets]
    if len(slots) == 2:
        slots.append(EMPTY_SET)
    if len(slots) != 3:
        raise InvalidScoreError(f"A match has two or three sets, got {len(slots)}")

    return MatchScore(sets=(slots[0], slots[1], slots[2]))


def is_valid_set(set_score: SetScore) -> bool:
    """
    Whether a set holds a valid completed result.

    Valid: 6-0, 6-1, 6-2, 6-3, 6-4, 7-5, 7-6, either team winning.
    Empty and partial sets are not valid results.
    """
    if not set_score.is_complete:
        return False
    g1, g2 = set_score.team1_games, set_score.team2_games
    return (g1, g2) in VALID_SET_RESULTS or (g2, g1) in VALID_SET_RESULTS


def validate_match_score(sets: Union[MatchScore, Sequence[SetLike]]) -> MatchScore:
    """
    Check a score against the padel set rules.

    Args:
        sets: MatchScore or two/three sets (see coerce_match_score)

    Returns:
        The validated MatchScore

    Raises:
        InvalidScoreError: With the reason of the first rule that failed
    """
    score = coerce_match_score(sets)

    for i, s in enumerate(score.sets, start=1):
        if not (s.is_empty or s.is_complete):
            raise InvalidScoreError(f"Set {i} is partial ({s!r}): a set is either empty or complete")
        if s.is_complete and not is_valid_set(s):
            raise InvalidScoreError(f"Set {i} is not a valid set result ({s!r}): expected 6-0..6-4, 7-5 or 7-6")

    if score.sets[0].is_empty or score.sets[1].is_empty:
        raise InvalidScoreError("Sets 1 and 2 are mandatory")

    if score.needs_deciding_set:
        if score.sets[2].is_empty:
            raise InvalidScoreError("Set 3 is mandatory when sets 1 and 2 are split 1-1")
    elif not score.sets[2].is_empty:
        raise InvalidScoreError("Set 3 must be empty when the match is decided in two sets")

    return score


def is_valid_match_score(sets: Union[MatchScore, Sequence[SetLike]]) -> bool:
    """Predicate form of validate_match_score()."""
    try:
        validate_match_score(sets)
    except InvalidScoreError as e:
        logger.debug("Score rejected: %s", e.reason)
        return False
    return True


def clear_deciding_set(sets: Union[MatchScore, Sequence[SetLike]]) -> MatchScore:
    """
    Empty set 3 once sets 1 and 2 are complete and not split.

    Mirrors the live-editing rule of the score form: entering a 2-0 score
    discards anything typed into the third set. Any other score is returned
    unchanged.
    """
    score = coerce_match_score(sets)
    set1, set2, set3 = score.sets
    if set1.is_complete and set2.is_complete and not score.needs_deciding_set and not set3.is_empty:
        return MatchScore(sets=(set1, set2, EMPTY_SET))
    return score


# Matches "6-4", "7-6(5)", "7-6(7-5)"
_SET_PATTERN = re.compile(r"^(\d+)-(\d+)(?:\(\d+(?:-\d+)?\))?$")


def parse_match_score(score_str: str) -> MatchScore:
    """
    Parse a score string such as "6-4 4-6 7-5" into a MatchScore.

    Only the structure is parsed here; call validate_match_score() to check
    the set rules.

    Raises:
        InvalidScoreError: If the string is empty, has a token that is not a
            set score, or has more than three sets

    Examples:
        >>> parse_match_score("6-4 6-3")
        <MatchScore(6-4 6-3)>

        >>> parse_match_score("6-4, 4-6, 7-6(5)")
        <MatchScore(6-4 4-6 7-6)>
    """
    if not score_str or not score_str.strip():
        raise InvalidScoreError("Empty score string")

    parts = [p for p in re.split(r"[\s,;]+", score_str.strip()) if p]

    sets = []
    for part in parts:
        match = _SET_PATTERN.match(part)
        if not match:
            raise InvalidScoreError(f"Could not parse set '{part}' in '{score_str}'")
        sets.append(SetScore(int(match.group(1)), int(match.group(2))))

    if len(sets) > 3:
        raise InvalidScoreError(f"Too many sets in '{score_str}': a match has at most three")
    if len(sets) < 2:
        sets.extend([EMPTY_SET] * (2 - len(sets)))

    return coerce_match_score(sets)
