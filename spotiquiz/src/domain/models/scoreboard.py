# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Scoreboard and Ranking (Domain Layer).

The scoreboard is re-derived by the room service and pushed whole; the client
never adjusts a score locally. Ranking is a pure function over it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from spotiquiz.src.monitoring.core.exceptions import MalformedEventError

# Position reported for identities that are not on the scoreboard
UNRANKED = 0


@dataclass(frozen=True)
class RankedEntry:
    """One scoreboard row in ranked order."""
    identity: str
    score: int


class Scoreboard(Mapping[str, int]):
    """
    Read-only identity → score mapping that keeps server insertion order.

    Insertion order matters only as the tie-break for ranking.
    """

    def __init__(self, scores: Optional[Mapping[str, int]] = None):
        entries = dict(scores or {})
        for identity, score in entries.items():
            if isinstance(score, bool) or not isinstance(score, int) or score < 0:
                raise MalformedEventError(f"score for {identity!r} must be a non-negative integer, got {score!r}")
        self._scores = MappingProxyType(entries)

    @classmethod
    def from_payload(cls, data: Any) -> "Scoreboard":
        """
        Build a scoreboard from its wire payload.

        Absent data (as sent with a bare game-over) gives an empty scoreboard.

        Raises:
            MalformedEventError: If data is not an identity → integer object
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise MalformedEventError(f"scoreboard payload must be an object, got {type(data).__name__}")
        return cls(data)

    def __getitem__(self, identity: str) -> int:
        return self._scores[identity]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return f"Scoreboard({dict(self._scores)!r})"

    def to_dict(self) -> dict:
        return dict(self._scores)


def rank(scoreboard: Mapping[str, int]) -> List[RankedEntry]:
    """
    Rank scoreboard entries by score, highest first.

    Ties keep the order in which the room service sent them.

    Args:
        scoreboard: Identity → score mapping

    Returns:
        Ranked entries

    Example:
        >>> rank({"p1": 30, "p2": 30, "p3": 10})
        [RankedEntry("p1", 30), RankedEntry("p2", 30), RankedEntry("p3", 10)]
    """
    # sorted() is stable, so equal scores keep payload order
    ordered = sorted(scoreboard.items(), key=lambda item: item[1], reverse=True)
    return [RankedEntry(identity, score) for identity, score in ordered]


def position_of(scoreboard: Mapping[str, int], identity: str) -> int:
    """
    1-based position of an identity in the ranking.

    Args:
        scoreboard: Identity → score mapping
        identity: Identity to look up

    Returns:
        1 + number of entries ranked ahead, or UNRANKED when absent
    """
    for index, entry in enumerate(rank(scoreboard)):
        if entry.identity == identity:
            return index + 1
    return UNRANKED


def format_position(position: int) -> str:
    """Human-readable position, "?" for UNRANKED."""
    return "?" if position == UNRANKED else f"#{position}"


def ranked_rows(scoreboard: Mapping[str, int]) -> List[Tuple[int, str, int]]:
    """(position, identity, score) rows for results views."""
    return [(index + 1, entry.identity, entry.score) for index, entry in enumerate(rank(scoreboard))]
