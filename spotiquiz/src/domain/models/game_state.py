# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Game State Models (Domain Layer).

View enum, answer outcome and the read-only snapshot handed to presentation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from spotiquiz.src.domain.models.question import Question
from spotiquiz.src.domain.models.scoreboard import Scoreboard


class GameView(Enum):
    """Phase currently shown for a room membership."""
    IDLE = "idle"                  # No question or scoreboard yet
    QUESTION = "question"          # A question is current
    SCOREBOARD = "scoreboard"      # A scoreboard is current
    FINISHED = "finished"          # Terminal, game over received


@dataclass(frozen=True)
class AnswerOutcome:
    """
    Result of this participant's answer to one question.

    Attributes:
        for_question_id: Question the answer belongs to
        selected_option: Option the participant picked
        is_correct: Whether the pick was correct
        points_earned: Points awarded for this answer
        total_score: Participant's score after this answer
    """
    for_question_id: str
    selected_option: str
    is_correct: bool
    points_earned: int = 0
    total_score: Optional[int] = None

    def __post_init__(self):
        if self.points_earned < 0:
            raise ValueError(f"points_earned must be >= 0, got {self.points_earned}")


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the state machine for presentation."""
    view: GameView
    question: Optional[Question]
    scoreboard: Optional[Scoreboard]
    has_answered: bool
    outcome: Optional[AnswerOutcome]
    submission_error: Optional[str]
    game_started: bool
    roster: Tuple[str, ...]
    final_scoreboard: Optional[Scoreboard]


@dataclass(frozen=True)
class StateTransition:
    """
    One applied event.

    Attributes:
        previous_view: View before the event
        view: View after the event
        event: The typed event that caused the transition
        snapshot: State after the event
    """
    previous_view: GameView
    view: GameView
    event: Any
    snapshot: GameSnapshot
