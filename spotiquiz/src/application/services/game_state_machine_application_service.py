# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Game State Machine (Application Layer).

Single owner of the view state of one room membership. Events from the room
channel are applied through a transition table keyed by event type; every
applied event is broadcast to listeners as a StateTransition.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from spotiquiz.src.domain.models.game_events import (
    GameEvent,
    GameOverEvent,
    GameStartedEvent,
    NewPlayerEvent,
    QuestionEvent,
    ScoreboardEvent,
)
from spotiquiz.src.domain.models.game_state import (
    AnswerOutcome,
    GameSnapshot,
    GameView,
    StateTransition,
)
from spotiquiz.src.domain.models.question import Question
from spotiquiz.src.domain.models.scoreboard import Scoreboard

logger = logging.getLogger(__name__)

TransitionListener = Callable[[StateTransition], Union[None, Awaitable[None]]]


class GameStateMachine:
    """
    Client-side game state for one room membership.

    Transition table:
    - question:     any view → QUESTION, replaces the question, clears the
                    outcome, the submission error and the has-answered flag
    - scoreboard:   any view → SCOREBOARD, replaces the scoreboard
    - game-started: pre-game only, marks the game started
    - game-over:    any view → FINISHED, keeps the final scoreboard as received
    - new-player:   pre-game and host only, appends to the roster

    No ordering between event types is assumed and the last write wins.
    Unknown events and anything arriving after FINISHED are ignored.
    """

    def __init__(self, is_host: bool = False):
        """
        Initialize state machine.

        Args:
            is_host: Whether this membership is the room host (roster updates)
        """
        self._is_host = is_host
        self._view = GameView.IDLE
        self._question: Optional[Question] = None
        self._scoreboard: Optional[Scoreboard] = None
        self._outcome: Optional[AnswerOutcome] = None
        self._answered_question_id: Optional[str] = None
        self._submission_error: Optional[str] = None
        self._roster: List[str] = []
        self._game_started = False
        self._final_scoreboard: Optional[Scoreboard] = None
        self._listeners: List[TransitionListener] = []

        self._transitions: Dict[type, Callable[[GameEvent], bool]] = {
            QuestionEvent: self._on_question,
            ScoreboardEvent: self._on_scoreboard,
            GameStartedEvent: self._on_game_started,
            GameOverEvent: self._on_game_over,
            NewPlayerEvent: self._on_new_player,
        }

    # MARK: - Listeners

    def add_listener(self, listener: TransitionListener) -> None:
        """
        Register a transition listener.

        Listeners may be plain functions or coroutine functions and are
        called in registration order. Their failures are logged, never
        propagated into the state machine.
        """
        self._listeners.append(listener)

    async def _notify(self, transition: StateTransition) -> None:
        for listener in self._listeners:
            try:
                result = listener(transition)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"❌ Transition listener failed on {type(transition.event).__name__}: {e}", exc_info=True)

    # MARK: - Events

    async def handle_event(self, event: GameEvent) -> Optional[StateTransition]:
        """
        Apply one event.

        Args:
            event: Typed game event, in channel arrival order

        Returns:
            The transition that was applied, or None if the event was ignored
        """
        if self._view is GameView.FINISHED:
            logger.debug(f"Ignoring {type(event).__name__} after game over")
            return None

        apply = self._transitions.get(type(event))
        if apply is None:
            logger.debug(f"No transition for {type(event).__name__}")
            return None

        previous_view = self._view
        if not apply(event):
            return None

        transition = StateTransition(
            previous_view=previous_view,
            view=self._view,
            event=event,
            snapshot=self.snapshot(),
        )
        if previous_view is not self._view:
            logger.info(f"🎮 View {previous_view.value} → {self._view.value}")
        await self._notify(transition)
        return transition

    def _on_question(self, event: QuestionEvent) -> bool:
        self._question = event.question
        self._outcome = None
        self._submission_error = None
        self._answered_question_id = None
        self._view = GameView.QUESTION
        return True

    def _on_scoreboard(self, event: ScoreboardEvent) -> bool:
        self._scoreboard = event.scoreboard
        self._view = GameView.SCOREBOARD
        return True

    def _on_game_started(self, event: GameStartedEvent) -> bool:
        if not self.is_pre_game:
            logger.debug("Ignoring game-started once the game is under way")
            return False
        self._game_started = True
        logger.info("🎮 Game started")
        return True

    def _on_game_over(self, event: GameOverEvent) -> bool:
        self._final_scoreboard = event.scoreboard
        self._view = GameView.FINISHED
        logger.info(f"🏁 Game over ({len(event.scoreboard)} participants)")
        return True

    def _on_new_player(self, event: NewPlayerEvent) -> bool:
        if not self._is_host or not self.is_pre_game:
            return False
        if event.identity in self._roster:
            return False
        self._roster.append(event.identity)
        logger.info(f"👋 {event.identity} joined the room")
        return True

    # MARK: - Answer bookkeeping

    def mark_answered(self, question_id: str) -> None:
        """Set the has-answered flag for question_id once its submission is dispatched."""
        self._answered_question_id = question_id

    def apply_outcome(self, outcome: AnswerOutcome) -> bool:
        """
        Apply an answer outcome if it still belongs to the current question.

        Returns:
            True if applied, False if the outcome is stale
        """
        if not self._is_current(outcome.for_question_id):
            logger.debug(f"Discarding stale outcome for question {outcome.for_question_id}")
            return False
        self._outcome = outcome
        return True

    def record_submission_error(self, question_id: str, message: str) -> bool:
        """
        Record a failed submission if it still belongs to the current question.

        Returns:
            True if recorded
        """
        if not self._is_current(question_id):
            return False
        self._submission_error = message
        return True

    def _is_current(self, question_id: str) -> bool:
        return self._question is not None and self._question.id == question_id

    # MARK: - State

    @property
    def view(self) -> GameView:
        return self._view

    @property
    def current_question(self) -> Optional[Question]:
        return self._question

    @property
    def has_answered(self) -> bool:
        return self._question is not None and self._answered_question_id == self._question.id

    @property
    def is_pre_game(self) -> bool:
        return not self._game_started and self._view is GameView.IDLE

    @property
    def is_finished(self) -> bool:
        return self._view is GameView.FINISHED

    @property
    def final_scoreboard(self) -> Optional[Scoreboard]:
        return self._final_scoreboard

    def snapshot(self) -> GameSnapshot:
        """Read-only copy of the current state."""
        return GameSnapshot(
            view=self._view,
            question=self._question,
            scoreboard=self._scoreboard,
            has_answered=self.has_answered,
            outcome=self._outcome,
            submission_error=self._submission_error,
            game_started=self._game_started,
            roster=tuple(self._roster),
            final_scoreboard=self._final_scoreboard,
        )
