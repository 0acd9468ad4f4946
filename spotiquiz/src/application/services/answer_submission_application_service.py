# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Answer Submission Flow (Application Layer).

Submits at most one answer per question over the request/response API and
applies the verdict only while its question is still current.
"""

import asyncio
import logging
from typing import Optional

from spotiquiz.src.application.services.game_state_machine_application_service import GameStateMachine
from spotiquiz.src.domain.models.game_state import AnswerOutcome, GameView
from spotiquiz.src.domain.models.session import SessionContext
from spotiquiz.src.domain.protocols.room_service_protocol import RoomServiceProtocol
from spotiquiz.src.monitoring.core.exceptions import SubmissionError

logger = logging.getLogger(__name__)


class AnswerSubmissionFlow:
    """
    Exactly-once answer submission.

    A submission is accepted only while a question is shown and not yet
    answered. The has-answered flag is set as soon as the call is dispatched,
    so a second submit for the same question is a no-op even while the first
    is in flight. A failed call is not retried and the flag stays set.
    """

    def __init__(
        self,
        session: SessionContext,
        state_machine: GameStateMachine,
        room_service: RoomServiceProtocol,
    ):
        self._session = session
        self._state = state_machine
        self._room_service = room_service

    async def submit(self, selected: str, question_id: Optional[str] = None) -> Optional[AnswerOutcome]:
        """
        Submit an answer to the current question.

        Args:
            selected: Option picked by the participant
            question_id: Question the pick was made for; the submit is a no-op
                if it is no longer current

        Returns:
            The applied outcome, or None if nothing was submitted or the
            verdict or failure arrived after its question was replaced

        Raises:
            SubmissionError: If the room service call failed while its
                question was still current
        """
        question = self._state.current_question
        if self._state.view is not GameView.QUESTION or question is None:
            logger.debug("Ignoring answer: no question is shown")
            return None
        if question_id is not None and question_id != question.id:
            logger.debug(f"Ignoring answer for question {question_id}, current is {question.id}")
            return None
        if self._state.has_answered:
            logger.debug(f"Ignoring answer: question {question.id} already answered")
            return None

        call = asyncio.ensure_future(
            self._room_service.submit_answer(
                self._session.room_code,
                question.id,
                selected,
                self._session.player_id,
            )
        )
        self._state.mark_answered(question.id)
        logger.info(f"📨 Answer {selected!r} submitted for question {question.id}")

        try:
            result = await call
        except Exception as e:
            if not self._state.record_submission_error(question.id, str(e)):
                logger.debug(f"Dropping failure for replaced question {question.id}: {e}")
                return None
            logger.error(f"❌ Answer submission for question {question.id} failed: {e}")
            raise SubmissionError(f"Could not submit answer: {e}", question_id=question.id) from e

        outcome = AnswerOutcome(
            for_question_id=question.id,
            selected_option=selected,
            is_correct=result.correct,
            points_earned=max(0, result.earned),
            total_score=result.score,
        )
        if not self._state.apply_outcome(outcome):
            return None

        marker = "✅" if outcome.is_correct else "❌"
        logger.info(f"{marker} Question {question.id}: score {outcome.total_score}")
        return outcome
