# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Shared fixtures and event builders."""

import pytest

from spotiquiz.src.domain.models.game_events import (
    GameOverEvent,
    GameStartedEvent,
    NewPlayerEvent,
    QuestionEvent,
    ScoreboardEvent,
)
from spotiquiz.src.domain.models.question import Question
from spotiquiz.src.domain.models.scoreboard import Scoreboard


def make_question(question_id="q1", options=("A", "B", "C", "D"), correct="A", offset=30000):
    return Question(
        id=question_id,
        track_reference=f"track-{question_id}",
        display_name=f"Song {question_id}",
        options=tuple(options),
        correct=correct,
        playback_offset_ms=offset,
    )


class Events:
    """Builders for typed game events."""

    @staticmethod
    def question(question_id="q1", **kwargs):
        return QuestionEvent(make_question(question_id, **kwargs))

    @staticmethod
    def scoreboard(scores=None):
        return ScoreboardEvent(Scoreboard(scores or {}))

    @staticmethod
    def game_started():
        return GameStartedEvent()

    @staticmethod
    def game_over(scores=None):
        return GameOverEvent(Scoreboard.from_payload(scores), payload=scores)

    @staticmethod
    def new_player(identity):
        return NewPlayerEvent(identity)


@pytest.fixture
def events():
    return Events
