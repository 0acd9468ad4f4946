# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Tests for GameStateMachine.

Tests cover:
- Transition table effects per event type
- Listener broadcast and failure isolation
- Answer bookkeeping and staleness checks
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from spotiquiz.src.application.services.game_state_machine_application_service import GameStateMachine
from spotiquiz.src.domain.models.game_events import ConnectionLostEvent
from spotiquiz.src.domain.models.game_state import AnswerOutcome, GameView


@pytest.fixture
def machine():
    return GameStateMachine()


@pytest.fixture
def host_machine():
    return GameStateMachine(is_host=True)


class TestTransitions:
    """Test the transition table."""

    def test_initial_state(self, machine):
        snapshot = machine.snapshot()

        assert snapshot.view is GameView.IDLE
        assert snapshot.question is None
        assert snapshot.has_answered is False
        assert snapshot.roster == ()

    @pytest.mark.asyncio
    async def test_question_enters_question_view(self, machine, events):
        transition = await machine.handle_event(events.question("q1"))

        assert transition.previous_view is GameView.IDLE
        assert transition.view is GameView.QUESTION
        assert transition.snapshot.question.id == "q1"

    @pytest.mark.asyncio
    async def test_question_clears_answer_state(self, machine, events):
        await machine.handle_event(events.question("q1"))
        machine.mark_answered("q1")
        machine.apply_outcome(AnswerOutcome("q1", "A", True, 1000, 1000))
        machine.record_submission_error("q1", "late")

        await machine.handle_event(events.question("q2"))

        snapshot = machine.snapshot()
        assert snapshot.question.id == "q2"
        assert snapshot.has_answered is False
        assert snapshot.outcome is None
        assert snapshot.submission_error is None

    @pytest.mark.asyncio
    async def test_scoreboard_before_any_question(self, machine, events):
        transition = await machine.handle_event(events.scoreboard({"p1": 0}))

        assert transition.view is GameView.SCOREBOARD
        assert machine.snapshot().scoreboard.to_dict() == {"p1": 0}
        assert machine.current_question is None

    @pytest.mark.asyncio
    async def test_scoreboard_keeps_question(self, machine, events):
        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.scoreboard({"p1": 1000}))

        assert machine.view is GameView.SCOREBOARD
        assert machine.current_question.id == "q1"

    @pytest.mark.asyncio
    async def test_last_scoreboard_wins(self, machine, events):
        await machine.handle_event(events.scoreboard({"p1": 1000}))
        await machine.handle_event(events.scoreboard({"p2": 2000}))

        assert machine.snapshot().scoreboard.to_dict() == {"p2": 2000}

    @pytest.mark.asyncio
    async def test_game_started_only_before_the_game(self, machine, events):
        first = await machine.handle_event(events.game_started())
        second = await machine.handle_event(events.game_started())

        assert first is not None
        assert first.view is GameView.IDLE
        assert machine.snapshot().game_started is True
        assert second is None

    @pytest.mark.asyncio
    async def test_game_over_keeps_scoreboard_as_received(self, machine, events):
        payload = {"p3": 500, "p1": 3000, "p2": 3000}
        await machine.handle_event(events.question("q1"))

        transition = await machine.handle_event(events.game_over(payload))

        assert transition.view is GameView.FINISHED
        assert list(machine.final_scoreboard) == ["p3", "p1", "p2"]
        assert transition.event.payload == {"p3": 500, "p1": 3000, "p2": 3000}
        assert machine.is_finished

    @pytest.mark.asyncio
    async def test_game_over_without_data(self, machine, events):
        await machine.handle_event(events.game_over(None))

        assert machine.is_finished
        assert len(machine.final_scoreboard) == 0

    @pytest.mark.asyncio
    async def test_events_after_game_over_are_ignored(self, machine, events):
        await machine.handle_event(events.game_over({"p1": 1}))

        assert await machine.handle_event(events.question("q9")) is None
        assert await machine.handle_event(events.scoreboard({"p1": 5})) is None
        assert machine.view is GameView.FINISHED
        assert machine.current_question is None

    @pytest.mark.asyncio
    async def test_unhandled_event_is_ignored(self, machine):
        assert await machine.handle_event(ConnectionLostEvent("gone")) is None
        assert machine.view is GameView.IDLE


class TestRoster:
    """Test new-player handling."""

    @pytest.mark.asyncio
    async def test_host_collects_roster(self, host_machine, events):
        await host_machine.handle_event(events.new_player("Alice"))
        await host_machine.handle_event(events.new_player("Bob"))
        duplicate = await host_machine.handle_event(events.new_player("Alice"))

        assert host_machine.snapshot().roster == ("Alice", "Bob")
        assert duplicate is None

    @pytest.mark.asyncio
    async def test_players_ignore_new_players(self, machine, events):
        assert await machine.handle_event(events.new_player("Alice")) is None
        assert machine.snapshot().roster == ()

    @pytest.mark.asyncio
    async def test_roster_frozen_once_started(self, host_machine, events):
        await host_machine.handle_event(events.game_started())

        assert await host_machine.handle_event(events.new_player("Late")) is None
        assert host_machine.snapshot().roster == ()


class TestListeners:
    """Test transition broadcast."""

    @pytest.mark.asyncio
    async def test_sync_and_async_listeners(self, machine, events):
        sync_listener = MagicMock()
        async_listener = AsyncMock()
        machine.add_listener(sync_listener)
        machine.add_listener(async_listener)

        transition = await machine.handle_event(events.question("q1"))

        sync_listener.assert_called_once_with(transition)
        async_listener.assert_awaited_once_with(transition)

    @pytest.mark.asyncio
    async def test_listener_failure_is_isolated(self, machine, events):
        failing = MagicMock(side_effect=RuntimeError("render failed"))
        healthy = MagicMock()
        machine.add_listener(failing)
        machine.add_listener(healthy)

        transition = await machine.handle_event(events.question("q1"))

        assert transition is not None
        assert machine.view is GameView.QUESTION
        healthy.assert_called_once()

    @pytest.mark.asyncio
    async def test_ignored_events_are_not_broadcast(self, machine, events):
        listener = MagicMock()
        machine.add_listener(listener)

        await machine.handle_event(events.new_player("Alice"))

        listener.assert_not_called()


class TestAnswerBookkeeping:

    @pytest.mark.asyncio
    async def test_mark_answered(self, machine, events):
        await machine.handle_event(events.question("q1"))

        machine.mark_answered("q1")

        assert machine.has_answered is True

    @pytest.mark.asyncio
    async def test_stale_outcome_is_discarded(self, machine, events):
        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.question("q2"))

        applied = machine.apply_outcome(AnswerOutcome("q1", "A", True, 1000, 1000))

        assert applied is False
        assert machine.snapshot().outcome is None

    @pytest.mark.asyncio
    async def test_outcome_applies_during_scoreboard_of_same_question(self, machine, events):
        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.scoreboard({"p1": 1000}))

        assert machine.apply_outcome(AnswerOutcome("q1", "A", True, 1000, 1000)) is True

    @pytest.mark.asyncio
    async def test_stale_submission_error_is_dropped(self, machine, events):
        await machine.handle_event(events.question("q2"))

        assert machine.record_submission_error("q1", "timeout") is False
        assert machine.snapshot().submission_error is None

    def test_outcome_rejects_negative_points(self):
        with pytest.raises(ValueError):
            AnswerOutcome("q1", "A", True, points_earned=-1)
