# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Tests for HostPlaybackSynchronizer."""

import asyncio

import pytest

from spotiquiz.src.application.services.game_state_machine_application_service import GameStateMachine
from spotiquiz.src.application.services.host_playback_synchronizer_application_service import (
    HostPlaybackSynchronizer,
)
from spotiquiz.src.infrastructure.playback.mock_playback_device import MockPlaybackDevice


def wire(device):
    machine = GameStateMachine(is_host=True)
    synchronizer = HostPlaybackSynchronizer(device)
    machine.add_listener(synchronizer.on_transition)
    return machine, synchronizer


class TestPlaybackCommands:

    @pytest.mark.asyncio
    async def test_question_then_scoreboard(self, events):
        device = MockPlaybackDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1", offset=42000))
        await machine.handle_event(events.scoreboard({"p1": 1000}))
        await synchronizer.drain()

        assert device.get_operations() == [
            ("play", {"track_uri": "spotify:track:track-q1", "position_ms": 42000}),
            ("pause", {}),
        ]

    @pytest.mark.asyncio
    async def test_one_play_per_question(self, events):
        device = MockPlaybackDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.question("q2"))
        await synchronizer.drain()

        plays = [op for op in device.get_operations() if op[0] == "play"]
        assert [op[1]["track_uri"] for op in plays] == ["spotify:track:track-q1", "spotify:track:track-q2"]

    @pytest.mark.asyncio
    async def test_other_transitions_issue_nothing(self, events):
        device = MockPlaybackDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.new_player("Alice"))
        await machine.handle_event(events.game_started())
        await machine.handle_event(events.game_over({"Alice": 0}))
        await synchronizer.drain()

        assert device.get_operations() == []


class TestReadiness:

    @pytest.mark.asyncio
    async def test_not_ready_device_is_skipped(self, events):
        device = MockPlaybackDevice(ready=False)
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.scoreboard())

        assert synchronizer.pending_count == 0
        assert device.get_operations() == []

    @pytest.mark.asyncio
    async def test_unregistered_device_is_skipped(self, events):
        device = MockPlaybackDevice(device_id=None)
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))

        assert synchronizer.pending_count == 0

    @pytest.mark.asyncio
    async def test_readiness_checked_per_transition(self, events):
        device = MockPlaybackDevice(ready=False)
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        device.mark_ready("dev-1")
        await machine.handle_event(events.scoreboard())
        await synchronizer.drain()

        assert device.get_operations() == [("pause", {})]


class TestFailureHandling:

    @pytest.mark.asyncio
    async def test_command_failure_is_absorbed(self, events):
        device = MockPlaybackDevice()
        device.fail_commands = True
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await synchronizer.drain()

        assert machine.snapshot().question.id == "q1"
        assert synchronizer.pending_count == 0

    @pytest.mark.asyncio
    async def test_commands_do_not_block_state_machine(self, events):
        release = asyncio.Event()

        class SlowDevice(MockPlaybackDevice):
            async def play(self, track_uri, position_ms=0):
                await release.wait()
                return await super().play(track_uri, position_ms)

        device = SlowDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.question("q2"))

        assert synchronizer.pending_count == 2
        assert device.get_operations() == []

        release.set()
        await synchronizer.drain()
        assert len(device.get_operations()) == 2

    @pytest.mark.asyncio
    async def test_slow_play_is_not_overtaken_by_pause(self, events):
        class SlowPlayDevice(MockPlaybackDevice):
            async def play(self, track_uri, position_ms=0):
                await asyncio.sleep(0.05)
                return await super().play(track_uri, position_ms)

        device = SlowPlayDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.scoreboard({"p1": 1000}))
        await synchronizer.drain()

        assert [op[0] for op in device.get_operations()] == ["play", "pause"]
        assert device.is_playing is False

    @pytest.mark.asyncio
    async def test_failed_command_does_not_stall_the_next(self, events):
        class FailingPlayDevice(MockPlaybackDevice):
            async def play(self, track_uri, position_ms=0):
                raise RuntimeError("device gone")

        device = FailingPlayDevice()
        machine, synchronizer = wire(device)

        await machine.handle_event(events.question("q1"))
        await machine.handle_event(events.scoreboard())
        await synchronizer.drain()

        assert device.get_operations() == [("pause", {})]
