# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Host Playback Synchronizer (Application Layer).

Bridges state transitions to playback commands on the host's device.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Set

from spotiquiz.src.domain.models.game_events import QuestionEvent, ScoreboardEvent
from spotiquiz.src.domain.models.game_state import StateTransition
from spotiquiz.src.domain.protocols.playback_device_protocol import PlaybackDeviceProtocol
from spotiquiz.src.services.decorators import best_effort

logger = logging.getLogger(__name__)


class HostPlaybackSynchronizer:
    """
    Issues one playback command per relevant transition.

    Responsibilities:
    - Start the question's track at its offset when a question is shown
    - Pause when a scoreboard is shown
    - Skip commands while the device is unregistered or not ready

    Commands run as background tasks so the state machine is never blocked.
    Each task waits for the one before it, so the device sees commands in
    transition order. Failures are logged and absorbed.
    """

    def __init__(self, device: PlaybackDeviceProtocol):
        """
        Initialize synchronizer.

        Args:
            device: Host playback device
        """
        self._device = device
        self._pending: Set[asyncio.Task] = set()
        self._last: Optional[asyncio.Task] = None

    def on_transition(self, transition: StateTransition) -> None:
        """State machine listener."""
        event = transition.event
        if isinstance(event, QuestionEvent):
            if self._device_available("play"):
                question = event.question
                self._schedule(self._play(question.track_uri, question.playback_offset_ms))
        elif isinstance(event, ScoreboardEvent):
            if self._device_available("pause"):
                self._schedule(self._pause())

    def _device_available(self, action: str) -> bool:
        if not self._device.device_id or not self._device.is_ready():
            logger.debug(f"Skipping {action}: playback device not ready")
            return False
        return True

    def _schedule(self, command: Awaitable[bool]) -> None:
        task = asyncio.ensure_future(self._after(self._last, command))
        self._last = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _after(previous: Optional[asyncio.Task], command: Awaitable[bool]) -> bool:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        return await command

    @best_effort("start playback")
    async def _play(self, track_uri: str, position_ms: int) -> bool:
        return await self._device.play(track_uri, position_ms)

    @best_effort("pause playback")
    async def _pause(self) -> bool:
        return await self._device.pause()

    async def drain(self) -> None:
        """Wait for every scheduled command to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)
