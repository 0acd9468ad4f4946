# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Room session controller.

Wires one room membership together: the room channel feeds typed events to
the game state machine, the submission flow answers over the room service
and, for the host, the playback synchronizer follows the transitions. The
controller owns the lifecycle of everything it creates and releases it on
close().
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Union

from spotiquiz.src.application.services.answer_submission_application_service import AnswerSubmissionFlow
from spotiquiz.src.application.services.game_state_machine_application_service import (
    GameStateMachine,
    TransitionListener,
)
from spotiquiz.src.application.services.host_playback_synchronizer_application_service import (
    HostPlaybackSynchronizer,
)
from spotiquiz.src.config.client_config import ClientConfig
from spotiquiz.src.domain.models.game_events import ChannelEnvelope, ConnectionLostEvent, parse_event
from spotiquiz.src.domain.models.game_state import AnswerOutcome, GameSnapshot
from spotiquiz.src.domain.models.scoreboard import Scoreboard
from spotiquiz.src.domain.models.session import SessionContext
from spotiquiz.src.domain.protocols.playback_device_protocol import PlaybackDeviceProtocol
from spotiquiz.src.domain.protocols.room_service_protocol import RoomServiceProtocol
from spotiquiz.src.infrastructure.channel.room_channel import RoomChannel
from spotiquiz.src.infrastructure.http.room_service_client import RoomServiceClient
from spotiquiz.src.monitoring import get_logger
from spotiquiz.src.monitoring.core.exceptions import ChannelConnectionError, MalformedEventError

logger = get_logger(__name__)

ConnectionListener = Callable[[ConnectionLostEvent], Union[None, Awaitable[None]]]


class RoomSessionController:
    """Controller for one live room membership.

    Example usage:
        async with RoomSessionController.create(config, session) as controller:
            controller.add_listener(render)
            final = await controller.wait_until_finished()
    """

    def __init__(
        self,
        session: SessionContext,
        channel: RoomChannel,
        room_service: RoomServiceProtocol,
        playback_device: Optional[PlaybackDeviceProtocol] = None,
    ):
        """Initialize the controller.

        Args:
            session: Membership this controller runs
            channel: Unopened room channel for the session identity
            room_service: Request/response room service
            playback_device: Host playback device; ignored for players
        """
        self.session = session
        self._channel = channel
        self._room_service = room_service
        self._state = GameStateMachine(is_host=session.is_host)
        self._submission = AnswerSubmissionFlow(session, self._state, room_service)

        self._synchronizer: Optional[HostPlaybackSynchronizer] = None
        if session.is_host and playback_device is not None:
            self._synchronizer = HostPlaybackSynchronizer(playback_device)
            self._state.add_listener(self._synchronizer.on_transition)

        self._owned: List[Any] = []
        self._connection_lost: Optional[ConnectionLostEvent] = None
        self._connection_listeners: List[ConnectionListener] = []
        self._finished = asyncio.Event()
        self._closed = False

        self._channel.register_handler(self._on_envelope)

    @classmethod
    def create(
        cls,
        config: ClientConfig,
        session: SessionContext,
        playback_device: Optional[PlaybackDeviceProtocol] = None,
    ) -> "RoomSessionController":
        """Build a controller with its own channel and room service client.

        The room service client is closed with the controller.
        """
        channel = RoomChannel(
            config.ws_url,
            session.room_code,
            session.player_id,
            connect_timeout=config.connect_timeout,
        )
        room_service = RoomServiceClient(
            config.api_url,
            token_provider=lambda: session.access_token,
            timeout=config.request_timeout,
        )
        controller = cls(session, channel, room_service, playback_device)
        controller._owned.append(room_service)
        return controller

    # MARK: - Lifecycle

    async def start(self) -> bool:
        """Open the room channel.

        Returns:
            True if connected; on failure connection listeners have been
            told and wait_until_finished() raises
        """
        logger.info(f"🎮 Starting session in room {self.session.room_code} as {self.session.player_id}")
        return await self._channel.open()

    async def close(self) -> None:
        """Close the channel, let playback commands finish and release clients."""
        if self._closed:
            return
        self._closed = True

        await self._channel.close()
        if self._synchronizer is not None:
            await self._synchronizer.drain()
        for resource in self._owned:
            try:
                await resource.close()
            except Exception as e:
                logger.warning(f"⚠️ Error closing {type(resource).__name__}: {e}")
        self._finished.set()
        logger.info(f"✅ Session in room {self.session.room_code} closed")

    async def __aenter__(self) -> "RoomSessionController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # MARK: - Events

    async def _on_envelope(self, envelope: ChannelEnvelope) -> None:
        try:
            event = parse_event(envelope)
        except MalformedEventError as e:
            logger.warning(f"⚠️ Dropping malformed {envelope.type} event: {e}")
            return

        if event is None:
            logger.debug(f"Ignoring unknown event type {envelope.type!r}")
            return

        if isinstance(event, ConnectionLostEvent):
            await self._on_connection_lost(event)
            return

        await self._state.handle_event(event)
        if self._state.is_finished:
            self._finished.set()

    async def _on_connection_lost(self, event: ConnectionLostEvent) -> None:
        if self._connection_lost is not None or self._closed:
            return
        self._connection_lost = event
        if event.during_connect:
            logger.error(f"❌ Could not connect to room {self.session.room_code}: {event.reason}")
        else:
            logger.error(f"❌ Connection to room {self.session.room_code} lost: {event.reason}")

        for listener in self._connection_listeners:
            try:
                result = listener(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"❌ Connection listener failed: {e}", exc_info=True)
        self._finished.set()

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a state transition listener."""
        self._state.add_listener(listener)

    def add_connection_listener(self, listener: ConnectionListener) -> None:
        """Register a listener told once when the connection fails or drops."""
        self._connection_listeners.append(listener)

    # MARK: - Actions

    async def submit_answer(self, selected: str, question_id: Optional[str] = None) -> Optional[AnswerOutcome]:
        """Submit an answer to the current question (see AnswerSubmissionFlow.submit)."""
        return await self._submission.submit(selected, question_id)

    async def send(self, message: Any) -> None:
        await self._channel.send(message)

    async def fetch_scoreboard(self) -> Scoreboard:
        return await self._room_service.get_scoreboard(self.session.room_code)

    async def wait_until_finished(self) -> Scoreboard:
        """Wait for game over.

        Returns:
            Final scoreboard as received

        Raises:
            ChannelConnectionError: If the connection failed or dropped first
                or the session was closed before the game ended
        """
        await self._finished.wait()
        final = self._state.final_scoreboard
        if final is not None:
            return final
        if self._connection_lost is not None:
            raise ChannelConnectionError(f"Room connection lost: {self._connection_lost.reason}")
        raise ChannelConnectionError("Session closed before the game ended")

    # MARK: - State

    def snapshot(self) -> GameSnapshot:
        return self._state.snapshot()

    @property
    def connection_lost(self) -> bool:
        return self._connection_lost is not None

    @property
    def state_machine(self) -> GameStateMachine:
        return self._state
