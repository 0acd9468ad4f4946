# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Room Channel (Infrastructure Layer).

Owns the single live connection of one room membership. Inbound frames are
parsed into envelopes and handed to the registered handlers strictly in
arrival order; the channel never reorders, deduplicates, buffers or
reconnects. A dropped connection ends the session.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import aiohttp

from spotiquiz.src.common.room_routes import RoomRoutes
from spotiquiz.src.domain.models.game_events import ChannelEnvelope
from spotiquiz.src.monitoring.core.exceptions import (
    ChannelClosedError,
    ChannelStateError,
    MalformedEventError,
)

logger = logging.getLogger(__name__)

EnvelopeHandler = Callable[[ChannelEnvelope], Union[None, Awaitable[None]]]


class RoomChannel:
    """
    Live duplex connection to one room for one identity.

    Features:
    - One connection per open(), closed deterministically by close()
    - Envelope parsing with malformed frames logged and dropped
    - Ordered, sequential delivery to handlers
    - Connection failures delivered to handlers instead of raised

    Example usage:
        channel = RoomChannel("ws://localhost:8080", "ABC123", "guest:42")
        channel.register_handler(on_envelope)
        if await channel.open():
            ...
        await channel.close()
    """

    def __init__(
        self,
        ws_url: str,
        room_code: str,
        identity: str,
        connect_timeout: float = 10.0,
        heartbeat: Optional[float] = 30.0,
    ):
        """
        Initialize the channel.

        Args:
            ws_url: Base URL of the room service channel endpoint
            room_code: Room to join
            identity: Canonical identity used as the connection key
            connect_timeout: Seconds allowed for the websocket handshake
            heartbeat: Ping interval in seconds, None to disable
        """
        self.url = ws_url.rstrip("/") + RoomRoutes.channel(room_code, identity)
        self.room_code = room_code
        self.identity = identity
        self._connect_timeout = connect_timeout
        self._heartbeat = heartbeat

        self._handlers: List[EnvelopeHandler] = []
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._opened = False
        self._closing = False
        self._closed = asyncio.Event()

    # MARK: - Handlers

    def register_handler(self, handler: EnvelopeHandler) -> None:
        """
        Register a handler for inbound envelopes.

        Handlers may be plain functions or coroutine functions; they are
        called in registration order for every envelope.
        """
        self._handlers.append(handler)

    async def _deliver(self, envelope: ChannelEnvelope) -> None:
        for handler in self._handlers:
            try:
                result = handler(envelope)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(
                    f"[{self.room_code}/{self.identity}] Error in handler for {envelope.type}: {e}",
                    exc_info=True,
                )

    async def _dispatch_raw(self, raw: str) -> None:
        try:
            envelope = ChannelEnvelope.from_message(json.loads(raw))
        except (ValueError, MalformedEventError) as e:
            logger.warning(f"[{self.room_code}/{self.identity}] Dropping malformed frame: {e}")
            return

        logger.debug(f"[{self.room_code}/{self.identity}] Event received: {envelope.type}")
        await self._deliver(envelope)

    # MARK: - Lifecycle

    async def open(self) -> bool:
        """
        Open the connection and start delivering events.

        Returns:
            True if connected; False if the connection could not be
            established, in which case handlers received a
            connection-error envelope

        Raises:
            ChannelStateError: If this channel was already opened
        """
        if self._opened:
            raise ChannelStateError(
                f"Channel {self.room_code}/{self.identity} already opened; close it and open a new one"
            )
        self._opened = True

        logger.info(f"🔌 Connecting to room {self.room_code} as {self.identity}")
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await asyncio.wait_for(self._connect(), timeout=self._connect_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            reason = str(e) or type(e).__name__
            logger.error(f"❌ Could not connect to room {self.room_code}: {reason}")
            await self._release()
            self._closed.set()
            await self._deliver(ChannelEnvelope.connection_error(reason))
            return False

        self._reader_task = asyncio.ensure_future(self._read_loop())
        logger.info(f"✅ Connected to room {self.room_code}")
        return True

    async def _connect(self) -> aiohttp.ClientWebSocketResponse:
        return await self._session.ws_connect(self.url, heartbeat=self._heartbeat, autoping=True)

    async def _read_loop(self) -> None:
        ws = self._ws
        reason = "connection closed by server"
        try:
            async for message in ws:
                if message.type == aiohttp.WSMsgType.TEXT:
                    await self._dispatch_raw(message.data)
                elif message.type == aiohttp.WSMsgType.BINARY:
                    try:
                        await self._dispatch_raw(message.data.decode("utf-8"))
                    except UnicodeDecodeError:
                        logger.warning(f"[{self.room_code}/{self.identity}] Dropping undecodable binary frame")
                elif message.type == aiohttp.WSMsgType.ERROR:
                    reason = str(ws.exception() or "websocket error")
                    break
        except aiohttp.ClientError as e:
            reason = str(e) or type(e).__name__

        if self._closing:
            return

        logger.warning(f"⚠️ Lost connection to room {self.room_code}: {reason}")
        await self._release()
        self._closed.set()
        await self._deliver(ChannelEnvelope.connection_closed(reason))

    async def send(self, message: Any) -> None:
        """
        Send a JSON message over the channel.

        Args:
            message: JSON-serializable value, usually a {"type", "data"} object

        Raises:
            ChannelClosedError: If the channel is not open
        """
        if self._ws is None or self._ws.closed or self._closing:
            raise ChannelClosedError(f"Channel {self.room_code}/{self.identity} is not open")
        await self._ws.send_str(json.dumps(message))

    async def close(self) -> None:
        """
        Close the connection.

        Idempotent, and safe to call from inside a handler. Closing never
        produces a connection-lost envelope.
        """
        if self._closing:
            return
        self._closing = True

        task = self._reader_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._release()
        self._closed.set()
        logger.info(f"🔌 Channel to room {self.room_code} closed")

    async def _release(self) -> None:
        ws, session = self._ws, self._session
        self._ws, self._session = None, None
        if ws is not None and not ws.closed:
            await ws.close()
        if session is not None and not session.closed:
            await session.close()

    async def wait_closed(self) -> None:
        """Wait until the channel is closed or lost."""
        await self._closed.wait()

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed and not self._closing

    def __repr__(self) -> str:
        return f"RoomChannel(room={self.room_code}, identity={self.identity}, open={self.is_open})"
