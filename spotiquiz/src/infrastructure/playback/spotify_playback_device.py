# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Spotify Playback Device (Infrastructure Layer).

Drives a registered Spotify Connect device through the Web API player
endpoints. Readiness is reported by the device's own lifecycle through
mark_ready()/mark_not_ready().
"""

import logging
from threading import Lock
from typing import Any, Callable, Dict, Optional

import httpx

from spotiquiz.src.domain.protocols.playback_device_protocol import PlaybackDeviceProtocol
from spotiquiz.src.monitoring.core.exceptions import (
    DeviceNotReadyError,
    NetworkError,
    PlaybackCommandError,
)

logger = logging.getLogger(__name__)

DEFAULT_SPOTIFY_API_URL = "https://api.spotify.com/v1"


class SpotifyPlaybackDevice(PlaybackDeviceProtocol):
    """
    Spotify Web API playback device.

    Example usage:
        device = SpotifyPlaybackDevice(lambda: token)
        device.mark_ready("a1b2c3")
        await device.play("spotify:track:4uLU6hMCjMI75M1A2tKUQC", 30000)
    """

    def __init__(
        self,
        token_provider: Callable[[], Optional[str]],
        api_url: str = DEFAULT_SPOTIFY_API_URL,
        timeout: float = 10.0,
        device_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the device.

        Args:
            token_provider: Returns the current access token
            api_url: Web API base URL
            timeout: Request timeout in seconds
            device_id: Previously registered device id, if any; the device
                is still not ready until mark_ready() is called
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._token_provider = token_provider
        self._device_id = device_id
        self._ready = False
        self._lock = Lock()
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    @property
    def device_id(self) -> Optional[str]:
        return self._device_id

    def mark_ready(self, device_id: str) -> None:
        """Record that the device registered under device_id is ready."""
        with self._lock:
            self._device_id = device_id
            self._ready = True
        logger.info(f"✅ Playback device ready: {device_id}")

    def mark_not_ready(self) -> None:
        """Record that the device went away."""
        with self._lock:
            self._ready = False
        logger.warning(f"⚠️ Playback device {self._device_id} not ready")

    def is_ready(self) -> bool:
        with self._lock:
            return self._ready and bool(self._device_id)

    async def play(self, track_uri: str, position_ms: int = 0) -> bool:
        """
        Start playing track_uri at position_ms on this device.

        Raises:
            DeviceNotReadyError: If the device is not registered and ready
            PlaybackCommandError: If the Web API rejects the command
            NetworkError: If the Web API cannot be reached
        """
        await self._command("play", {"uris": [track_uri], "position_ms": max(0, int(position_ms))})
        logger.info(f"▶️ Playing {track_uri} from {position_ms}ms")
        return True

    async def pause(self) -> bool:
        """
        Pause playback on this device.

        Raises:
            DeviceNotReadyError: If the device is not registered and ready
            PlaybackCommandError: If the Web API rejects the command
            NetworkError: If the Web API cannot be reached
        """
        await self._command("pause")
        logger.info("⏸️ Playback paused")
        return True

    async def _command(self, action: str, body: Optional[Dict[str, Any]] = None) -> None:
        if not self.is_ready():
            raise DeviceNotReadyError(f"Cannot {action}: playback device not ready")

        headers = {}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.put(
                f"/me/player/{action}",
                params={"device_id": self._device_id},
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Playback {action} failed: {e}") from e

        if response.is_error:
            raise PlaybackCommandError(
                f"Playback {action} rejected with {response.status_code}: {response.text.strip()}"
            )

    async def close(self) -> None:
        await self._client.aclose()
