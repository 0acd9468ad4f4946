# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Playback Device Factory (Infrastructure Layer).

Factory for creating playback device implementations based on configuration.
"""

import logging
from typing import Callable, Optional, Union

import httpx

from spotiquiz.src.config.client_config import ClientConfig
from spotiquiz.src.infrastructure.playback.mock_playback_device import MockPlaybackDevice
from spotiquiz.src.infrastructure.playback.spotify_playback_device import SpotifyPlaybackDevice

logger = logging.getLogger(__name__)

PlaybackDevice = Union[SpotifyPlaybackDevice, MockPlaybackDevice]


class PlaybackDeviceFactory:
    """
    Factory for creating playback device implementations.

    Selects the implementation from:
    - ClientConfig.use_mock_playback (USE_MOCK_PLAYBACK environment variable)
    - Whether an access token is available for the Web API
    """

    @staticmethod
    def create_device(
        config: ClientConfig,
        token_provider: Callable[[], Optional[str]],
        device_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> PlaybackDevice:
        """
        Create a playback device.

        Args:
            config: Client configuration
            token_provider: Returns the current access token
            device_id: Persisted device id from a previous session
            transport: Optional httpx transport for the Web API device

        Returns:
            Playback device implementation (real or mock)
        """
        if config.use_mock_playback:
            logger.info("🧪 Creating mock playback device (USE_MOCK_PLAYBACK=true)")
            return MockPlaybackDevice(device_id=device_id or "mock-device", ready=True)

        if not token_provider():
            logger.warning("⚠️ No access token, falling back to mock playback device")
            return MockPlaybackDevice(device_id=device_id, ready=False)

        logger.info(f"🔌 Creating Spotify playback device (device_id={device_id or 'unregistered'})")
        return SpotifyPlaybackDevice(
            token_provider,
            api_url=config.spotify_api_url,
            timeout=config.request_timeout,
            device_id=device_id,
            transport=transport,
        )

    @staticmethod
    def create_mock_device(device_id: str = "mock-device") -> MockPlaybackDevice:
        """
        Create mock playback device for testing.

        Returns:
            Mock playback device instance
        """
        logger.info("🧪 Creating mock playback device (explicit)")
        return MockPlaybackDevice(device_id=device_id)
