# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Mock Playback Device (Infrastructure Layer).

Mock implementation for testing and development without a Spotify account.
"""

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

from spotiquiz.src.domain.protocols.playback_device_protocol import PlaybackDeviceProtocol
from spotiquiz.src.monitoring.core.exceptions import DeviceNotReadyError, PlaybackCommandError

logger = logging.getLogger(__name__)


class MockPlaybackDevice(PlaybackDeviceProtocol):
    """
    Mock playback device for testing.

    Simulates a playback device, tracking all commands for verification in
    tests. Set fail_commands to make every command raise.
    """

    def __init__(self, device_id: Optional[str] = "mock-device", ready: bool = True):
        """Initialize mock device."""
        self._device_id = device_id
        self._ready = ready
        self._current_track: Optional[str] = None
        self._is_playing = False
        self._lock = Lock()
        self.fail_commands = False

        # Operation tracking for tests
        self._operations: List[Tuple[str, Dict[str, Any]]] = []

    @property
    def device_id(self) -> Optional[str]:
        return self._device_id

    def mark_ready(self, device_id: str) -> None:
        with self._lock:
            self._device_id = device_id
            self._ready = True
        logger.info(f"🧪 Mock playback device ready: {device_id}")

    def mark_not_ready(self) -> None:
        with self._lock:
            self._ready = False

    def is_ready(self) -> bool:
        return self._ready and bool(self._device_id)

    async def play(self, track_uri: str, position_ms: int = 0) -> bool:
        """Simulate starting a track."""
        self._check("play")
        with self._lock:
            self._current_track = track_uri
            self._is_playing = True
            self._operations.append(("play", {"track_uri": track_uri, "position_ms": position_ms}))
        logger.info(f"🧪 Mock playing {track_uri} from {position_ms}ms")
        return True

    async def pause(self) -> bool:
        """Simulate pausing."""
        self._check("pause")
        with self._lock:
            self._is_playing = False
            self._operations.append(("pause", {}))
        logger.info("🧪 Mock playback paused")
        return True

    def _check(self, action: str) -> None:
        if not self.is_ready():
            raise DeviceNotReadyError(f"Cannot {action}: mock device not ready")
        if self.fail_commands:
            raise PlaybackCommandError(f"Mock {action} failure")

    async def close(self) -> None:
        with self._lock:
            self._is_playing = False
            self._operations.append(("close", {}))

    # Test helper methods

    def get_operations(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Get list of all commands performed (for testing)."""
        with self._lock:
            return self._operations.copy()

    def clear_operations(self) -> None:
        """Clear command history (for testing)."""
        with self._lock:
            self._operations.clear()

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def current_track(self) -> Optional[str]:
        return self._current_track
