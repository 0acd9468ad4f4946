# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Playback Device Protocol (Domain Layer).

Defines the interface the host playback synchronizer needs from an external
audio playback device. This allows the synchronizer to remain independent of
the concrete playback service.
"""

from typing import Optional, Protocol


class PlaybackDeviceProtocol(Protocol):
    """
    Protocol for an externally controlled playback device.

    Readiness arrives asynchronously from the device's own lifecycle, so
    callers must check is_ready() before every command.
    """

    @property
    def device_id(self) -> Optional[str]:
        """Registered device identifier, None until registered."""
        ...

    def is_ready(self) -> bool:
        """
        Check whether the device is registered and reports ready.

        Returns:
            True if commands can be issued, False otherwise
        """
        ...

    async def play(self, track_uri: str, position_ms: int = 0) -> bool:
        """
        Start playing a track at an offset.

        Args:
            track_uri: Playable track URI
            position_ms: Start offset in milliseconds

        Returns:
            True if the command was accepted

        Raises:
            PlaybackError: If the device rejects the command
        """
        ...

    async def pause(self) -> bool:
        """
        Pause playback.

        Returns:
            True if the command was accepted

        Raises:
            PlaybackError: If the device rejects the command
        """
        ...
