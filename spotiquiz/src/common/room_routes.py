# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Room Service Route Constants

Centralized endpoint paths of the room service to eliminate magic strings in
the HTTP client and the live channel.
"""

import re
from urllib.parse import quote

from spotiquiz.src.monitoring.core.exceptions import InvalidRoomCodeError

ROOM_CODE_LENGTH = 6
_ROOM_CODE_PATTERN = re.compile(r"^[A-Z0-9]{%d}$" % ROOM_CODE_LENGTH)


class RoomRoutes:
    """
    Room service paths.

    Usage:
        url = config.api_url + RoomRoutes.SUBMIT_ANSWER
        ws_url = config.ws_url + RoomRoutes.channel("ABC123", "guest:1234")
    """

    CREATE_ROOM = "/create-room"
    JOIN_ROOM = "/join-room"
    START_GAME = "/start-game"
    SUBMIT_ANSWER = "/submit-answer"
    VALIDATE_TOKEN = "/auth/validate-token"

    @staticmethod
    def room(room_code: str) -> str:
        """
        Path of the room document.

        Example:
            >>> RoomRoutes.room("ABC123")
            "/room/ABC123"
        """
        return f"/room/{room_code}"

    @staticmethod
    def scoreboard(room_code: str) -> str:
        """
        Path of the room scoreboard.

        Example:
            >>> RoomRoutes.scoreboard("ABC123")
            "/room/ABC123/scoreboard"
        """
        return f"/room/{room_code}/scoreboard"

    @staticmethod
    def channel(room_code: str, identity: str) -> str:
        """
        Path of the live channel for one room membership.

        The identity is percent-encoded since guest and display-name
        identities may contain ':' or spaces.

        Example:
            >>> RoomRoutes.channel("ABC123", "guest:42")
            "/ws/ABC123/guest%3A42"
        """
        return f"/ws/{room_code}/{quote(identity, safe='')}"

    @staticmethod
    def normalize_room_code(room_code: str) -> str:
        """
        Validate and normalize a user-typed room code.

        Args:
            room_code: Raw room code

        Returns:
            Upper-cased, stripped room code

        Raises:
            InvalidRoomCodeError: If the code is not 6 alphanumeric characters
        """
        normalized = (room_code or "").strip().upper()
        if not _ROOM_CODE_PATTERN.match(normalized):
            raise InvalidRoomCodeError(
                f"Room code must be {ROOM_CODE_LENGTH} letters or digits, got {room_code!r}"
            )
        return normalized
