# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Room Service Protocol (Domain Layer).

Request/response operations the application layer needs from the room
service. The live channel is a separate collaborator.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from spotiquiz.src.domain.models.scoreboard import Scoreboard


@dataclass(frozen=True)
class AnswerResult:
    """Room service verdict on one answer."""
    correct: bool
    score: int
    earned: int = 0


@dataclass(frozen=True)
class StartGameResult:
    status: str
    questions_count: Optional[int] = None


class RoomServiceProtocol(Protocol):
    """Protocol for the room service request/response API."""

    async def create_room(self, host_id: str) -> str:
        """Create a room and return its code."""
        ...

    async def join_room(self, room_code: str, player_id: str) -> str:
        """Join a room and return the confirmed room code."""
        ...

    async def start_game(
        self,
        room_code: str,
        host_id: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> StartGameResult:
        """Start the game in a room (host only)."""
        ...

    async def submit_answer(
        self,
        room_code: str,
        question_id: str,
        selected: str,
        player_id: str,
    ) -> AnswerResult:
        """Submit one answer."""
        ...

    async def get_room(self, room_code: str) -> Dict[str, Any]:
        """Fetch the room document."""
        ...

    async def get_scoreboard(self, room_code: str) -> Scoreboard:
        """Fetch the current scoreboard."""
        ...

    async def validate_token(self, client_id: str, token: str) -> str:
        """Validate a bearer credential and return the (possibly refreshed) token."""
        ...
