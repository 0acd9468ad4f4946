# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Session Context (Domain Layer).

Explicit value object for one room membership, handed to the channel and the
submission flow at construction time instead of being read from global state.
"""

from dataclasses import dataclass
from typing import Optional

from spotiquiz.src.common.room_routes import RoomRoutes
from spotiquiz.src.domain.models.identity import Identity


@dataclass(frozen=True)
class SessionContext:
    """
    One room membership.

    Attributes:
        room_code: Normalized room code
        identity: Canonical identity used for the channel, submissions and
            scoreboard lookups
        is_host: Whether this participant created the room
        access_token: Bearer credential when signed in
        display_name: Name shown for the participant, if any
    """
    room_code: str
    identity: Identity
    is_host: bool = False
    access_token: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "room_code", RoomRoutes.normalize_room_code(self.room_code))

    @property
    def player_id(self) -> str:
        """Identity string as sent on the wire."""
        return self.identity.value
