# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Room Entry Service (Application Layer).

Create, join and start flows that precede a live room session, plus bearer
credential validation. Produces the SessionContext the session runs with.
"""

import logging
from typing import Any, Dict, Optional

from spotiquiz.src.application.services.identity_resolver_application_service import IdentityResolver
from spotiquiz.src.common.room_routes import RoomRoutes
from spotiquiz.src.domain.models.identity import Identity
from spotiquiz.src.domain.models.session import SessionContext
from spotiquiz.src.domain.protocols.room_service_protocol import RoomServiceProtocol, StartGameResult
from spotiquiz.src.monitoring.core.exceptions import AuthorizationError, NetworkError, RoomServiceError

logger = logging.getLogger(__name__)


class RoomEntryService:
    """
    Room entry flows.

    Example usage:
        entry = RoomEntryService(resolver, rooms)
        session = await entry.join_room("abc123", display_name="Alice")
    """

    def __init__(self, resolver: IdentityResolver, room_service: RoomServiceProtocol):
        self._resolver = resolver
        self._room_service = room_service

    async def validate_credentials(self) -> bool:
        """
        Validate the persisted bearer credential, refreshing it if the
        service hands back a new one.

        On any failure the account is signed out and the participant
        continues as a guest.

        Returns:
            True if an authenticated session is available
        """
        account_id = self._resolver.account_id()
        token = self._resolver.access_token()
        if not account_id or not token:
            return False

        try:
            refreshed = await self._room_service.validate_token(account_id, token)
        except (RoomServiceError, NetworkError) as e:
            logger.warning(f"⚠️ Credential validation failed, signing out: {e}")
            self._resolver.sign_out()
            return False

        if refreshed != token:
            self._resolver.refresh_token(refreshed)
            logger.info("🔑 Access token refreshed")
        return True

    async def create_room(self) -> SessionContext:
        """
        Create a room hosted by the signed-in account.

        Returns:
            Host session for the new room

        Raises:
            AuthorizationError: If no authenticated identity is available
            RoomServiceError: If the room service refuses
        """
        identity = self._resolver.resolve()
        if not identity.is_authenticated:
            raise AuthorizationError("Creating a room requires a signed-in account")

        room_code = await self._room_service.create_room(identity.value)
        self._resolver.remember_membership(room_code, is_host=True)
        logger.info(f"✅ Room {room_code} created")
        return self._resolver.session_for(room_code, identity, is_host=True)

    async def join_room(self, room_code: str, display_name: Optional[str] = None) -> SessionContext:
        """
        Join an existing room.

        The display name, when given, is the membership identity; otherwise
        the resolved identity is used.

        Args:
            room_code: Code typed by the participant
            display_name: Optional name to join under

        Returns:
            Player session for the room

        Raises:
            InvalidRoomCodeError: If the code is not a valid room code
            RoomNotFoundError: Unknown room
            DuplicateParticipantError: Name already taken in this room
            RoomServiceError: Any other refusal
        """
        code = RoomRoutes.normalize_room_code(room_code)
        if display_name and display_name.strip():
            identity = Identity.display_name(display_name)
        else:
            identity = self._resolver.resolve()

        try:
            confirmed = await self._room_service.join_room(code, identity.value)
        except (RoomServiceError, NetworkError):
            self._resolver.forget_membership()
            raise

        self._resolver.remember_membership(confirmed, is_host=False, display_name=display_name)
        logger.info(f"✅ Joined room {confirmed} as {identity}")
        return self._resolver.session_for(confirmed, identity, is_host=False)

    async def start_game(
        self,
        session: SessionContext,
        options: Optional[Dict[str, Any]] = None,
    ) -> StartGameResult:
        """
        Start the game in the host's room.

        Args:
            session: Host session
            options: Optional mode parameters forwarded to the room service

        Raises:
            AuthorizationError: If the session is not the host's
        """
        if not session.is_host:
            raise AuthorizationError("Only the host can start the game")
        result = await self._room_service.start_game(session.room_code, session.player_id, options)
        logger.info(f"🎮 Game start requested in {session.room_code}: {result.status}")
        return result
