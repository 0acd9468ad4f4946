# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Tests for RoomEntryService."""

from unittest.mock import AsyncMock

import pytest

from spotiquiz.src.application.services.identity_resolver_application_service import IdentityResolver
from spotiquiz.src.application.services.room_entry_application_service import RoomEntryService
from spotiquiz.src.common.storage_keys import StorageKeys
from spotiquiz.src.domain.models.identity import Identity, IdentityKind
from spotiquiz.src.domain.models.session import SessionContext
from spotiquiz.src.domain.protocols.room_service_protocol import StartGameResult
from spotiquiz.src.infrastructure.storage.json_file_store import MemoryStore
from spotiquiz.src.monitoring.core.exceptions import (
    AuthorizationError,
    DuplicateParticipantError,
    InvalidRoomCodeError,
    NetworkError,
    RoomNotFoundError,
)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def resolver(store):
    return IdentityResolver(store)


@pytest.fixture
def room_service():
    service = AsyncMock()
    service.create_room.return_value = "ABC123"
    service.join_room.side_effect = lambda code, player_id: code
    service.start_game.return_value = StartGameResult(status="started", questions_count=10)
    service.validate_token.return_value = "tok"
    return service


@pytest.fixture
def entry(resolver, room_service):
    return RoomEntryService(resolver, room_service)


class TestValidateCredentials:

    @pytest.mark.asyncio
    async def test_without_credentials(self, entry, room_service):
        assert await entry.validate_credentials() is False
        room_service.validate_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_token(self, entry, resolver, room_service):
        resolver.sign_in("spotify-user", "tok")

        assert await entry.validate_credentials() is True
        room_service.validate_token.assert_awaited_once_with("spotify-user", "tok")

    @pytest.mark.asyncio
    async def test_refreshed_token_is_stored(self, entry, resolver, room_service):
        resolver.sign_in("spotify-user", "old")
        room_service.validate_token.return_value = "new"

        assert await entry.validate_credentials() is True
        assert resolver.access_token() == "new"

    @pytest.mark.asyncio
    async def test_failure_signs_out(self, entry, resolver, store, room_service):
        resolver.sign_in("spotify-user", "tok")
        room_service.validate_token.side_effect = AuthorizationError("expired", status_code=401)

        assert await entry.validate_credentials() is False
        assert store.get(StorageKeys.SPOTIFY_ID) is None
        assert store.get(StorageKeys.ACCESS_TOKEN) is None
        assert resolver.resolve().kind is IdentityKind.GUEST


class TestCreateRoom:

    @pytest.mark.asyncio
    async def test_requires_signed_in_account(self, entry, room_service):
        with pytest.raises(AuthorizationError):
            await entry.create_room()
        room_service.create_room.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creates_host_session(self, entry, resolver, store, room_service):
        resolver.sign_in("spotify-user", "tok")

        session = await entry.create_room()

        room_service.create_room.assert_awaited_once_with("spotify-user")
        assert session.room_code == "ABC123"
        assert session.is_host is True
        assert session.identity == Identity.authenticated("spotify-user")
        assert store.get(StorageKeys.ROOM_CODE) == "ABC123"
        assert store.get(StorageKeys.IS_HOST) == "true"


class TestJoinRoom:

    @pytest.mark.asyncio
    async def test_join_with_display_name(self, entry, store, room_service):
        session = await entry.join_room("abc123", display_name="Alice")

        room_service.join_room.assert_awaited_once_with("ABC123", "Alice")
        assert session.player_id == "Alice"
        assert session.is_host is False
        assert store.get(StorageKeys.DISPLAY_NAME) == "Alice"
        assert store.get(StorageKeys.IS_HOST) == "false"

    @pytest.mark.asyncio
    async def test_join_with_resolved_identity(self, entry, resolver, room_service):
        session = await entry.join_room("ABC123")

        assert session.identity == resolver.resolve()
        room_service.join_room.assert_awaited_once_with("ABC123", session.player_id)

    @pytest.mark.asyncio
    async def test_invalid_code_is_rejected_locally(self, entry, room_service):
        with pytest.raises(InvalidRoomCodeError):
            await entry.join_room("nope")
        room_service.join_room.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        RoomNotFoundError("no room", status_code=404),
        DuplicateParticipantError("taken", status_code=409),
        NetworkError("down"),
    ])
    async def test_failure_forgets_membership(self, entry, resolver, store, room_service, error):
        resolver.remember_membership("OLD999", is_host=True)
        room_service.join_room.side_effect = error

        with pytest.raises(type(error)):
            await entry.join_room("ABC123", display_name="Alice")

        assert store.get(StorageKeys.ROOM_CODE) is None
        assert store.get(StorageKeys.IS_HOST) is None


class TestStartGame:

    @pytest.mark.asyncio
    async def test_host_starts_game(self, entry, room_service):
        session = SessionContext("ABC123", Identity.authenticated("spotify-user"), is_host=True)

        result = await entry.start_game(session, {"mode": "playlist"})

        assert result.questions_count == 10
        room_service.start_game.assert_awaited_once_with("ABC123", "spotify-user", {"mode": "playlist"})

    @pytest.mark.asyncio
    async def test_player_cannot_start(self, entry, room_service):
        session = SessionContext("ABC123", Identity.display_name("Alice"))

        with pytest.raises(AuthorizationError):
            await entry.start_game(session)
        room_service.start_game.assert_not_awaited()
