# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Room Service Client (Infrastructure Layer).

Request/response calls to the room service over HTTP. The bearer credential
is attached when the participant is signed in; HTTP failures are mapped onto
the client exception hierarchy.
"""

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from spotiquiz.src.common.room_routes import RoomRoutes
from spotiquiz.src.domain.models.scoreboard import Scoreboard
from spotiquiz.src.domain.protocols.room_service_protocol import (
    AnswerResult,
    RoomServiceProtocol,
    StartGameResult,
)
from spotiquiz.src.monitoring.core.exceptions import (
    AuthorizationError,
    DuplicateParticipantError,
    MalformedEventError,
    NetworkError,
    RoomNotFoundError,
    RoomRequestError,
    RoomServiceError,
    RoomServiceUnavailableError,
)
from spotiquiz.src.services.decorators import with_request_logging

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]

_STATUS_ERRORS = {
    400: RoomRequestError,
    401: AuthorizationError,
    403: AuthorizationError,
    404: RoomNotFoundError,
    409: DuplicateParticipantError,
}


def _error_for_response(response: httpx.Response) -> RoomServiceError:
    """Map a failed response onto the exception hierarchy."""
    message = response.text.strip() or response.reason_phrase
    error_cls = _STATUS_ERRORS.get(response.status_code)
    if error_cls is None:
        error_cls = RoomServiceUnavailableError if response.status_code >= 500 else RoomServiceError
    return error_cls(message, status_code=response.status_code)


class RoomServiceClient(RoomServiceProtocol):
    """
    HTTP client for the room service.

    Example usage:
        async with RoomServiceClient("http://localhost:8080", token_provider) as rooms:
            code = await rooms.create_room("spotify-user-1")
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Room service base URL
            token_provider: Returns the current bearer credential, or None
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "RoomServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # MARK: - Transport

    def _headers(self) -> Dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise _error_for_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some endpoints answer with a bare string
            return response.text.strip()

    # MARK: - Rooms

    @with_request_logging("create_room")
    async def create_room(self, host_id: str) -> str:
        """
        Create a room hosted by host_id.

        Returns:
            New room code
        """
        body = await self._request("POST", RoomRoutes.CREATE_ROOM, {"hostId": host_id})
        # The service has answered with both spellings
        code = (body.get("roomCode") or body.get("RoomCode")) if isinstance(body, dict) else None
        if not code:
            raise RoomServiceError(f"create-room response carries no room code: {body!r}")
        return RoomRoutes.normalize_room_code(code)

    @with_request_logging("join_room")
    async def join_room(self, room_code: str, player_id: str) -> str:
        """
        Join a room.

        Returns:
            Room code confirmed by the service

        Raises:
            RoomNotFoundError: Unknown room
            DuplicateParticipantError: Name already taken
            RoomRequestError: Room not joinable or bad input
        """
        body = await self._request(
            "POST",
            RoomRoutes.JOIN_ROOM,
            {"roomCode": room_code, "playerId": player_id},
        )
        code = body.get("roomCode") if isinstance(body, dict) else None
        return RoomRoutes.normalize_room_code(code or room_code)

    @with_request_logging("start_game")
    async def start_game(
        self,
        room_code: str,
        host_id: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> StartGameResult:
        """
        Start the game (host only).

        Args:
            room_code: Room to start
            host_id: Host identity, checked by the service
            options: Optional game-mode/content parameters merged into the request
        """
        payload: Dict[str, Any] = dict(options or {})
        payload.update({"roomCode": room_code, "hostId": host_id})
        body = await self._request("POST", RoomRoutes.START_GAME, payload)
        if not isinstance(body, dict):
            return StartGameResult(status=str(body or "started"))
        return StartGameResult(
            status=str(body.get("status", "started")),
            questions_count=body.get("questionsCount"),
        )

    @with_request_logging("submit_answer")
    async def submit_answer(
        self,
        room_code: str,
        question_id: str,
        selected: str,
        player_id: str,
    ) -> AnswerResult:
        """
        Submit one answer.

        Returns:
            Verdict with the participant's updated score

        Raises:
            MalformedEventError: If the response is not a verdict object
        """
        body = await self._request(
            "POST",
            RoomRoutes.SUBMIT_ANSWER,
            {
                "roomCode": room_code,
                "questionId": question_id,
                "selected": selected,
                "playerId": player_id,
            },
        )
        if not isinstance(body, dict) or "correct" not in body:
            raise MalformedEventError(f"submit-answer response is not a verdict: {body!r}")
        return AnswerResult(
            correct=bool(body["correct"]),
            score=int(body.get("score") or 0),
            earned=int(body.get("earned") or 0),
        )

    @with_request_logging("get_room")
    async def get_room(self, room_code: str) -> Dict[str, Any]:
        body = await self._request("GET", RoomRoutes.room(room_code))
        if not isinstance(body, dict):
            raise MalformedEventError(f"room response is not an object: {body!r}")
        return body

    @with_request_logging("get_scoreboard")
    async def get_scoreboard(self, room_code: str) -> Scoreboard:
        body = await self._request("GET", RoomRoutes.scoreboard(room_code))
        data = body.get("scoreboard") if isinstance(body, dict) else None
        return Scoreboard.from_payload(data)

    # MARK: - Auth

    @with_request_logging("validate_token")
    async def validate_token(self, client_id: str, token: str) -> str:
        """
        Validate (and refresh if needed) a bearer credential.

        Returns:
            Token to use from now on
        """
        body = await self._request(
            "POST",
            RoomRoutes.VALIDATE_TOKEN,
            {"clientId": client_id, "token": token},
        )
        if isinstance(body, dict):
            refreshed = body.get("access_token")
        else:
            refreshed = body
        if not refreshed or not isinstance(refreshed, str):
            raise AuthorizationError("validate-token response carries no token")
        return refreshed
