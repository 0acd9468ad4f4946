# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Game Events (Domain Layer).

Typed events decoded from the room channel envelope
`{"type": ..., "data": ...}`. Channel status changes (connection error,
connection lost) travel the same path as reserved envelope types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from spotiquiz.src.domain.models.question import Question
from spotiquiz.src.domain.models.scoreboard import Scoreboard
from spotiquiz.src.monitoring.core.exceptions import MalformedEventError


class GameEventType(Enum):
    """Envelope type strings."""
    QUESTION = "question"
    SCOREBOARD = "scoreboard"
    GAME_STARTED = "game-started"
    GAME_OVER = "game-over"
    NEW_PLAYER = "new-player"
    # Reserved for channel status, never sent by the room service
    CONNECTION_ERROR = "channel:connection-error"
    CONNECTION_CLOSED = "channel:closed"


@dataclass(frozen=True)
class ChannelEnvelope:
    """Structurally valid inbound message."""
    type: str
    data: Any = None

    @classmethod
    def from_message(cls, message: Any) -> "ChannelEnvelope":
        """
        Validate the envelope structure of a decoded JSON message.

        Raises:
            MalformedEventError: If the message is not an object with a string type
        """
        if not isinstance(message, dict):
            raise MalformedEventError(f"envelope must be an object, got {type(message).__name__}")
        event_type = message.get("type")
        if not isinstance(event_type, str) or not event_type:
            raise MalformedEventError(f"envelope type must be a non-empty string, got {event_type!r}")
        return cls(event_type, message.get("data"))

    @classmethod
    def connection_error(cls, reason: str) -> "ChannelEnvelope":
        return cls(GameEventType.CONNECTION_ERROR.value, {"reason": reason})

    @classmethod
    def connection_closed(cls, reason: str) -> "ChannelEnvelope":
        return cls(GameEventType.CONNECTION_CLOSED.value, {"reason": reason})


@dataclass(frozen=True)
class QuestionEvent:
    question: Question


@dataclass(frozen=True)
class ScoreboardEvent:
    scoreboard: Scoreboard


@dataclass(frozen=True)
class GameStartedEvent:
    pass


@dataclass(frozen=True)
class GameOverEvent:
    """
    End of the game.

    Attributes:
        scoreboard: Final scores, in payload order
        payload: The data exactly as received, for the results view
    """
    scoreboard: Scoreboard
    payload: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class NewPlayerEvent:
    identity: str


@dataclass(frozen=True)
class ConnectionLostEvent:
    """
    The channel could not be opened or has dropped; the session is over.

    Attributes:
        reason: Transport-level description
        during_connect: True when the connection was never established
    """
    reason: str
    during_connect: bool = False


GameEvent = Union[
    QuestionEvent,
    ScoreboardEvent,
    GameStartedEvent,
    GameOverEvent,
    NewPlayerEvent,
    ConnectionLostEvent,
]


def _parse_new_player(data: Any) -> NewPlayerEvent:
    if not isinstance(data, str) or not data:
        raise MalformedEventError(f"new-player payload must be an identity string, got {data!r}")
    return NewPlayerEvent(data)


def _parse_connection_status(during_connect: bool) -> Callable[[Any], ConnectionLostEvent]:
    def parse(data: Any) -> ConnectionLostEvent:
        reason = data.get("reason", "") if isinstance(data, dict) else ""
        return ConnectionLostEvent(str(reason), during_connect=during_connect)
    return parse


_PARSERS: Dict[str, Callable[[Any], GameEvent]] = {
    GameEventType.QUESTION.value: lambda data: QuestionEvent(Question.from_payload(data)),
    GameEventType.SCOREBOARD.value: lambda data: ScoreboardEvent(Scoreboard.from_payload(data)),
    GameEventType.GAME_STARTED.value: lambda data: GameStartedEvent(),
    GameEventType.GAME_OVER.value: lambda data: GameOverEvent(Scoreboard.from_payload(data), payload=data),
    GameEventType.NEW_PLAYER.value: _parse_new_player,
    GameEventType.CONNECTION_ERROR.value: _parse_connection_status(during_connect=True),
    GameEventType.CONNECTION_CLOSED.value: _parse_connection_status(during_connect=False),
}


def parse_event(envelope: ChannelEnvelope) -> Optional[GameEvent]:
    """
    Decode an envelope into a typed game event.

    Args:
        envelope: Structurally valid envelope

    Returns:
        The typed event, or None for event types this client does not know

    Raises:
        MalformedEventError: If a known event type carries an invalid payload
    """
    parser = _PARSERS.get(envelope.type)
    if parser is None:
        return None
    return parser(envelope.data)
