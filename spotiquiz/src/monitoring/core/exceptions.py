# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Exception hierarchy for the SpotiQuiz room client.

Every error raised by the client derives from SpotiQuizError so callers can
catch the whole family at the presentation boundary. Errors that break shared
game correctness (connection loss, submission failure) are surfaced to the
user; cosmetic ones (playback commands, malformed events) are only logged.
"""

from typing import Dict, List, Optional, Type


class SpotiQuizError(Exception):
    """Base class for all SpotiQuiz client errors."""


# MARK: - Channel

class ChannelError(SpotiQuizError):
    """Live room channel errors."""


class ChannelConnectionError(ChannelError):
    """The channel could not be established or was dropped."""


class ChannelClosedError(ChannelError):
    """Operation attempted on a channel that is closed."""


class ChannelStateError(ChannelError):
    """Channel used out of its open/close lifecycle."""


# MARK: - Validation

class ValidationError(SpotiQuizError):
    """Input or payload failed validation."""


class MalformedEventError(ValidationError):
    """An inbound event payload does not have the expected shape."""


class InvalidRoomCodeError(ValidationError):
    """Room code is not a fixed-length alphanumeric string."""


# MARK: - Room service

class RoomServiceError(SpotiQuizError):
    """The room service rejected a request."""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RoomRequestError(RoomServiceError):
    """Request was invalid (HTTP 400)."""


class RoomNotFoundError(RoomServiceError):
    """Room or question does not exist (HTTP 404)."""


class DuplicateParticipantError(RoomServiceError):
    """Participant name already taken in the room (HTTP 409)."""


class AuthorizationError(RoomServiceError):
    """Missing, invalid or insufficient credentials (HTTP 401/403)."""


class RoomServiceUnavailableError(RoomServiceError):
    """Room service failed internally (HTTP 5xx)."""


class NetworkError(SpotiQuizError):
    """Request could not reach the remote service."""


# MARK: - Submission

class SubmissionError(SpotiQuizError):
    """Answer submission failed; the question stays locked."""

    def __init__(self, message: str = "", question_id: Optional[str] = None):
        super().__init__(message)
        self.question_id = question_id


# MARK: - Playback

class PlaybackError(SpotiQuizError):
    """External playback device errors."""


class PlaybackCommandError(PlaybackError):
    """A play/pause command was rejected by the playback service."""


class DeviceNotReadyError(PlaybackError):
    """No playback device is registered or it is not ready."""


# MARK: - Storage / configuration

class StorageError(SpotiQuizError):
    """Persisted client state could not be read or written."""


class ConfigurationError(SpotiQuizError):
    """Client configuration is invalid."""


# MARK: - Utilities

_CATEGORY_ROOTS: List[Type[SpotiQuizError]] = [
    ChannelError,
    ValidationError,
    RoomServiceError,
    NetworkError,
    SubmissionError,
    PlaybackError,
    StorageError,
    ConfigurationError,
]

_CRITICAL_ERRORS = (
    ChannelConnectionError,
    SubmissionError,
    ConfigurationError,
)


def get_exception_hierarchy() -> Dict[str, List[str]]:
    """
    Describe the exception tree by category.

    Returns:
        Mapping of category class name to the names of its subclasses
    """
    hierarchy = {}
    for root in _CATEGORY_ROOTS:
        hierarchy[root.__name__] = sorted(cls.__name__ for cls in root.__subclasses__())
    return hierarchy


def is_critical_error(error: BaseException) -> bool:
    """
    Check whether an error affects shared game correctness.

    Critical errors must be shown to the user; everything else is only logged.
    """
    return isinstance(error, _CRITICAL_ERRORS)


def get_error_category(error: BaseException) -> str:
    """
    Get a short category name for an error.

    Args:
        error: Any exception

    Returns:
        Category name such as "channel" or "playback", "unknown" for foreign errors
    """
    for root in _CATEGORY_ROOTS:
        if isinstance(error, root):
            return root.__name__.replace("Error", "").lower()
    return "unknown"
