# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Question Model (Domain Layer).

One trivia round: a track to play, the options to choose from and the offset
the host starts playback at.
"""

import math
from dataclasses import dataclass
from typing import Any, Tuple

from spotiquiz.src.monitoring.core.exceptions import MalformedEventError

TRACK_URI_PREFIX = "spotify:track:"


@dataclass(frozen=True)
class Question:
    """
    Current question pushed by the room service.

    Replaced whole by the next question event, never mutated.

    Attributes:
        id: Question identifier, unique within the game
        track_reference: Track id (or URI) to play
        display_name: Track title shown to the host
        options: Ordered answer options, at least two, one equals correct
        correct: The correct option
        playback_offset_ms: Where the host starts playback
    """
    id: str
    track_reference: str
    display_name: str
    options: Tuple[str, ...]
    correct: str
    playback_offset_ms: int = 0

    def __post_init__(self):
        """Validate question invariants."""
        if not self.id:
            raise MalformedEventError("question id cannot be empty")
        if len(self.options) < 2:
            raise MalformedEventError(
                f"question {self.id} needs at least 2 options, got {len(self.options)}"
            )
        if self.correct not in self.options:
            raise MalformedEventError(f"question {self.id} correct answer is not among its options")
        if self.playback_offset_ms < 0:
            raise MalformedEventError(
                f"question {self.id} playback offset must be >= 0, got {self.playback_offset_ms}"
            )

    @property
    def track_uri(self) -> str:
        """Playable URI for the track reference."""
        if self.track_reference.startswith("spotify:"):
            return self.track_reference
        return f"{TRACK_URI_PREFIX}{self.track_reference}"

    @classmethod
    def from_payload(cls, data: Any) -> "Question":
        """
        Build a question from its wire payload.

        Args:
            data: Decoded JSON object with keys id, trackId, trackName,
                options, correct and optionally positionMs

        Returns:
            Question instance

        Raises:
            MalformedEventError: If the payload does not describe a valid question
        """
        if not isinstance(data, dict):
            raise MalformedEventError(f"question payload must be an object, got {type(data).__name__}")

        options = data.get("options")
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise MalformedEventError("question options must be a list of strings")

        offset = data.get("positionMs", 0)
        if offset is None:
            offset = 0
        if isinstance(offset, bool) or not isinstance(offset, (int, float)) or not math.isfinite(offset):
            raise MalformedEventError(f"question positionMs must be a finite number, got {offset!r}")

        try:
            return cls(
                id=str(data["id"]),
                track_reference=str(data.get("trackId") or ""),
                display_name=str(data.get("trackName") or ""),
                options=tuple(options),
                correct=str(data["correct"]),
                playback_offset_ms=int(offset),
            )
        except KeyError as e:
            raise MalformedEventError(f"question payload missing {e.args[0]!r}") from e
