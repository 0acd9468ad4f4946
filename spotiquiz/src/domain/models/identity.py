# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Participant Identity (Domain Layer).

An identity is the single string used as the channel connection key, the
answer submission player id and the scoreboard key.
"""

import uuid
from dataclasses import dataclass
from enum import Enum

GUEST_PREFIX = "guest:"
SPOTIFY_PREFIX = "spotify:"


class IdentityKind(Enum):
    """Where an identity came from."""
    AUTHENTICATED = "authenticated"
    GUEST = "guest"
    DISPLAY_NAME = "display_name"


@dataclass(frozen=True)
class Identity:
    """
    Participant identity value.

    Attributes:
        value: Canonical identity string sent over the wire
        kind: Origin of the identity
    """
    value: str
    kind: IdentityKind

    def __post_init__(self):
        """Validate identity value."""
        if not self.value or not self.value.strip():
            raise ValueError("identity value cannot be empty")

    @classmethod
    def authenticated(cls, account_id: str) -> "Identity":
        """Identity of a signed-in account, stored as returned by the auth flow."""
        return cls(account_id, IdentityKind.AUTHENTICATED)

    @classmethod
    def guest(cls, guest_id: str) -> "Identity":
        """Identity of a previously minted anonymous participant."""
        if not guest_id.startswith(GUEST_PREFIX):
            raise ValueError(f"guest identity must start with {GUEST_PREFIX!r}, got {guest_id!r}")
        return cls(guest_id, IdentityKind.GUEST)

    @classmethod
    def mint_guest(cls) -> "Identity":
        """Mint a fresh, globally unique anonymous identity."""
        return cls(f"{GUEST_PREFIX}{uuid.uuid4()}", IdentityKind.GUEST)

    @classmethod
    def display_name(cls, name: str) -> "Identity":
        """Identity chosen as a display name when joining a room."""
        return cls(name.strip(), IdentityKind.DISPLAY_NAME)

    @property
    def is_authenticated(self) -> bool:
        return self.kind is IdentityKind.AUTHENTICATED

    def __str__(self) -> str:
        return self.value
