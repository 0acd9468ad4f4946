# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Key-Value Store Protocol (Domain Layer).

Persisted client state is a plain get/set collaborator; its durability is the
implementation's business.
"""

from typing import Optional, Protocol


class KeyValueStoreProtocol(Protocol):
    """Protocol for the persisted client state."""

    def get(self, key: str) -> Optional[str]:
        """Get a value, None when unset."""
        ...

    def set(self, key: str, value: str) -> None:
        """Set a value."""
        ...

    def delete(self, key: str) -> None:
        """Remove a value; removing an unset key is not an error."""
        ...
