# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Persisted State Keys

Centralized key names for the persisted client state so every reader and the
single writer agree on them. Names match what the web front end stores, which
keeps a shared state file readable by both.
"""


class StorageKeys:
    """
    Persisted client state key constants.

    Usage:
        token = store.get(StorageKeys.ACCESS_TOKEN)
        store.set(StorageKeys.IS_HOST, StorageKeys.flag(True))
    """

    SPOTIFY_ID = "spotify_id"
    ACCESS_TOKEN = "access_token"
    GUEST_ID = "guest_id"
    DISPLAY_NAME = "name"
    IS_HOST = "isHost"
    ROOM_CODE = "roomCode"
    DEVICE_ID = "device_id"

    @staticmethod
    def flag(value: bool) -> str:
        """
        Encode a boolean flag the way it is persisted.

        Example:
            >>> StorageKeys.flag(True)
            "true"
        """
        return "true" if value else "false"

    @staticmethod
    def is_set(raw: object) -> bool:
        """
        Decode a persisted boolean flag.

        Only the exact string "true" counts as set.
        """
        return raw == "true"
