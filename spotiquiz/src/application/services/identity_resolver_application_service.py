# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Identity Resolver (Application Layer).

Determines who this participant is and owns every write to the persisted
identity and membership keys.
"""

import logging
from typing import Optional

from spotiquiz.src.common.storage_keys import StorageKeys
from spotiquiz.src.domain.models.identity import GUEST_PREFIX, Identity, IdentityKind
from spotiquiz.src.domain.models.session import SessionContext
from spotiquiz.src.domain.protocols.key_value_store_protocol import KeyValueStoreProtocol
from spotiquiz.src.monitoring.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class IdentityResolver:
    """
    Resolves the participant identity from persisted state.

    Resolution order:
    1. Authenticated account id
    2. Previously minted guest id
    3. A freshly minted guest id, persisted before it is returned

    Resolution performs no network calls and never fails.
    """

    def __init__(self, store: KeyValueStoreProtocol):
        """
        Initialize identity resolver.

        Args:
            store: Persisted client state
        """
        self._store = store

    def resolve(self) -> Identity:
        """
        Resolve the current identity.

        An unreadable or unwritable store degrades to a guest identity that
        is not persisted.

        Returns:
            Authenticated identity if signed in, otherwise a stable guest identity
        """
        try:
            account_id = self._store.get(StorageKeys.SPOTIFY_ID)
            guest_id = self._store.get(StorageKeys.GUEST_ID)
        except StorageError as e:
            logger.warning(f"⚠️ Persisted identity unavailable, using a session guest: {e}")
            return Identity.mint_guest()

        if account_id:
            return Identity.authenticated(account_id)

        if guest_id and guest_id.startswith(GUEST_PREFIX):
            return Identity.guest(guest_id)
        if guest_id:
            logger.warning(f"⚠️ Ignoring persisted guest id without {GUEST_PREFIX!r} prefix: {guest_id!r}")

        identity = Identity.mint_guest()
        try:
            self._store.set(StorageKeys.GUEST_ID, identity.value)
        except StorageError as e:
            logger.warning(f"⚠️ Could not persist guest identity {identity}: {e}")
            return identity
        logger.info(f"✅ Minted guest identity {identity}")
        return identity

    # MARK: - Credentials

    def sign_in(self, account_id: str, access_token: str) -> Identity:
        """Persist an authenticated account and its bearer credential."""
        self._store.set(StorageKeys.SPOTIFY_ID, account_id)
        self._store.set(StorageKeys.ACCESS_TOKEN, access_token)
        logger.info(f"✅ Signed in as {account_id}")
        return Identity.authenticated(account_id)

    def refresh_token(self, access_token: str) -> None:
        self._store.set(StorageKeys.ACCESS_TOKEN, access_token)

    def sign_out(self) -> None:
        """Forget the authenticated account; the guest id is kept."""
        self._store.delete(StorageKeys.SPOTIFY_ID)
        self._store.delete(StorageKeys.ACCESS_TOKEN)
        logger.info("🔌 Signed out")

    def access_token(self) -> Optional[str]:
        return self._store.get(StorageKeys.ACCESS_TOKEN)

    def account_id(self) -> Optional[str]:
        return self._store.get(StorageKeys.SPOTIFY_ID)

    # MARK: - Membership

    def remember_membership(
        self,
        room_code: str,
        is_host: bool,
        display_name: Optional[str] = None,
    ) -> None:
        """Persist the room this participant belongs to."""
        self._store.set(StorageKeys.ROOM_CODE, room_code)
        self._store.set(StorageKeys.IS_HOST, StorageKeys.flag(is_host))
        if display_name:
            self._store.set(StorageKeys.DISPLAY_NAME, display_name)

    def forget_membership(self) -> None:
        self._store.delete(StorageKeys.ROOM_CODE)
        self._store.delete(StorageKeys.IS_HOST)

    def remembered_room(self) -> Optional[str]:
        return self._store.get(StorageKeys.ROOM_CODE)

    def is_host(self) -> bool:
        return StorageKeys.is_set(self._store.get(StorageKeys.IS_HOST))

    def display_name(self) -> Optional[str]:
        return self._store.get(StorageKeys.DISPLAY_NAME)

    # MARK: - Playback device

    def remember_playback_device(self, device_id: str) -> None:
        self._store.set(StorageKeys.DEVICE_ID, device_id)

    def playback_device_id(self) -> Optional[str]:
        return self._store.get(StorageKeys.DEVICE_ID)

    # MARK: - Session

    def session_for(self, room_code: str, identity: Identity, is_host: bool = False) -> SessionContext:
        """
        Build the session context for one room membership.

        Args:
            room_code: Room joined or created
            identity: Membership identity (display name or resolved identity)
            is_host: Whether this participant created the room

        Returns:
            Session context carrying the current bearer credential
        """
        display_name = identity.value if identity.kind is IdentityKind.DISPLAY_NAME else self.display_name()
        return SessionContext(
            room_code=room_code,
            identity=identity,
            is_host=is_host,
            access_token=self.access_token(),
            display_name=display_name,
        )
