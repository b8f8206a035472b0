"""
Session Store

Holds the logged-in identity (administrator or vehicle owner) and keeps
it in the `frsc_user` slot so it survives restarts.

There is no authentication backend: the admin check is a single
configured credential pair and vehicle owners only supply a plate
number. Treat this as advisory access control, not a security boundary.
"""

import json
from typing import Optional

from pydantic import ValidationError

from offence_system.database.kv_store import KeyValueStore
from offence_system.models.session import Identity, UserRole


class SessionStore:
    """
    Current-identity holder

    Usage:
        session = SessionStore(store, admin_email, admin_password)
        if session.login_admin(email, password):
            ...
        session.current_user()  # Identity or None
        session.logout()
    """

    def __init__(
        self,
        store: KeyValueStore,
        admin_email: str,
        admin_password: str,
        storage_key: str = "frsc_user",
    ):
        self.store = store
        self.storage_key = storage_key
        self._admin_email = admin_email
        self._admin_password = admin_password

        self._user: Optional[Identity] = self._restore()

        if self._user:
            print(f"[AUTH] Session restored: {self._user.email} ({self._user.role.value})")

    def _restore(self) -> Optional[Identity]:
        raw = self.store.get_item(self.storage_key)
        if not raw:
            return None
        try:
            return Identity.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            print(f"[WARN] Discarding unreadable session slot: {e}")
            self.store.remove_item(self.storage_key)
            return None

    def _persist(self, identity: Identity):
        self.store.set_item(self.storage_key, identity.model_dump_json())
        self._user = identity

    def login_admin(self, email: str, password: str) -> bool:
        """Log in as administrator; only the configured pair succeeds"""
        if email == self._admin_email and password == self._admin_password:
            self._persist(Identity(email=email, role=UserRole.ADMIN))
            print(f"[AUTH] Admin logged in: {email}")
            return True

        print("[AUTH] Invalid admin credentials")
        return False

    def login_user(self, vehicle_number: str) -> bool:
        """
        Log in as vehicle owner

        The (trimmed) vehicle number doubles as the identity key.
        """
        vehicle_number = (vehicle_number or "").strip()
        if not vehicle_number:
            return False

        self._persist(Identity(email=vehicle_number, role=UserRole.USER))
        print(f"[AUTH] Vehicle owner logged in: {vehicle_number}")
        return True

    def logout(self):
        """Clear the persisted identity"""
        if self._user:
            print(f"[AUTH] Logged out: {self._user.email}")
        self._user = None
        self.store.remove_item(self.storage_key)

    def current_user(self) -> Optional[Identity]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None
