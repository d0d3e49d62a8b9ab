"""
storage/auth.py

Session Store boundary + the local demo identity provider.

Responsibilities
----------------
- Track the currently signed-in identity and notify subscribers on change.
- Password-based registration and sign-in (PBKDF2-HMAC-SHA256).
- Role-tagged profile lookup from the ``profiles`` table.

Password storage
----------------
Passwords are hashed with ``hashlib.pbkdf2_hmac`` (SHA-256, 260 000
iterations, 16-byte random salt) and kept as ``"<hex_salt>:<hex_hash>"`` in
a ``credentials`` table next to ``profiles``:

  profiles     id, email, full_name, role
  credentials  user_id, password_blob
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
from typing import Callable, Optional, Protocol

from pipelines.schemas import SIGNUP_ROLES, Identity, Profile
from storage.records import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[Identity]], None]


class AuthError(ValueError):
    """Credentials or registration rejected by the identity provider."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class SessionUnavailableError(RuntimeError):
    """The identity backend is unreachable or not configured."""


class SessionStore(Protocol):
    def subscribe(self, callback: Listener) -> Callable[[], None]: ...

    def sign_in(self, email: str, password: str) -> Identity: ...

    def create(self, email: str, password: str, full_name: str, role: str) -> Identity: ...

    def get_profile(self, user_id: str) -> Optional[Profile]: ...

    def destroy_session(self) -> None: ...


class ListenerMixin:
    """Subscriber bookkeeping shared by the session store implementations."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.current: Optional[Identity] = None

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        self._listeners.append(callback)
        callback(self.current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, identity: Optional[Identity]) -> None:
        self.current = identity
        for listener in list(self._listeners):
            listener(identity)


def validate_signup(email: str, password: str, role: str) -> None:
    if role not in SIGNUP_ROLES:
        raise AuthError("invalid-role", f"Invalid role '{role}'. Must be 'patient' or 'surgeon'.")
    if "@" not in (email or ""):
        raise AuthError("invalid-email", "Please enter a valid email address.")
    if len(password or "") < 6:
        raise AuthError("weak-password", "Password should be at least 6 characters.")


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

_ITERATIONS = 260_000
_HASH_ALG = "sha256"


def _hash_password(password: str, salt: bytes | None = None) -> tuple[bytes, bytes]:
    if salt is None:
        salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(_HASH_ALG, password.encode("utf-8"), salt, _ITERATIONS)
    return salt, dk


def _verify_password(password: str, blob: str) -> bool:
    """Constant-time check of *password* against a ``salt:hash`` blob."""
    try:
        hex_salt, hex_hash = blob.split(":", 1)
    except ValueError:
        return False
    _, dk = _hash_password(password, bytes.fromhex(hex_salt))
    return hmac.compare_digest(dk.hex(), hex_hash)


# ---------------------------------------------------------------------------
# Local demo provider
# ---------------------------------------------------------------------------

DEMO_ACCOUNTS = (
    ("patient@demo.com", "Demo Patient", "patient"),
    ("surgeon@demo.com", "Dr. Demo Surgeon", "surgeon"),
    ("admin@demo.com", "Demo Admin", "admin"),
)
DEMO_PASSWORD = "demo123"


class LocalSessionStore(ListenerMixin):
    def __init__(self, store: RecordStore, seed_demo: bool = True):
        super().__init__()
        self.store = store
        if seed_demo:
            self.seed_demo_accounts()

    def _register(self, email: str, password: str, full_name: str, role: str) -> Profile:
        email = email.strip().lower()
        if self.store.select("profiles", {"email": email}):
            raise AuthError("email-already-in-use", f"Email '{email}' is already registered.")

        row = self.store.insert(
            "profiles",
            {"email": email, "full_name": full_name.strip(), "role": role},
        )
        salt, dk = _hash_password(password)
        self.store.insert(
            "credentials",
            {"user_id": row["id"], "password_blob": f"{salt.hex()}:{dk.hex()}"},
        )
        logger.info("Registered user '%s' (role=%s, id=%s)", email, role, row["id"])
        return Profile(**row)

    def seed_demo_accounts(self) -> None:
        """
        Add the demo patient / surgeon / admin accounts if missing, plus a
        directory entry for the surgeon and two cases for the patient so the
        dashboards are not empty.
        """
        created: dict[str, Profile] = {}
        for email, name, role in DEMO_ACCOUNTS:
            if not self.store.select("profiles", {"email": email}):
                created[role] = self._register(email, DEMO_PASSWORD, name, role)

        surgeon = created.get("surgeon")
        if surgeon is not None:
            self.store.insert(
                "surgeon_details",
                {
                    "user_id": surgeon.id,
                    "specialty": "Orthopedic Surgery",
                    "hospital_affiliation": "General Hospital (demo)",
                    "credentials": "MD, FRCSC",
                    "bio": "Demo surgeon account. No real patient data.",
                },
            )
            patient = created.get("patient")
            if patient is not None:
                for procedure, when, status in (
                    ("Arthroscopic knee surgery", "2026-11-20", "Scheduled"),
                    ("Rotator cuff repair", "2027-01-15", "Proposed"),
                ):
                    self.store.insert(
                        "surgical_cases",
                        {
                            "patient_id": patient.id,
                            "surgeon_id": surgeon.id,
                            "procedure_name": procedure,
                            "proposed_surgery_date": when,
                            "status": status,
                        },
                    )

    def sign_in(self, email: str, password: str) -> Identity:
        email = (email or "").strip().lower()
        rows = self.store.select("profiles", {"email": email})
        if not rows:
            logger.debug("sign_in: unknown email '%s'", email)
            raise AuthError("user-not-found", "No account found with this email address.")

        user = rows[0]
        creds = self.store.select("credentials", {"user_id": user["id"]})
        if not creds or not _verify_password(password, creds[0]["password_blob"]):
            logger.debug("sign_in: wrong password for '%s'", email)
            raise AuthError("wrong-password", "Incorrect password.")

        identity = Identity(id=user["id"], email=email)
        logger.info("Signed in '%s' (id=%s)", email, user["id"])
        self._emit(identity)
        return identity

    def create(self, email: str, password: str, full_name: str, role: str) -> Identity:
        validate_signup(email, password, role)
        profile = self._register(email, password, full_name, role)
        identity = Identity(id=profile.id, email=profile.email)
        self._emit(identity)
        return identity

    def get_profile(self, user_id: str) -> Optional[Profile]:
        try:
            rows = self.store.select("profiles", {"id": user_id})
        except RecordStoreError as exc:
            raise SessionUnavailableError(str(exc)) from exc
        if not rows:
            logger.info("No profile found for user %s", user_id)
            return None
        return Profile(**rows[0])

    def destroy_session(self) -> None:
        self._emit(None)
