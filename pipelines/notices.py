"""
pipelines/notices.py

User-facing notices (the dismissible error/warning modal).

The "service unavailable" notice is shown at most once per browser session;
the flag lives in the mapping handed to NoticeBoard (st.session_state in the
app, a plain dict in tests).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, MutableMapping, Optional

from storage.auth import SessionUnavailableError

logger = logging.getLogger(__name__)

SERVICE_NOTICE_FLAG = "service_notice_shown"

NoticeLevel = Literal["error", "warning", "info"]

_FRIENDLY_AUTH_MESSAGES = {
    "user-not-found": "No account found with this email address. Please check your email or sign up for a new account.",
    "wrong-password": "Incorrect password. Please try again.",
    "email-already-in-use": "An account with this email already exists. Please sign in instead.",
    "weak-password": "Password is too weak. Please choose a stronger password.",
    "invalid-email": "Please enter a valid email address.",
    "unavailable": "Authentication service is currently unavailable. Please check your internet connection and try again.",
}


@dataclass(frozen=True)
class Notice:
    title: str
    message: str
    level: NoticeLevel = "error"
    retry: bool = False


def friendly_auth_message(operation: str, error: Optional[BaseException]) -> str:
    code = getattr(error, "code", None)
    if code in _FRIENDLY_AUTH_MESSAGES:
        return _FRIENDLY_AUTH_MESSAGES[code]
    if isinstance(error, SessionUnavailableError):
        return _FRIENDLY_AUTH_MESSAGES["unavailable"]
    detail = str(error) if error is not None else "Unknown error occurred"
    return f"Failed to {operation}. {detail}"


class NoticeBoard:
    def __init__(self, flags: MutableMapping[str, object]):
        self.flags = flags
        self._pending: list[Notice] = []

    def show(self, notice: Notice) -> None:
        self._pending.append(notice)

    def show_auth_error(self, operation: str, error: Optional[BaseException] = None) -> None:
        logger.error("Error during %s: %s", operation, error)
        self.show(
            Notice(
                title=f"{operation[:1].upper()}{operation[1:]} Failed",
                message=friendly_auth_message(operation, error),
                level="error",
                retry=True,
            )
        )

    def show_service_unavailable(self, service: str, operation: str) -> bool:
        """Queue the unavailable-service warning unless already shown this session."""
        if self.flags.get(SERVICE_NOTICE_FLAG):
            return False
        self.flags[SERVICE_NOTICE_FLAG] = True
        logger.warning("%s unavailable; %s limited", service, operation)
        self.show(
            Notice(
                title=f"{service} Service Unavailable",
                message=(
                    f"The {service} service is currently unavailable. You can continue using the app, "
                    f"but {operation} functionality will be limited. Please check your internet "
                    "connection and try again later."
                ),
                level="warning",
                retry=True,
            )
        )
        return True

    def pending(self) -> list[Notice]:
        return list(self._pending)

    def dismiss(self, notice: Optional[Notice] = None) -> None:
        if notice is None:
            self._pending.clear()
        elif notice in self._pending:
            self._pending.remove(notice)
