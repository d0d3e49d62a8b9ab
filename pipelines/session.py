"""
pipelines/session.py

AppContext: the one object the Streamlit pages receive instead of reaching
for globals. It owns
- the Session Store subscription and the resolved Session
- the Record Store and the volume estimator
- the NoticeBoard (process-wide notices)
- the ProfileRouter (active tab for the current role)

Created once per browser session (kept in st.session_state) and closed on
teardown.
"""

from __future__ import annotations

import logging
from typing import Callable, MutableMapping, Optional

from pydantic import BaseModel

from pipelines.config import Settings
from pipelines.editor import RecordEditor
from pipelines.estimator import VolumeEstimator
from pipelines.notices import NoticeBoard
from pipelines.router import ProfileRouter
from pipelines.schemas import Identity, Profile
from storage.auth import AuthError, LocalSessionStore, SessionStore, SessionUnavailableError
from storage.records import JsonRecordStore, RecordStore
from storage.supabase_rest import SupabaseClient, SupabaseRecordStore, SupabaseSessionStore

logger = logging.getLogger(__name__)


class Session(BaseModel):
    identity: Optional[Identity] = None
    profile: Optional[Profile] = None
    loading: bool = True

    @property
    def role(self) -> Optional[str]:
        # Undefined until the identity resolves to a known profile.
        if self.loading or self.profile is None:
            return None
        return self.profile.role

    @property
    def signed_in(self) -> bool:
        return self.identity is not None and self.profile is not None


class AppContext:
    def __init__(
        self,
        settings: Settings,
        sessions: SessionStore,
        records: RecordStore,
        estimator: VolumeEstimator,
        notices: NoticeBoard,
        demo_mode: bool = False,
    ):
        self.settings = settings
        self.sessions = sessions
        self.records = records
        self.estimator = estimator
        self.notices = notices
        self.demo_mode = demo_mode
        self.router = ProfileRouter()
        self.session = Session(loading=True)
        self._unsubscribe: Optional[Callable[[], None]] = sessions.subscribe(self._on_identity)

    # -------------------------
    # Session resolution
    # -------------------------
    def _on_identity(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self.session = Session(identity=None, profile=None, loading=False)
            self.router.bind(None, None)
            return

        self.session = Session(identity=identity, profile=None, loading=True)
        profile: Optional[Profile] = None
        try:
            profile = self.sessions.get_profile(identity.id)
        except SessionUnavailableError as exc:
            self.notices.show_auth_error("fetch profile", exc)
        finally:
            self.session = Session(identity=identity, profile=profile, loading=False)
        self.router.bind(identity.id, profile.role if profile else None)

    @property
    def profile(self) -> Optional[Profile]:
        return self.session.profile

    @property
    def role(self) -> Optional[str]:
        return self.session.role

    # -------------------------
    # Auth actions (errors surface as notices, then propagate to the form)
    # -------------------------
    def sign_in(self, email: str, password: str) -> Identity:
        try:
            return self.sessions.sign_in(email, password)
        except (AuthError, SessionUnavailableError) as exc:
            self.notices.show_auth_error("sign in", exc)
            raise

    def sign_up(self, email: str, password: str, full_name: str, role: str) -> Identity:
        try:
            return self.sessions.create(email, password, full_name, role)
        except (AuthError, SessionUnavailableError) as exc:
            self.notices.show_auth_error("sign up", exc)
            raise

    def sign_out(self) -> None:
        try:
            self.sessions.destroy_session()
        except SessionUnavailableError as exc:
            self.notices.show_auth_error("sign out", exc)
            raise

    # -------------------------
    # Helpers for pages
    # -------------------------
    def editor(self, on_saved: Optional[Callable[[], None]] = None) -> RecordEditor:
        if self.profile is None:
            raise RuntimeError("No signed-in profile to edit records for")
        return RecordEditor(self.records, self.profile.id, on_saved=on_saved)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


def build_context(settings: Settings, flags: MutableMapping[str, object]) -> AppContext:
    """
    Wire the backends: Supabase when configured, otherwise the local JSON
    demo store (with a one-time "service unavailable" notice).
    """
    notices = NoticeBoard(flags)
    estimator = VolumeEstimator(settings.predict_url)

    if settings.supabase_configured:
        client = SupabaseClient(settings.supabase_url or "", settings.supabase_anon_key or "")
        records: RecordStore = SupabaseRecordStore(client)
        sessions: SessionStore = SupabaseSessionStore(client, records)  # type: ignore[arg-type]
        logger.info("Using Supabase backend at %s", settings.supabase_url)
        return AppContext(settings, sessions, records, estimator, notices)

    logger.warning("Supabase not configured, running in demo mode (store: %s)", settings.db_path)
    local = JsonRecordStore(settings.db_path, encrypted=settings.encrypt_local_store)
    sessions = LocalSessionStore(local)
    notices.show_service_unavailable("Supabase Authentication", "sign in/sign up")
    return AppContext(settings, sessions, local, estimator, notices, demo_mode=True)
