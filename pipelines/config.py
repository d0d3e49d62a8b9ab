"""
pipelines/config.py

Environment-driven settings.

SUPABASE_URL / SUPABASE_ANON_KEY   managed backend (auth + tables). When
                                   either is missing the app runs against
                                   the local demo store.
PREDICT_API_URL                    volume prediction endpoint.
MYSURGEON_DB_PATH                  local demo store file.
APP_DATA_KEY                       Fernet key; when set the local store is
                                   encrypted at rest (see storage/crypto.py).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PREDICT_URL = "http://localhost:8000/api/predict"
DEFAULT_DB_PATH = Path("data") / "mysurgeon_db.json"

# Placeholder values shipped in sample .env files; treated as "not configured".
_PLACEHOLDERS = frozenset(
    {"your_supabase_url", "your_anon_key", "https://your-project.supabase.co", "demo"}
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.lower().rstrip("/") in _PLACEHOLDERS:
        return None
    return value


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    predict_url: str = DEFAULT_PREDICT_URL
    db_path: Path = DEFAULT_DB_PATH
    encrypt_local_store: bool = False

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        supabase_url=_clean(env.get("SUPABASE_URL")),
        supabase_anon_key=_clean(env.get("SUPABASE_ANON_KEY")),
        predict_url=env.get("PREDICT_API_URL") or DEFAULT_PREDICT_URL,
        db_path=Path(env.get("MYSURGEON_DB_PATH") or DEFAULT_DB_PATH),
        encrypt_local_store=bool(env.get("APP_DATA_KEY")),
    )
