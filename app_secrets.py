from __future__ import annotations
import os
from dataclasses import dataclass
import streamlit as st


def get_secret(key: str) -> str | None:
    v = os.environ.get(key)
    if v:
        return v
    try:
        return st.secrets.get(key)  # type: ignore[attr-defined]
    except Exception:
        # no secrets.toml present
        return None


@dataclass(frozen=True)
class Settings:
    firebase_api_key: str | None = None
    firebase_project_id: str | None = None
    log_level: str = "INFO"
    log_dir: str | None = None
    http_timeout: float = 30.0

    @property
    def firebase_enabled(self) -> bool:
        return bool(self.firebase_api_key and self.firebase_project_id)


def load_settings() -> Settings:
    timeout = get_secret("FREIGHT_HTTP_TIMEOUT")
    return Settings(
        firebase_api_key=get_secret("FIREBASE_API_KEY"),
        firebase_project_id=get_secret("FIREBASE_PROJECT_ID"),
        log_level=get_secret("FREIGHT_LOG_LEVEL") or "INFO",
        log_dir=get_secret("FREIGHT_LOG_DIR"),
        http_timeout=float(timeout) if timeout else 30.0,
    )
