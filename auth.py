# auth.py
from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
import requests
import streamlit as st

from app_secrets import Settings
from errors import AuthError
from logger import get_logger

log = get_logger("auth")

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
REFRESH_URL = "https://securetoken.googleapis.com/v1/token"

# identity-toolkit REST error -> client SDK style code
_REST_CODES = {
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/invalid-email",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "MISSING_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "USER_DISABLED": "auth/user-disabled",
    "TOKEN_EXPIRED": "auth/user-token-expired",
    "INVALID_REFRESH_TOKEN": "auth/user-token-expired",
}

_MESSAGES = {
    "auth/invalid-email": "Invalid email address format.",
    "auth/user-not-found": "No account found with this email.",
    "auth/wrong-password": "Incorrect password.",
    "auth/invalid-credential": "Invalid email or password.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
}
DEFAULT_MESSAGE = "Login failed. Please check your credentials."

SESSION_FLAG = "is_authenticated"
SESSION_KEY = "auth_session"


@dataclass
class AuthSession:
    email: str
    local_id: str
    id_token: str
    refresh_token: str
    expires_at: float

    def expired(self, leeway: float = 60.0) -> bool:
        return time.time() >= self.expires_at - leeway


def auth_error_message(code: str) -> str:
    return _MESSAGES.get(code, DEFAULT_MESSAGE)


def _error_code(resp: requests.Response) -> str:
    try:
        raw = resp.json().get("error", {}).get("message", "")
    except ValueError:
        raw = ""
    # e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been ..."
    key = raw.split(":")[0].strip()
    return _REST_CODES.get(key, "auth/unknown")


def _post(url: str, settings: Settings, **kwargs: Any) -> Dict[str, Any]:
    if not settings.firebase_api_key:
        raise AuthError("auth/configuration-not-found", "FIREBASE_API_KEY is not configured.")
    try:
        resp = requests.post(url, params={"key": settings.firebase_api_key}, timeout=settings.http_timeout, **kwargs)
    except requests.RequestException as e:
        raise AuthError("auth/network-request-failed", str(e)) from e
    if resp.status_code >= 400:
        raise AuthError(_error_code(resp))
    return resp.json()


def sign_in(email: str, password: str, settings: Settings) -> AuthSession:
    email = (email or "").strip()
    try:
        data = _post(
            SIGN_IN_URL, settings,
            json={"email": email, "password": password, "returnSecureToken": True},
        )
    except AuthError as e:
        log.warning("sign-in failed", extra={"extra_data": {"email": email, "code": e.code}})
        raise
    log.info("sign-in ok", extra={"extra_data": {"email": email}})
    return AuthSession(
        email=data.get("email", email),
        local_id=data.get("localId", ""),
        id_token=data["idToken"],
        refresh_token=data.get("refreshToken", ""),
        expires_at=time.time() + float(data.get("expiresIn", 3600)),
    )


def refresh_session(session: AuthSession, settings: Settings) -> AuthSession:
    data = _post(
        REFRESH_URL, settings,
        data={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
    )
    return AuthSession(
        email=session.email,
        local_id=data.get("user_id", session.local_id),
        id_token=data["id_token"],
        refresh_token=data.get("refresh_token", session.refresh_token),
        expires_at=time.time() + float(data.get("expires_in", 3600)),
    )


# ---------- session state ----------
def remember(session: AuthSession) -> None:
    st.session_state[SESSION_FLAG] = True
    st.session_state[SESSION_KEY] = session


def current_session(settings: Settings) -> Optional[AuthSession]:
    """The signed-in session, refreshed when its ID token is about to expire."""
    if not st.session_state.get(SESSION_FLAG):
        return None
    session: Optional[AuthSession] = st.session_state.get(SESSION_KEY)
    if session is None:
        return None
    if session.expired():
        try:
            session = refresh_session(session, settings)
        except AuthError:
            log.info("session refresh failed; signing out")
            sign_out()
            return None
        remember(session)
    return session


def sign_out() -> None:
    st.session_state.pop(SESSION_FLAG, None)
    st.session_state.pop(SESSION_KEY, None)
