import time

import pytest
import requests

import auth
from app_secrets import Settings
from errors import AuthError

SETTINGS = Settings(firebase_api_key="key", firebase_project_id="proj")


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def _fake_post(response=None, exc=None, calls=None):
    def post(url, **kwargs):
        if calls is not None:
            calls.append((url, kwargs))
        if exc:
            raise exc
        return response
    return post


def test_sign_in_returns_session(monkeypatch):
    calls = []
    payload = {"email": "a@b.com", "localId": "u1", "idToken": "tok", "refreshToken": "ref", "expiresIn": "3600"}
    monkeypatch.setattr(auth.requests, "post", _fake_post(FakeResponse(200, payload), calls=calls))
    session = auth.sign_in(" a@b.com ", "pw", SETTINGS)
    assert session.id_token == "tok"
    assert session.local_id == "u1"
    assert not session.expired()
    url, kwargs = calls[0]
    assert url == auth.SIGN_IN_URL
    assert kwargs["params"] == {"key": "key"}
    assert kwargs["json"]["email"] == "a@b.com"


@pytest.mark.parametrize("message, code", [
    ("INVALID_PASSWORD", "auth/wrong-password"),
    ("EMAIL_NOT_FOUND", "auth/user-not-found"),
    ("INVALID_LOGIN_CREDENTIALS", "auth/invalid-credential"),
    ("TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been temporarily disabled", "auth/too-many-requests"),
    ("SOMETHING_NEW", "auth/unknown"),
])
def test_sign_in_maps_error_codes(monkeypatch, message, code):
    monkeypatch.setattr(auth.requests, "post", _fake_post(FakeResponse(400, {"error": {"message": message}})))
    with pytest.raises(AuthError) as info:
        auth.sign_in("a@b.com", "pw", SETTINGS)
    assert info.value.code == code


def test_sign_in_network_failure(monkeypatch):
    monkeypatch.setattr(auth.requests, "post", _fake_post(exc=requests.ConnectionError("offline")))
    with pytest.raises(AuthError) as info:
        auth.sign_in("a@b.com", "pw", SETTINGS)
    assert info.value.code == "auth/network-request-failed"


def test_sign_in_without_api_key():
    with pytest.raises(AuthError) as info:
        auth.sign_in("a@b.com", "pw", Settings())
    assert info.value.code == "auth/configuration-not-found"


def test_refresh_session(monkeypatch):
    payload = {"id_token": "new", "refresh_token": "ref2", "expires_in": "3600", "user_id": "u1"}
    monkeypatch.setattr(auth.requests, "post", _fake_post(FakeResponse(200, payload)))
    old = auth.AuthSession("a@b.com", "u1", "old", "ref", time.time() - 1)
    assert old.expired()
    new = auth.refresh_session(old, SETTINGS)
    assert new.id_token == "new"
    assert new.refresh_token == "ref2"
    assert new.email == "a@b.com"


def test_auth_error_messages():
    assert auth.auth_error_message("auth/wrong-password") == "Incorrect password."
    assert auth.auth_error_message("auth/too-many-requests").startswith("Too many failed attempts")
    assert auth.auth_error_message("auth/unknown") == auth.DEFAULT_MESSAGE
