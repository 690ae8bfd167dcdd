from datetime import datetime, timedelta, timezone

import pytest

from app.core.security import create_access_token, decode_access_token
from conftest import auth_header


def test_missing_token_is_rejected(client):
    response = client.get("/posts")
    assert response.status_code == 401
    assert response.json()["details"]["reason"] == "missing_token"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_non_bearer_scheme_is_rejected(client):
    response = client.get("/posts", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_garbage_token_is_rejected(client):
    response = client.get("/posts", headers=auth_header("not.a.jwt"))
    assert response.status_code == 401
    assert response.json()["details"]["reason"] == "token_invalid"


def test_token_signed_with_other_secret_is_rejected(client, alice):
    forged = create_access_token(secret="other-secret", user_id=alice["id"], expires_minutes=5)
    response = client.get("/posts", headers=auth_header(forged))
    assert response.status_code == 401


def test_expired_token_returns_no_data(client, settings, alice):
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = create_access_token(
        secret=settings.JWT_SECRET, user_id=alice["id"], expires_minutes=60, now=issued
    )

    response = client.get("/posts", headers=auth_header(expired))

    assert response.status_code == 401
    body = response.json()
    assert body["details"]["reason"] == "token_expired"
    assert "id" not in body


def test_login_token_is_accepted(client, alice):
    response = client.get("/posts", headers=alice["headers"])
    assert response.status_code == 200


def test_token_carries_subject_and_validity_window(settings):
    token = create_access_token(secret=settings.JWT_SECRET, user_id="abc", expires_minutes=10)
    claims = decode_access_token(token=token, secret=settings.JWT_SECRET)

    assert claims["sub"] == "abc"
    assert claims["exp"] - claims["iat"] == 600


def test_blank_secret_refused():
    with pytest.raises(ValueError):
        create_access_token(secret="", user_id="abc", expires_minutes=10)
