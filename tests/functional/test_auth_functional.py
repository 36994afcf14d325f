"""Functional tests for registration, login and token handling."""

from __future__ import annotations

import jwt
import pytest

from app.config import get_config
from app.logic import auth_service
from app.logic.errors import EmailAlreadyRegistered, InvalidCredentials, NotFound, Unauthorized
from app.models.auth_payloads import LoginPayload, RegisterPayload


def test_register_then_login():
    result = auth_service.register(RegisterPayload(username="ann", email="ann@example.com", password="pw-123456"))
    assert result.user.role == "Learner"
    claims = auth_service.decode_token(result.token)
    assert claims["sub"] == str(result.user.id)
    assert claims["email"] == "ann@example.com"
    assert claims["iss"] == get_config().auth.jwt_issuer

    logged_in = auth_service.login(LoginPayload(email="ann@example.com", password="pw-123456"))
    assert logged_in.user.id == result.user.id


def test_register_duplicate_email():
    auth_service.register(RegisterPayload(username="ann", email="ann@example.com", password="pw"))
    with pytest.raises(EmailAlreadyRegistered) as exc:
        auth_service.register(RegisterPayload(username="other", email="ann@example.com", password="pw"))
    assert exc.value.message == "Email already registered"


@pytest.mark.parametrize("email,password", [("ann@example.com", "wrong"), ("nobody@example.com", "pw")])
def test_login_rejects_bad_credentials(email, password):
    auth_service.register(RegisterPayload(username="ann", email="ann@example.com", password="pw"))
    with pytest.raises(InvalidCredentials) as exc:
        auth_service.login(LoginPayload(email=email, password=password))
    assert isinstance(exc.value, Unauthorized)
    assert exc.value.message == "Invalid email or password"


def test_password_hash_is_not_plaintext():
    hashed = auth_service.get_password_hash("pw")
    assert hashed != "pw"
    assert auth_service.verify_password("pw", hashed)
    assert not auth_service.verify_password("pw", "not-a-hash")


def test_token_signed_with_other_key_rejected(user_factory):
    user, _ = user_factory("ann")
    forged = jwt.encode({"sub": str(user.id)}, "x" * 40, algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        auth_service.decode_token(forged)


def test_get_current_user_missing():
    with pytest.raises(NotFound):
        auth_service.get_current_user(999)
