"""Registration, login and token handling.

Passwords are hashed with passlib's bcrypt scheme; access tokens are HS256
JWTs signed with the configured key.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from app.config import AuthConfig, get_config
from app.logic import repository_users
from app.logic.errors import EmailAlreadyRegistered, InvalidCredentials, NotFound
from app.logic.response_mapper import to_user_response
from app.models.auth_payloads import LoginPayload, RegisterPayload
from app.models.response_types import AuthResult, UserResponse
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or malformed stored hash
        return False


def _auth_config() -> AuthConfig:
    return get_config().auth


def create_token(user: User, *, settings: Optional[AuthConfig] = None) -> str:
    settings = settings or _auth_config()
    claims = {
        "sub": str(user.id),
        "name": user.username,
        "email": user.email,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.token_ttl_minutes),
    }
    return jwt.encode(claims, settings.jwt_key, algorithm=ALGORITHM)


def decode_token(token: str, *, settings: Optional[AuthConfig] = None) -> dict[str, Any]:
    """Verify `token` and return its claims; raises jwt.InvalidTokenError."""
    settings = settings or _auth_config()
    return jwt.decode(
        token,
        settings.jwt_key,
        algorithms=[ALGORITHM],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def register(payload: RegisterPayload) -> AuthResult:
    if repository_users.get_by_email(payload.email) is not None:
        raise EmailAlreadyRegistered("Email already registered")
    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=UserRole.LEARNER,
        created_at=datetime.now(timezone.utc),
    )
    user.id = repository_users.create(user)
    logger.info("user_registered", extra={"user_id": user.id})
    return AuthResult(user=to_user_response(user), token=create_token(user))


def login(payload: LoginPayload) -> AuthResult:
    user = repository_users.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed")
        raise InvalidCredentials("Invalid email or password")
    logger.info("login_succeeded", extra={"user_id": user.id})
    return AuthResult(user=to_user_response(user), token=create_token(user))


def get_current_user(user_id: int) -> UserResponse:
    user = repository_users.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return to_user_response(user)


__all__ = [
    "ALGORITHM",
    "get_password_hash",
    "verify_password",
    "create_token",
    "decode_token",
    "register",
    "login",
    "get_current_user",
]
