"""Authentication dependencies for protected routes.

The caller's identity is resolved from the auth cookie, or from an
`Authorization: Bearer` header when no cookie is present, and handed to
the logic layer as plain values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request

from app.config import get_config
from app.logic.auth_service import decode_token
from app.models.user import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: int
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return (self.role or "").strip().lower() == UserRole.ADMIN.lower()


def _token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(get_config().auth.cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"title": "Unauthorized", "status": 401, "detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_principal(request: Request) -> Principal:
    token = _token_from_request(request)
    if not token:
        raise _unauthenticated("Authentication required")
    try:
        claims = decode_token(token)
        return Principal(
            user_id=int(claims["sub"]),
            username=str(claims.get("name", "")),
            email=str(claims.get("email", "")),
            role=str(claims.get("role", UserRole.LEARNER)),
        )
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        logger.info("auth_token_rejected", extra={"path": request.url.path})
        raise _unauthenticated("Invalid token")


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=403,
            detail={"title": "Forbidden", "status": 403, "detail": "Admin role required"},
        )
    return principal


__all__ = ["Principal", "get_principal", "require_admin"]
