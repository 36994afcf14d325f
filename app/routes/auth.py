"""Registration, login and session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from app.config import get_config
from app.guards.auth import Principal, get_principal
from app.logic import auth_service
from app.models.auth_payloads import LoginPayload, RegisterPayload
from app.models.response_types import AuthStatus

router = APIRouter()
logger = logging.getLogger(__name__)


def _set_auth_cookie(response: Response, token: str) -> None:
    settings = get_config().auth
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.token_ttl_minutes * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


@router.post(
    "/api/auth/register",
    summary="Register a learner account",
    operation_id="register",
    tags=["Auth"],
    response_model=AuthStatus,
)
def register(payload: RegisterPayload, response: Response) -> AuthStatus:
    result = auth_service.register(payload)
    _set_auth_cookie(response, result.token)
    return AuthStatus(status="success", message="Registration successful", user=result.user)


@router.post(
    "/api/auth/login",
    summary="Log in and receive the auth cookie",
    operation_id="login",
    tags=["Auth"],
    response_model=AuthStatus,
)
def login(payload: LoginPayload, response: Response) -> AuthStatus:
    result = auth_service.login(payload)
    _set_auth_cookie(response, result.token)
    return AuthStatus(status="success", message="Login successful", user=result.user)


@router.post(
    "/api/auth/logout",
    summary="Clear the auth cookie",
    operation_id="logout",
    tags=["Auth"],
    response_model=AuthStatus,
)
def logout(response: Response) -> AuthStatus:
    settings = get_config().auth
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return AuthStatus(status="success", message="Logged out successfully")


@router.get(
    "/api/auth/me",
    summary="Return the authenticated user",
    operation_id="getCurrentUser",
    tags=["Auth"],
    response_model=AuthStatus,
)
def me(principal: Principal = Depends(get_principal)) -> AuthStatus:
    user = auth_service.get_current_user(principal.user_id)
    return AuthStatus(status="success", message="User retrieved successfully", user=user)


__all__ = ["router"]
