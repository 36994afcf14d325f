"""APIRouter registration for the Forms Service."""

from __future__ import annotations

from fastapi import APIRouter

from app.routes.auth import router as auth_router
from app.routes.forms import router as forms_router
from app.routes.submissions import router as submissions_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(forms_router)
api_router.include_router(submissions_router)

__all__ = ["api_router"]
