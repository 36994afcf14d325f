"""CORS configuration helper.

Credentials are allowed so the auth cookie travels with browser requests,
which is why only an explicit origin list is accepted here.
"""

from __future__ import annotations

from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

EXPOSE_HEADERS: list[str] = ["Content-Disposition", "X-Request-Id"]


def apply_cors(app: FastAPI, *, origins: Iterable[str]) -> None:
    allowed = list(origins)
    if "*" in allowed:
        raise ValueError("Wildcard CORS origin cannot be combined with credentials")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["apply_cors", "EXPOSE_HEADERS"]
