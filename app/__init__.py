"""Forms Service application package.

Exposes the FastAPI application factory. Business logic lives in
`app/logic/`, route handlers in `app/routes/`.
"""

from __future__ import annotations

from app.main import create_app

__all__ = ["create_app"]
