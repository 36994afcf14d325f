"""Configuration utilities for the Forms Service.

This module loads application configuration with the following rules:
- Primary source: `forms_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_FORMS_CONFIG = Path("forms_config.json")
logger = logging.getLogger(__name__)

# Development-only signing key; deployments override JWT_KEY.
_DEV_JWT_KEY = "forms-service-development-signing-key-change-me"

# Local frontend dev servers; deployments override CORS_ORIGINS.
_DEV_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str
    auto_apply_migrations: bool = Field(default=True)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class AuthConfig(BaseModel):
    jwt_key: str
    jwt_issuer: str = Field(default="FormsApp")
    jwt_audience: str = Field(default="FormsAppUsers")
    token_ttl_minutes: int = Field(default=60 * 24, gt=0)
    cookie_name: str = Field(default="auth-token")
    cookie_secure: bool = Field(default=True)

    @field_validator("jwt_key")
    @classmethod
    def key_must_be_long_enough(cls, v: str) -> str:
        # HS256 keys shorter than the digest size are rejected by most verifiers
        if not isinstance(v, str) or len(v) < 32:
            raise ValueError("auth.jwt_key must be at least 32 characters")
        return v


class CorsConfig(BaseModel):
    origins: List[str] = Field(default_factory=lambda: list(_DEV_CORS_ORIGINS))

    @field_validator("origins")
    @classmethod
    def origins_must_be_explicit(cls, v: List[str]) -> List[str]:
        # Browsers refuse a credentialed response for a wildcard origin
        if "*" in v:
            raise ValueError("cors.origins must list explicit origins because credentials are allowed")
        return v


class AppConfig(BaseModel):
    database: DatabaseConfig
    auth: AuthConfig
    cors: CorsConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _truthy(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes"}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) forms_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_FORMS_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or "sqlite+pysqlite:///./forms.db"
    )
    auto_migrate_text = (
        _env("AUTO_APPLY_MIGRATIONS")
        or _read_config_file("database.auto_apply_migrations")
        or _base("database.auto_apply_migrations", "true")
    )

    # Auth / JWT
    jwt_key = _env("JWT_KEY") or _read_config_file("jwt.key") or _base("auth.jwt_key") or _DEV_JWT_KEY
    jwt_issuer = _env("JWT_ISSUER") or _read_config_file("jwt.issuer") or _base("auth.jwt_issuer", "FormsApp")
    jwt_audience = _env("JWT_AUDIENCE") or _read_config_file("jwt.audience") or _base("auth.jwt_audience", "FormsAppUsers")
    ttl_text = _env("JWT_TTL_MINUTES") or _read_config_file("jwt.ttl_minutes") or _base("auth.token_ttl_minutes", "1440")
    cookie_name = _env("AUTH_COOKIE_NAME") or _base("auth.cookie_name", "auth-token")
    cookie_secure_text = _env("AUTH_COOKIE_SECURE") or _base("auth.cookie_secure", "true")

    # CORS
    origins_text = _env("CORS_ORIGINS") or _read_config_file("cors.origins") or _base("cors.origins")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()] if origins_text else list(_DEV_CORS_ORIGINS)

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn, auto_apply_migrations=_truthy(auto_migrate_text)),
            auth=AuthConfig(
                jwt_key=jwt_key,
                jwt_issuer=jwt_issuer,
                jwt_audience=jwt_audience,
                token_ttl_minutes=int(str(ttl_text).strip()),
                cookie_name=cookie_name,
                cookie_secure=_truthy(cookie_secure_text),
            ),
            cors=CorsConfig(origins=origins),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Process-wide cached configuration; call `get_config.cache_clear()` in tests."""
    return load_config()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "AuthConfig",
    "CorsConfig",
    "load_config",
    "get_config",
]
