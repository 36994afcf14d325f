"""User record and role constants."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserRole:
    LEARNER = "Learner"
    ADMIN = "Admin"


class User(BaseModel):
    id: Optional[int] = None
    username: str
    email: str
    password_hash: str
    role: str = UserRole.LEARNER
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").strip().lower() == UserRole.ADMIN.lower()


__all__ = ["UserRole", "User"]
