"""Pydantic models for registration and login payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterPayload(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginPayload(BaseModel):
    email: str
    password: str


__all__ = ["RegisterPayload", "LoginPayload"]
