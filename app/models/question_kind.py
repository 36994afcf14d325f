"""QuestionKind constants for form questions.

A simple constants container instead of an Enum: stored documents may
carry types outside this list (or in a different case), and those must
still round-trip untouched.
"""

from __future__ import annotations


class QuestionKind:
    TEXT = "text"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE = "file"
    DATE = "date"


CHOICE_KINDS = frozenset({QuestionKind.DROPDOWN, QuestionKind.RADIO, QuestionKind.CHECKBOX})


def normalize_kind(kind: str | None) -> str:
    return (kind or "").strip().lower()


def is_choice_kind(kind: str | None) -> bool:
    """True for question types that carry an option list (case-insensitive)."""
    return normalize_kind(kind) in CHOICE_KINDS


def is_file_kind(kind: str | None) -> bool:
    return normalize_kind(kind) == QuestionKind.FILE


__all__ = ["QuestionKind", "CHOICE_KINDS", "normalize_kind", "is_choice_kind", "is_file_kind"]
