"""Central mapping from domain error kinds to HTTP statuses.

Single source of truth for the problem+json boundary; handlers import
from here instead of hardcoding status numbers. Lookups walk the error's
MRO so subclasses inherit their kind's status unless listed themselves.
"""

from __future__ import annotations

from app.logic.errors import (
    FormsServiceError,
    InvalidArgument,
    InvalidCredentials,
    InvalidState,
    NotFound,
    Unauthorized,
)

DOMAIN_ERROR_STATUS: dict[type, int] = {
    InvalidCredentials: 401,
    Unauthorized: 403,
    NotFound: 404,
    InvalidState: 400,
    InvalidArgument: 400,
}

TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
}


def status_for(exc: FormsServiceError) -> int:
    for klass in type(exc).__mro__:
        if klass in DOMAIN_ERROR_STATUS:
            return DOMAIN_ERROR_STATUS[klass]
    return 500


__all__ = ["DOMAIN_ERROR_STATUS", "TITLES", "status_for"]
