"""Domain error taxonomy for the Forms Service.

Four kinds are distinguished by the HTTP boundary: NotFound, InvalidState,
InvalidArgument and Unauthorized. Subclasses narrow the violated rule and
carry a stable `code`; the message is the human-readable rule text.
"""

from __future__ import annotations


class FormsServiceError(Exception):
    code = "FORMS_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(FormsServiceError):
    code = "NOT_FOUND"


class InvalidState(FormsServiceError):
    code = "INVALID_STATE"


class InvalidArgument(FormsServiceError, ValueError):
    code = "INVALID_ARGUMENT"


class Unauthorized(FormsServiceError):
    code = "UNAUTHORIZED"


class AlreadyPublished(InvalidState):
    code = "FORM_ALREADY_PUBLISHED"


class EditBlocked(InvalidState):
    code = "FORM_EDIT_BLOCKED"


class DeleteBlocked(InvalidState):
    code = "FORM_DELETE_BLOCKED"


class NotPublished(InvalidState):
    code = "FORM_NOT_PUBLISHED"


class DuplicateSubmission(InvalidState):
    code = "SUBMISSION_DUPLICATE"


class EmailAlreadyRegistered(InvalidState):
    code = "EMAIL_ALREADY_REGISTERED"


class InvalidMode(InvalidArgument):
    code = "FORM_EDIT_MODE_INVALID"


class UnknownQuestion(InvalidArgument):
    code = "SUBMISSION_UNKNOWN_QUESTION"

    def __init__(self, question_id: str) -> None:
        super().__init__(f"Question {question_id} not found in form")
        self.question_id = question_id


class InvalidCredentials(Unauthorized):
    code = "AUTH_INVALID_CREDENTIALS"


__all__ = [
    "FormsServiceError",
    "NotFound",
    "InvalidState",
    "InvalidArgument",
    "Unauthorized",
    "AlreadyPublished",
    "EditBlocked",
    "DeleteBlocked",
    "NotPublished",
    "DuplicateSubmission",
    "EmailAlreadyRegistered",
    "InvalidMode",
    "UnknownQuestion",
    "InvalidCredentials",
]
