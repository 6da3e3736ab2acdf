"""Exception taxonomy for feedback response submission.

`SubmissionError` subclasses are surfaced to clients as problem+json by
`app.http.problem`; the persistence exceptions stay inside the logic layer
and are translated by the submission service.
"""

from __future__ import annotations

from typing import List, Sequence


class SubmissionError(Exception):
    """Base class for errors reported to the client."""

    status = 500
    code = "SUBMISSION_ERROR"
    title = "Submission Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EntityNotFoundError(SubmissionError):
    status = 404
    code = "ENTITY_NOT_FOUND"
    title = "Not Found"


class UnauthorizedAccessError(SubmissionError):
    status = 403
    code = "UNAUTHORIZED_ACCESS"
    title = "Forbidden"


class InvalidHttpParameterError(SubmissionError):
    status = 400
    code = "INVALID_HTTP_PARAMETER"
    title = "Invalid Request"


class InvalidHttpRequestBodyError(SubmissionError):
    status = 400
    code = "INVALID_REQUEST_BODY"
    title = "Invalid Request"


class ResponseValidationError(InvalidHttpRequestBodyError):
    """Aggregated question-specific rule violations."""

    code = "RESPONSE_VALIDATION_FAILED"

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceConflictError(InvalidHttpRequestBodyError):
    code = "PERSISTENCE_CONFLICT"


class EntityAlreadyExistsError(Exception):
    """A create or update would violate the (question, giver, recipient) uniqueness."""


class EntityDoesNotExistError(Exception):
    """An update targeted a response that is no longer stored."""


__all__ = [
    "SubmissionError",
    "EntityNotFoundError",
    "UnauthorizedAccessError",
    "InvalidHttpParameterError",
    "InvalidHttpRequestBodyError",
    "ResponseValidationError",
    "PersistenceConflictError",
    "EntityAlreadyExistsError",
    "EntityDoesNotExistError",
]
