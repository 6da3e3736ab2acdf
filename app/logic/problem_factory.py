"""Centralised construction of problem+json payloads.

Builds RFC7807 dicts for submission errors so route modules and exception
handlers never embed status codes or error codes as literals.
"""

from __future__ import annotations

from typing import Dict
import logging

from app.logic.errors import ResponseValidationError, SubmissionError


logger = logging.getLogger(__name__)


def problem_for_submission_error(exc: SubmissionError) -> Dict[str, object]:
    """Return the problem body for a client-facing submission error."""
    problem: Dict[str, object] = {
        "title": exc.title,
        "status": exc.status,
        "detail": exc.message,
        "code": exc.code,
    }
    if isinstance(exc, ResponseValidationError):
        problem["errors"] = list(exc.errors)
    logger.info("error_handler.handle code=%s status=%s", exc.code, exc.status)
    return problem


def problem_missing_identity() -> Dict[str, object]:
    """Return a 401 problem when the upstream identity header is absent."""
    problem: Dict[str, object] = {
        "title": "Unauthorized",
        "status": 401,
        "detail": "X-User-Email header is required",
        "code": "IDENTITY_MISSING",
    }
    logger.info("error_handler.handle code=%s status=%s", problem["code"], problem["status"])
    return problem


__all__ = ["problem_for_submission_error", "problem_missing_identity"]
