"""Feedback response submission service.

Orchestrates one submission: authorize, reconcile, validate, commit. All
authorization and validation happens before the first write. The commit
itself issues independent atomic calls (deletes, then creates, then
updates); a conflict part-way through is reported to the client and the
calls already applied stay applied.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from app.config import get_config
from app.logic import repository_responses
from app.logic.access_gate import authorize
from app.logic.errors import (
    EntityAlreadyExistsError,
    EntityDoesNotExistError,
    PersistenceConflictError,
    ResponseValidationError,
)
from app.logic.reconciler import reconcile
from app.logic.submitter import SubmitterContext
from app.logic.validator import populate_generated_options, validate
from app.models.domain import FeedbackQuestion, ReconciliationPlan, ResponseRecord
from app.models.submission import FeedbackResponsesRequest

logger = logging.getLogger(__name__)


def commit_plan(question: FeedbackQuestion, submitter: SubmitterContext, plan: ReconciliationPlan) -> List[ResponseRecord]:
    """Apply a reconciliation plan and return the created then updated records."""
    if plan.delete_all:
        repository_responses.delete_responses_from_giver_for_question(
            question.question_id, submitter.giver_identifier
        )
        return []

    for record in plan.deletes:
        repository_responses.delete_response_cascade(record.response_id)

    output: List[ResponseRecord] = []
    for create in plan.creates:
        try:
            output.append(repository_responses.create_response(create))
        except EntityAlreadyExistsError as e:
            raise PersistenceConflictError(str(e)) from e

    for update in plan.updates:
        try:
            output.append(repository_responses.update_response_cascade(update))
        except (EntityAlreadyExistsError, EntityDoesNotExistError) as e:
            raise PersistenceConflictError(str(e)) from e
    logger.info(
        "responses_commit question_id=%s giver=%s written=%d",
        question.question_id,
        submitter.giver_identifier,
        len(output),
    )
    return output


def submit_responses(
    question_id: str,
    intent: str,
    request: FeedbackResponsesRequest,
    user_email: str,
    *,
    moderated_person: Optional[str] = None,
    preview_as: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ResponseRecord]:
    """Replace the rater's answers to a question with `request`."""
    grant = authorize(
        question_id,
        intent,
        request.recipients,
        user_email,
        moderated_person=moderated_person,
        preview_as=preview_as,
        now=now,
    )
    question = populate_generated_options(grant.question, grant.roster)
    submitter = grant.submitter

    existing = submitter.existing_responses(
        question, repository_responses.get_responses_from_giver_for_question
    )
    plan = reconcile(
        question,
        submitter,
        existing,
        request.responses,
        request.recipients,
        grant.roster,
        get_config().submission.default_section,
    )

    errors = validate(question, plan.merged)
    if errors:
        raise ResponseValidationError(errors)

    logger.info(
        "responses_submit question_id=%s giver=%s creates=%d updates=%d deletes=%d delete_all=%s",
        question.question_id,
        submitter.giver_identifier,
        len(plan.creates),
        len(plan.updates),
        len(plan.deletes),
        plan.delete_all,
    )
    return commit_plan(question, submitter, plan)


def list_responses(
    question_id: str,
    intent: str,
    user_email: str,
    *,
    moderated_person: Optional[str] = None,
) -> List[ResponseRecord]:
    """Return the rater's stored responses for a question."""
    grant = authorize(
        question_id,
        intent,
        None,
        user_email,
        moderated_person=moderated_person,
        require_open=False,
    )
    return grant.submitter.existing_responses(
        grant.question, repository_responses.get_responses_from_giver_for_question
    )


__all__ = ["commit_plan", "submit_responses", "list_responses"]
