"""Access control for feedback response submission.

Every check here completes before the submission service touches the
store, so an authorization failure can never leave a partial write behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from app.config import get_config
from app.logic import repository_questions, repository_roster
from app.logic.errors import EntityNotFoundError, InvalidHttpParameterError, UnauthorizedAccessError
from app.logic.recipients import resolve_recipients
from app.logic.submitter import SubmitterContext, instructor_submitter, student_submitter
from app.models.domain import FeedbackQuestion, FeedbackSession, Roster
from app.models.participant_type import FeedbackParticipantType as P
from app.models.participant_type import Intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessGrant:
    """Outcome of a successful authorization."""

    question: FeedbackQuestion
    session: FeedbackSession
    roster: Roster
    submitter: SubmitterContext
    recipients: Dict[str, str]
    moderating: bool = False


def _load_question_and_session(question_id: str) -> tuple[FeedbackQuestion, FeedbackSession]:
    question = repository_questions.get_question(question_id)
    if question is None:
        raise EntityNotFoundError("The feedback question does not exist.")
    session = repository_questions.get_session(question.session_name, question.course_id)
    if session is None:
        raise EntityNotFoundError("The feedback session does not exist.")
    return question, session


def _check_intent(intent: str) -> None:
    if intent in Intent.RESULT:
        raise InvalidHttpParameterError("Invalid intent for this action")
    if intent not in Intent.SUBMISSION:
        raise InvalidHttpParameterError(f"Unknown intent {intent}")


def _check_moderator(question: FeedbackQuestion, roster: Roster, user_email: str) -> None:
    moderator = roster.instructor(user_email)
    if moderator is None or not moderator.can_moderate:
        raise UnauthorizedAccessError("You do not have the privilege to moderate this session")
    if P.INSTRUCTORS not in question.show_responses_to:
        raise UnauthorizedAccessError(
            "The question is not visible to instructors and its responses cannot be moderated"
        )


def _submitter_for(
    intent: str,
    question: FeedbackQuestion,
    roster: Roster,
    rater_email: str,
    moderating: bool,
) -> SubmitterContext:
    if intent == Intent.STUDENT_SUBMISSION:
        if question.giver_type not in P.STUDENT_GIVERS:
            raise UnauthorizedAccessError("The question is not answerable by students")
        student = roster.student(rater_email)
        if student is None:
            raise UnauthorizedAccessError("You are not a student of this course")
        return student_submitter(question, student)

    if question.giver_type not in P.INSTRUCTOR_GIVERS:
        raise UnauthorizedAccessError("The question is not answerable by instructors")
    instructor = roster.instructor(rater_email)
    if instructor is None:
        raise UnauthorizedAccessError("You are not an instructor of this course")
    if not moderating and not instructor.can_submit:
        raise UnauthorizedAccessError("You do not have the privilege to submit responses in this session")
    return instructor_submitter(instructor, get_config().submission.default_section)


def authorize(
    question_id: str,
    intent: str,
    requested_recipients: Optional[Iterable[str]],
    user_email: str,
    *,
    moderated_person: Optional[str] = None,
    preview_as: Optional[str] = None,
    require_open: bool = True,
    now: Optional[datetime] = None,
) -> AccessGrant:
    """Authorize a rater to act on a question.

    Raises EntityNotFoundError, InvalidHttpParameterError or
    UnauthorizedAccessError. When `requested_recipients` is given, every
    entry must be a valid recipient of the question for this rater.
    """
    question, session = _load_question_and_session(question_id)
    _check_intent(intent)
    if preview_as:
        raise UnauthorizedAccessError("Responses cannot be modified in preview mode")

    roster = repository_roster.load_roster(question.course_id)
    moderating = bool(moderated_person)
    if moderating:
        _check_moderator(question, roster, user_email)
    elif require_open and not session.is_open(now or datetime.now(timezone.utc)):
        raise UnauthorizedAccessError("The feedback session is not open for submission")

    rater_email = moderated_person if moderating else user_email
    submitter = _submitter_for(intent, question, roster, str(rater_email), moderating)

    recipients = resolve_recipients(question, submitter, roster)
    for recipient in requested_recipients or ():
        if recipient not in recipients:
            logger.info(
                "access_denied_recipient question_id=%s giver=%s recipient=%s",
                question.question_id,
                submitter.giver_identifier,
                recipient,
            )
            raise UnauthorizedAccessError("The recipient is not a valid recipient of the question")

    logger.info(
        "access_granted question_id=%s intent=%s giver=%s moderating=%s",
        question.question_id,
        intent,
        submitter.giver_identifier,
        moderating,
    )
    return AccessGrant(
        question=question,
        session=session,
        roster=roster,
        submitter=submitter,
        recipients=recipients,
        moderating=moderating,
    )


__all__ = ["AccessGrant", "authorize"]
