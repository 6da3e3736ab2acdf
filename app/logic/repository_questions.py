"""Question and session repository helpers.

Read-only lookups used by the access gate. Keeps the HTTP layer and the
reconciliation core free of direct SQL.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import text as sql_text

from app.db.base import get_engine
from app.models.domain import FeedbackQuestion, FeedbackSession
from app.models.question_details import parse_question_details

logger = logging.getLogger(__name__)


def parse_timestamp(value: object) -> datetime:
    """Parse a stored ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def get_question(question_id: str) -> FeedbackQuestion | None:
    """Return the question with the given id, or None when absent."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                """
                SELECT question_id, course_id, session_name, question_number, question_text,
                       giver_type, recipient_type, show_responses_to, question_details
                FROM feedback_question
                WHERE question_id = :qid
                """
            ),
            {"qid": str(question_id)},
        ).fetchone()
    if row is None:
        logger.info("question_lookup_miss question_id=%s", question_id)
        return None
    show_to = tuple(t.strip() for t in str(row[7] or "").split(",") if t.strip())
    return FeedbackQuestion(
        question_id=str(row[0]),
        course_id=str(row[1]),
        session_name=str(row[2]),
        question_number=int(row[3] or 1),
        question_text=str(row[4] or ""),
        giver_type=str(row[5]),
        recipient_type=str(row[6]),
        show_responses_to=show_to,
        details=parse_question_details(row[8]),
    )


def get_session(session_name: str, course_id: str) -> FeedbackSession | None:
    """Return the feedback session identified by (course_id, session_name)."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                """
                SELECT course_id, session_name, opens_at, closes_at, grace_period_minutes
                FROM feedback_session
                WHERE course_id = :cid AND session_name = :name
                """
            ),
            {"cid": str(course_id), "name": str(session_name)},
        ).fetchone()
    if row is None:
        logger.info("session_lookup_miss course_id=%s session=%s", course_id, session_name)
        return None
    return FeedbackSession(
        course_id=str(row[0]),
        session_name=str(row[1]),
        opens_at=parse_timestamp(row[2]),
        closes_at=parse_timestamp(row[3]),
        grace_period_minutes=int(row[4] or 0),
    )


__all__ = ["get_question", "get_session", "parse_timestamp"]
