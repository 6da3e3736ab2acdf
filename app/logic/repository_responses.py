"""Feedback response persistence.

Each public function is one independent atomic call against the store.
Cascades to dependent comment rows are explicit statements executed inside
the same transaction as the response row change.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError

from app.db.base import get_engine
from app.logic.errors import EntityAlreadyExistsError, EntityDoesNotExistError
from app.models.domain import CreateDescriptor, ResponseRecord, UpdateDescriptor
from app.models.question_details import parse_response_details

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = """
    response_id, question_id, course_id, session_name, giver, giver_section,
    recipient, recipient_section, response_details
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _row_to_record(row) -> ResponseRecord:  # type: ignore[no-untyped-def]
    return ResponseRecord(
        response_id=str(row[0]),
        question_id=str(row[1]),
        course_id=str(row[2]),
        session_name=str(row[3]),
        giver=str(row[4]),
        giver_section=str(row[5]),
        recipient=str(row[6]),
        recipient_section=str(row[7]),
        details=parse_response_details(row[8]),
    )


def get_responses_from_giver_for_question(question_id: str, giver: str) -> List[ResponseRecord]:
    """Return every stored response given by `giver` for the question."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM feedback_response
                WHERE question_id = :qid AND giver = :giver
                ORDER BY created_at, recipient
                """
            ),
            {"qid": str(question_id), "giver": str(giver)},
        ).fetchall()
    return [_row_to_record(r) for r in rows]


def get_response(response_id: str) -> ResponseRecord | None:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(f"SELECT {_SELECT_COLUMNS} FROM feedback_response WHERE response_id = :rid"),
            {"rid": str(response_id)},
        ).fetchone()
    return _row_to_record(row) if row is not None else None


def create_response(descriptor: CreateDescriptor) -> ResponseRecord:
    """Insert a new response row.

    Raises EntityAlreadyExistsError when the (question, giver, recipient)
    triple is already stored.
    """
    response_id = str(uuid.uuid4())
    now = _now()
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(
                sql_text(
                    """
                    INSERT INTO feedback_response (
                        response_id, question_id, course_id, session_name, giver, giver_section,
                        recipient, recipient_section, response_details, created_at, updated_at
                    )
                    VALUES (:rid, :qid, :cid, :sname, :giver, :gsec, :recipient, :rsec, :details, :now, :now)
                    """
                ),
                {
                    "rid": response_id,
                    "qid": descriptor.question_id,
                    "cid": descriptor.course_id,
                    "sname": descriptor.session_name,
                    "giver": descriptor.giver,
                    "gsec": descriptor.giver_section,
                    "recipient": descriptor.recipient,
                    "rsec": descriptor.recipient_section,
                    "details": descriptor.details.model_dump_json(),
                    "now": now,
                },
            )
    except IntegrityError as e:
        logger.warning(
            "response_create_conflict question_id=%s giver=%s recipient=%s",
            descriptor.question_id,
            descriptor.giver,
            descriptor.recipient,
        )
        raise EntityAlreadyExistsError(
            f"Response from {descriptor.giver} to {descriptor.recipient} "
            f"for question {descriptor.question_id} already exists"
        ) from e
    logger.info("response_created response_id=%s recipient=%s", response_id, descriptor.recipient)
    return ResponseRecord(
        response_id=response_id,
        question_id=descriptor.question_id,
        course_id=descriptor.course_id,
        session_name=descriptor.session_name,
        giver=descriptor.giver,
        giver_section=descriptor.giver_section,
        recipient=descriptor.recipient,
        recipient_section=descriptor.recipient_section,
        details=descriptor.details,
    )


def update_response_cascade(descriptor: UpdateDescriptor) -> ResponseRecord:
    """Replace every mutable field of a stored response.

    Comment rows attached to the response take the new giver/recipient
    sections. Raises EntityDoesNotExistError when the target is gone and
    EntityAlreadyExistsError when the new triple collides with another row.
    """
    eng = get_engine()
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_SELECT_COLUMNS} FROM feedback_response WHERE response_id = :rid"),
                {"rid": descriptor.response_id},
            ).fetchone()
            if row is None:
                raise EntityDoesNotExistError(
                    f"Trying to update a feedback response that does not exist: {descriptor.response_id}"
                )
            current = _row_to_record(row)
            conn.execute(
                sql_text(
                    """
                    UPDATE feedback_response
                    SET giver = :giver,
                        giver_section = :gsec,
                        recipient = :recipient,
                        recipient_section = :rsec,
                        response_details = :details,
                        updated_at = :now
                    WHERE response_id = :rid
                    """
                ),
                {
                    "rid": descriptor.response_id,
                    "giver": descriptor.giver,
                    "gsec": descriptor.giver_section,
                    "recipient": descriptor.recipient,
                    "rsec": descriptor.recipient_section,
                    "details": descriptor.details.model_dump_json(),
                    "now": _now(),
                },
            )
            conn.execute(
                sql_text(
                    """
                    UPDATE feedback_response_comment
                    SET giver_section = :gsec, receiver_section = :rsec
                    WHERE response_id = :rid
                    """
                ),
                {
                    "rid": descriptor.response_id,
                    "gsec": descriptor.giver_section,
                    "rsec": descriptor.recipient_section,
                },
            )
    except IntegrityError as e:
        logger.warning("response_update_conflict response_id=%s", descriptor.response_id)
        raise EntityAlreadyExistsError(
            f"Updating response {descriptor.response_id} would duplicate "
            f"the response from {descriptor.giver} to {descriptor.recipient}"
        ) from e
    logger.info("response_updated response_id=%s recipient=%s", descriptor.response_id, descriptor.recipient)
    return ResponseRecord(
        response_id=current.response_id,
        question_id=current.question_id,
        course_id=current.course_id,
        session_name=current.session_name,
        giver=descriptor.giver,
        giver_section=descriptor.giver_section,
        recipient=descriptor.recipient,
        recipient_section=descriptor.recipient_section,
        details=descriptor.details,
    )


def delete_response_cascade(response_id: str) -> None:
    """Delete a response and its comments. Missing responses are ignored."""
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text("DELETE FROM feedback_response_comment WHERE response_id = :rid"),
            {"rid": str(response_id)},
        )
        conn.execute(
            sql_text("DELETE FROM feedback_response WHERE response_id = :rid"),
            {"rid": str(response_id)},
        )
    logger.info("response_deleted response_id=%s", response_id)


def delete_responses_from_giver_for_question(question_id: str, giver: str) -> int:
    """Delete every response (and comments) given by `giver` for the question.

    Returns the number of responses removed.
    """
    params = {"qid": str(question_id), "giver": str(giver)}
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text(
                """
                DELETE FROM feedback_response_comment
                WHERE response_id IN (
                    SELECT response_id FROM feedback_response
                    WHERE question_id = :qid AND giver = :giver
                )
                """
            ),
            params,
        )
        result = conn.execute(
            sql_text("DELETE FROM feedback_response WHERE question_id = :qid AND giver = :giver"),
            params,
        )
    removed = int(result.rowcount or 0)
    logger.info("responses_deleted_for_giver question_id=%s giver=%s count=%d", question_id, giver, removed)
    return removed


__all__ = [
    "get_responses_from_giver_for_question",
    "get_response",
    "create_response",
    "update_response_cascade",
    "delete_response_cascade",
    "delete_responses_from_giver_for_question",
]
