"""Course roster repository.

Loads a read-only snapshot of students and instructors so that recipient
resolution and section derivation run against current roster data.
"""

from __future__ import annotations

import logging

from sqlalchemy import text as sql_text

from app.db.base import get_engine
from app.models.domain import Instructor, Roster, Student

logger = logging.getLogger(__name__)


def load_roster(course_id: str) -> Roster:
    eng = get_engine()
    with eng.connect() as conn:
        student_rows = conn.execute(
            sql_text(
                """
                SELECT email, name, team_name, section_name
                FROM course_student
                WHERE course_id = :cid
                ORDER BY section_name, team_name, email
                """
            ),
            {"cid": str(course_id)},
        ).fetchall()
        instructor_rows = conn.execute(
            sql_text(
                """
                SELECT email, name, can_submit, can_moderate
                FROM course_instructor
                WHERE course_id = :cid
                ORDER BY email
                """
            ),
            {"cid": str(course_id)},
        ).fetchall()
    roster = Roster(
        course_id=str(course_id),
        students=tuple(
            Student(email=str(r[0]), name=str(r[1]), team=str(r[2]), section=str(r[3]))
            for r in student_rows
        ),
        instructors=tuple(
            Instructor(email=str(r[0]), name=str(r[1]), can_submit=bool(r[2]), can_moderate=bool(r[3]))
            for r in instructor_rows
        ),
    )
    logger.info(
        "roster_loaded course_id=%s students=%d instructors=%d",
        course_id,
        len(roster.students),
        len(roster.instructors),
    )
    return roster


__all__ = ["load_roster"]
