from __future__ import annotations

"""Functional test bootstrap.

Points the application at a file-backed SQLite database before any `app`
import, applies the SQL migrations once per session and re-seeds a small
course before every test so each test starts from a known store.
"""

import json
import os
import pathlib
import uuid
from datetime import datetime, timedelta, timezone

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"

COURSE = "CS101"
OPEN_SESSION = "Week 1"
CLOSED_SESSION = "Week 0"

ALICE = "alice@example.com"
BOB = "bob@example.com"
CAROL = "carol@example.com"
DAVE = "dave@example.com"
INA = "ina@example.com"
IVAN = "ivan@example.com"
NORA = "nora@example.com"

Q_TEXT = "q-text-students"
Q_NUMSCALE = "q-numscale-teammates"
Q_CONSTSUM = "q-constsum-teams"
Q_MCQ = "q-mcq-instructors"
Q_CLOSED = "q-text-closed"
Q_HIDDEN = "q-text-hidden"

_TABLES = (
    "feedback_response_comment",
    "feedback_response",
    "feedback_question",
    "feedback_session",
    "course_student",
    "course_instructor",
)


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def execute(sql: str, params: dict | None = None) -> None:
    from sqlalchemy import text as sql_text
    from app.db.base import get_engine

    with get_engine().begin() as conn:
        conn.execute(sql_text(sql), params or {})


def fetch_all(sql: str, params: dict | None = None) -> list:
    from sqlalchemy import text as sql_text
    from app.db.base import get_engine

    with get_engine().connect() as conn:
        return list(conn.execute(sql_text(sql), params or {}).fetchall())


def insert_question(
    question_id: str,
    *,
    giver_type: str,
    recipient_type: str,
    details: dict,
    session_name: str = OPEN_SESSION,
    show_responses_to: str = "INSTRUCTORS",
) -> None:
    execute(
        """
        INSERT INTO feedback_question (
            question_id, course_id, session_name, question_number, question_text,
            giver_type, recipient_type, show_responses_to, question_details
        )
        VALUES (:qid, :cid, :sname, 1, 'Question', :giver, :recipient, :show, :details)
        """,
        {
            "qid": question_id,
            "cid": COURSE,
            "sname": session_name,
            "giver": giver_type,
            "recipient": recipient_type,
            "show": show_responses_to,
            "details": json.dumps(details),
        },
    )


def add_comment(response_id: str, text: str = "Nice") -> str:
    comment_id = str(uuid.uuid4())
    execute(
        """
        INSERT INTO feedback_response_comment (
            comment_id, response_id, question_id, comment_giver, comment_text,
            giver_section, receiver_section, created_at
        )
        SELECT :cmid, response_id, question_id, 'ina@example.com', :text, 'stale', 'stale', '2024-01-01T00:00:00Z'
        FROM feedback_response WHERE response_id = :rid
        """,
        {"cmid": comment_id, "rid": response_id, "text": text},
    )
    return comment_id


def stored_responses(question_id: str, giver: str | None = None) -> list:
    sql = (
        "SELECT response_id, giver, giver_section, recipient, recipient_section, response_details "
        "FROM feedback_response WHERE question_id = :qid"
    )
    params = {"qid": question_id}
    if giver is not None:
        sql += " AND giver = :giver"
        params["giver"] = giver
    return fetch_all(sql + " ORDER BY recipient", params)


def stored_recipients(question_id: str, giver: str) -> set[str]:
    return {row[3] for row in stored_responses(question_id, giver)}


def _seed() -> None:
    now = datetime.now(timezone.utc)
    execute(
        "INSERT INTO feedback_session VALUES (:cid, :name, :opens, :closes, 0)",
        {"cid": COURSE, "name": OPEN_SESSION, "opens": _iso(now - timedelta(days=1)), "closes": _iso(now + timedelta(days=1))},
    )
    execute(
        "INSERT INTO feedback_session VALUES (:cid, :name, :opens, :closes, 15)",
        {"cid": COURSE, "name": CLOSED_SESSION, "opens": _iso(now - timedelta(days=8)), "closes": _iso(now - timedelta(days=1))},
    )
    for email, name, team, section in (
        (ALICE, "Alice", "Team A", "Section 1"),
        (BOB, "Bob", "Team A", "Section 1"),
        (CAROL, "Carol", "Team B", "Section 2"),
        (DAVE, "Dave", "Team B", "Section 2"),
    ):
        execute(
            "INSERT INTO course_student VALUES (:cid, :email, :name, :team, :section)",
            {"cid": COURSE, "email": email, "name": name, "team": team, "section": section},
        )
    for email, name, can_submit, can_moderate in (
        (INA, "Ina", True, True),
        (IVAN, "Ivan", True, False),
        (NORA, "Nora", False, False),
    ):
        execute(
            "INSERT INTO course_instructor VALUES (:cid, :email, :name, :submit, :moderate)",
            {"cid": COURSE, "email": email, "name": name, "submit": can_submit, "moderate": can_moderate},
        )

    insert_question(Q_TEXT, giver_type="STUDENTS", recipient_type="STUDENTS", details={"question_type": "TEXT"})
    insert_question(
        Q_NUMSCALE,
        giver_type="STUDENTS",
        recipient_type="OWN_TEAM_MEMBERS_INCLUDING_SELF",
        details={"question_type": "NUMSCALE", "min_scale": 1, "max_scale": 5, "step": 1},
    )
    insert_question(
        Q_CONSTSUM,
        giver_type="TEAMS",
        recipient_type="TEAMS",
        details={"question_type": "CONSTSUM", "distribute_to_recipients": True, "points": 100},
    )
    insert_question(
        Q_MCQ,
        giver_type="INSTRUCTORS",
        recipient_type="NONE",
        details={"question_type": "MCQ", "choices": ["Yes", "No"]},
    )
    insert_question(
        Q_CLOSED,
        giver_type="STUDENTS",
        recipient_type="STUDENTS",
        details={"question_type": "TEXT"},
        session_name=CLOSED_SESSION,
    )
    insert_question(
        Q_HIDDEN,
        giver_type="STUDENTS",
        recipient_type="STUDENTS",
        details={"question_type": "TEXT"},
        session_name=CLOSED_SESSION,
        show_responses_to="",
    )


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> None:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from app.db.base import get_engine
    from app.db.migrations_runner import apply_migrations

    apply_migrations(get_engine(os.environ["TEST_DATABASE_URL"]))
    yield


@pytest.fixture(autouse=True)
def seeded_course(functional_sqlite_bootstrap) -> None:
    for table in _TABLES:
        execute(f"DELETE FROM {table}")
    _seed()
    yield


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from app.main import create_app

    with TestClient(create_app()) as c:
        yield c
