"""Recipient resolution and section derivation over a roster snapshot."""

from __future__ import annotations

import pytest

from app.logic.recipients import recipient_section, resolve_recipients
from app.logic.submitter import instructor_submitter, student_submitter
from app.models.domain import FeedbackQuestion, Instructor, Roster, Student
from app.models.question_details import TextQuestionDetails

ALICE = Student(email="alice@x", name="Alice", team="Team A", section="S1")
BOB = Student(email="bob@x", name="Bob", team="Team A", section="S1")
CAROL = Student(email="carol@x", name="Carol", team="Team B", section="S2")
INA = Instructor(email="ina@x", name="Ina")
IVAN = Instructor(email="ivan@x", name="Ivan")
ROSTER = Roster(course_id="C1", students=(ALICE, BOB, CAROL), instructors=(INA, IVAN))


def question(giver_type: str, recipient_type: str) -> FeedbackQuestion:
    return FeedbackQuestion(
        question_id="q1",
        course_id="C1",
        session_name="Week 1",
        giver_type=giver_type,
        recipient_type=recipient_type,
        details=TextQuestionDetails(),
    )


@pytest.mark.parametrize(
    "giver_type,recipient_type,expected",
    [
        ("STUDENTS", "SELF", ["alice@x"]),
        ("TEAMS", "SELF", ["Team A"]),
        ("STUDENTS", "STUDENTS", ["bob@x", "carol@x"]),
        ("TEAMS", "STUDENTS", ["bob@x", "carol@x"]),
        ("STUDENTS", "INSTRUCTORS", ["ina@x", "ivan@x"]),
        ("STUDENTS", "TEAMS", ["Team B"]),
        ("STUDENTS", "OWN_TEAM", ["Team A"]),
        ("STUDENTS", "OWN_TEAM_MEMBERS", ["bob@x"]),
        ("STUDENTS", "OWN_TEAM_MEMBERS_INCLUDING_SELF", ["alice@x", "bob@x"]),
        ("STUDENTS", "NONE", ["%GENERAL%"]),
    ],
)
def test_student_recipients(giver_type, recipient_type, expected):
    q = question(giver_type, recipient_type)

    assert list(resolve_recipients(q, student_submitter(q, ALICE), ROSTER)) == expected


def test_instructor_recipients_exclude_only_the_instructor():
    q = question("INSTRUCTORS", "INSTRUCTORS")
    ina = instructor_submitter(INA, "None")

    assert list(resolve_recipients(q, ina, ROSTER)) == ["ivan@x"]
    assert list(resolve_recipients(question("INSTRUCTORS", "STUDENTS"), ina, ROSTER)) == ["alice@x", "bob@x", "carol@x"]
    assert list(resolve_recipients(question("INSTRUCTORS", "TEAMS"), ina, ROSTER)) == ["Team A", "Team B"]


def test_resolution_reads_roster_only():
    q = question("STUDENTS", "STUDENTS")
    submitter = student_submitter(q, ALICE)

    assert resolve_recipients(q, submitter, ROSTER) == resolve_recipients(q, submitter, ROSTER)
    assert ROSTER.students == (ALICE, BOB, CAROL)


@pytest.mark.parametrize(
    "giver_type,recipient_type,recipient,expected",
    [
        ("STUDENTS", "STUDENTS", "carol@x", "S2"),
        ("STUDENTS", "STUDENTS", "ghost@x", "None"),
        ("STUDENTS", "TEAMS", "Team B", "S2"),
        ("STUDENTS", "OWN_TEAM", "Team A", "S1"),
        ("TEAMS", "SELF", "Team B", "S2"),
        ("STUDENTS", "SELF", "alice@x", "S1"),
        ("INSTRUCTORS", "SELF", "ina@x", "None"),
        ("STUDENTS", "INSTRUCTORS", "ina@x", "None"),
        ("STUDENTS", "NONE", "%GENERAL%", "None"),
    ],
)
def test_recipient_sections_come_from_roster(giver_type, recipient_type, recipient, expected):
    assert recipient_section(question(giver_type, recipient_type), recipient, ROSTER, "None") == expected
