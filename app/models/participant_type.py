"""Participant and intent constants for feedback questions.

Simple constants containers instead of Enums so values round-trip through
query strings and SQL columns as plain strings.
"""

from __future__ import annotations


class FeedbackParticipantType:
    SELF = "SELF"
    STUDENTS = "STUDENTS"
    INSTRUCTORS = "INSTRUCTORS"
    TEAMS = "TEAMS"
    OWN_TEAM = "OWN_TEAM"
    OWN_TEAM_MEMBERS = "OWN_TEAM_MEMBERS"
    OWN_TEAM_MEMBERS_INCLUDING_SELF = "OWN_TEAM_MEMBERS_INCLUDING_SELF"
    NONE = "NONE"

    # Recipient types whose identifiers are team names
    TEAM_RECIPIENTS = frozenset({TEAMS, OWN_TEAM})
    # Recipient types whose identifiers are student emails
    STUDENT_RECIPIENTS = frozenset({STUDENTS, OWN_TEAM_MEMBERS, OWN_TEAM_MEMBERS_INCLUDING_SELF})
    STUDENT_GIVERS = frozenset({STUDENTS, TEAMS})
    INSTRUCTOR_GIVERS = frozenset({INSTRUCTORS, SELF})


class Intent:
    STUDENT_SUBMISSION = "STUDENT_SUBMISSION"
    INSTRUCTOR_SUBMISSION = "INSTRUCTOR_SUBMISSION"
    STUDENT_RESULT = "STUDENT_RESULT"
    INSTRUCTOR_RESULT = "INSTRUCTOR_RESULT"

    SUBMISSION = frozenset({STUDENT_SUBMISSION, INSTRUCTOR_SUBMISSION})
    RESULT = frozenset({STUDENT_RESULT, INSTRUCTOR_RESULT})


# Recipient identifier used when a question has no specific recipient
GENERAL_RECIPIENT = "%GENERAL%"


__all__ = ["FeedbackParticipantType", "Intent", "GENERAL_RECIPIENT"]
