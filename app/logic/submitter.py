"""Submitter contexts for student and instructor submissions.

A submitter context tells the rest of the pipeline who is giving feedback:
the giver identifier stored on responses, the giver's section and how to
find the responses previously stored for this giver. The reconciler only
sees this interface, never the submission role.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from app.models.domain import FeedbackQuestion, Instructor, ResponseRecord, Student
from app.models.participant_type import Intent

ExistingLookup = Callable[[str, str], List[ResponseRecord]]


@dataclass(frozen=True)
class SubmitterContext:
    intent: str
    email: str
    giver_identifier: str
    giver_section: str
    team: Optional[str] = None
    is_instructor: bool = False

    def existing_responses(self, question: FeedbackQuestion, lookup: ExistingLookup) -> List[ResponseRecord]:
        """Return responses previously stored for this giver on the question."""
        return list(lookup(question.question_id, self.giver_identifier))


def student_submitter(question: FeedbackQuestion, student: Student) -> SubmitterContext:
    """Team questions are answered on behalf of the student's team."""
    giver = student.team if question.is_team_giver else student.email
    return SubmitterContext(
        intent=Intent.STUDENT_SUBMISSION,
        email=student.email,
        giver_identifier=giver,
        giver_section=student.section,
        team=student.team,
    )


def instructor_submitter(instructor: Instructor, default_section: str) -> SubmitterContext:
    return SubmitterContext(
        intent=Intent.INSTRUCTOR_SUBMISSION,
        email=instructor.email,
        giver_identifier=instructor.email,
        giver_section=default_section,
        is_instructor=True,
    )


__all__ = ["SubmitterContext", "student_submitter", "instructor_submitter"]
