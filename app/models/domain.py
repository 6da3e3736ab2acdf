"""Immutable domain types shared by the submission pipeline.

Repositories build these from rows; the access gate, resolver, reconciler
and validator only ever read them. Changes are expressed as new values
(`dataclasses.replace`) or as explicit descriptors, never by mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from app.models.participant_type import FeedbackParticipantType


@dataclass(frozen=True)
class FeedbackSession:
    course_id: str
    session_name: str
    opens_at: datetime
    closes_at: datetime
    grace_period_minutes: int = 0

    def is_open(self, now: datetime) -> bool:
        """Return True while submissions are accepted, grace period included."""
        return self.opens_at <= now < self.closes_at + timedelta(minutes=self.grace_period_minutes)


@dataclass(frozen=True)
class FeedbackQuestion:
    question_id: str
    course_id: str
    session_name: str
    giver_type: str
    recipient_type: str
    details: Any
    question_number: int = 1
    question_text: str = ""
    show_responses_to: Tuple[str, ...] = ()

    @property
    def question_type(self) -> str:
        return self.details.question_type

    @property
    def is_team_giver(self) -> bool:
        return self.giver_type == FeedbackParticipantType.TEAMS


@dataclass(frozen=True)
class Student:
    email: str
    name: str
    team: str
    section: str


@dataclass(frozen=True)
class Instructor:
    email: str
    name: str
    can_submit: bool = True
    can_moderate: bool = False


@dataclass(frozen=True)
class Roster:
    """Read-only snapshot of a course's participants."""

    course_id: str
    students: Tuple[Student, ...] = ()
    instructors: Tuple[Instructor, ...] = ()
    _students_by_email: Dict[str, Student] = field(init=False, repr=False, compare=False)
    _instructors_by_email: Dict[str, Instructor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_students_by_email", {s.email: s for s in self.students})
        object.__setattr__(self, "_instructors_by_email", {i.email: i for i in self.instructors})

    def student(self, email: str) -> Optional[Student]:
        return self._students_by_email.get(email)

    def instructor(self, email: str) -> Optional[Instructor]:
        return self._instructors_by_email.get(email)

    def teams(self) -> Tuple[str, ...]:
        """Team names in first-seen roster order."""
        return tuple(dict.fromkeys(s.team for s in self.students))

    def members_of(self, team: str) -> Tuple[Student, ...]:
        return tuple(s for s in self.students if s.team == team)

    def section_of_team(self, team: str) -> Optional[str]:
        for s in self.students:
            if s.team == team:
                return s.section
        return None


@dataclass(frozen=True)
class ResponseRecord:
    response_id: str
    question_id: str
    course_id: str
    session_name: str
    giver: str
    giver_section: str
    recipient: str
    recipient_section: str
    details: Any


@dataclass(frozen=True)
class CreateDescriptor:
    question_id: str
    course_id: str
    session_name: str
    giver: str
    giver_section: str
    recipient: str
    recipient_section: str
    details: Any


@dataclass(frozen=True)
class UpdateDescriptor:
    """Full replacement of every mutable field of one stored response."""

    response_id: str
    giver: str
    giver_section: str
    recipient: str
    recipient_section: str
    details: Any

    @classmethod
    def from_merged(cls, merged: ResponseRecord) -> "UpdateDescriptor":
        return cls(
            response_id=merged.response_id,
            giver=merged.giver,
            giver_section=merged.giver_section,
            recipient=merged.recipient,
            recipient_section=merged.recipient_section,
            details=merged.details,
        )


@dataclass(frozen=True)
class ReconciliationPlan:
    creates: Tuple[CreateDescriptor, ...] = ()
    updates: Tuple[UpdateDescriptor, ...] = ()
    deletes: Tuple[ResponseRecord, ...] = ()
    # Records as they will look once committed, in request order
    merged: Tuple[Any, ...] = ()
    delete_all: bool = False


__all__ = [
    "FeedbackSession",
    "FeedbackQuestion",
    "Student",
    "Instructor",
    "Roster",
    "ResponseRecord",
    "CreateDescriptor",
    "UpdateDescriptor",
    "ReconciliationPlan",
]
