"""Recipient resolution for feedback questions.

Pure helpers over a read-only roster snapshot: which recipients a giver may
answer for a question, and which section a recipient belongs to.
"""

from __future__ import annotations

from typing import Dict

from app.logic.submitter import SubmitterContext
from app.models.domain import FeedbackQuestion, Roster
from app.models.participant_type import FeedbackParticipantType as P
from app.models.participant_type import GENERAL_RECIPIENT


def resolve_recipients(question: FeedbackQuestion, submitter: SubmitterContext, roster: Roster) -> Dict[str, str]:
    """Return recipient identifier -> display name, in roster order.

    Student recipients are identified by email, team recipients by team name
    and the general recipient by `%GENERAL%`.
    """
    rtype = question.recipient_type
    recipients: Dict[str, str] = {}

    if rtype == P.SELF:
        recipients[submitter.giver_identifier] = "Myself"
    elif rtype == P.STUDENTS:
        exclude_self = not submitter.is_instructor
        for s in roster.students:
            if exclude_self and s.email == submitter.email:
                continue
            recipients[s.email] = s.name
    elif rtype == P.INSTRUCTORS:
        for i in roster.instructors:
            if submitter.is_instructor and i.email == submitter.email:
                continue
            recipients[i.email] = i.name
    elif rtype == P.TEAMS:
        for team in roster.teams():
            if team == submitter.team:
                continue
            recipients[team] = team
    elif rtype == P.OWN_TEAM:
        if submitter.team:
            recipients[submitter.team] = submitter.team
    elif rtype in (P.OWN_TEAM_MEMBERS, P.OWN_TEAM_MEMBERS_INCLUDING_SELF):
        if submitter.team:
            for s in roster.members_of(submitter.team):
                if rtype == P.OWN_TEAM_MEMBERS and s.email == submitter.email:
                    continue
                recipients[s.email] = s.name
    elif rtype == P.NONE:
        recipients[GENERAL_RECIPIENT] = "General"
    return recipients


def recipient_section(question: FeedbackQuestion, recipient: str, roster: Roster, default_section: str) -> str:
    """Derive a recipient's section from current roster data."""
    rtype = question.recipient_type
    if rtype == P.SELF:
        # The recipient is the giver, so the giver type decides the lookup
        if question.giver_type == P.TEAMS:
            return roster.section_of_team(recipient) or default_section
        if question.giver_type == P.STUDENTS:
            student = roster.student(recipient)
            return student.section if student else default_section
        return default_section
    if rtype in P.TEAM_RECIPIENTS:
        return roster.section_of_team(recipient) or default_section
    if rtype in P.STUDENT_RECIPIENTS:
        student = roster.student(recipient)
        return student.section if student else default_section
    return default_section


__all__ = ["resolve_recipients", "recipient_section"]
