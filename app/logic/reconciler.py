"""Reconciliation of stored responses against a replacement answer set.

Given the responses already stored for one (question, giver) pair and the
complete answer set submitted now, compute the create, update and delete
operations that make the store match the submission. The function is pure:
it performs no I/O and returns an immutable plan.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, List, Protocol, Sequence

from app.logic.recipients import recipient_section
from app.logic.submitter import SubmitterContext
from app.models.domain import (
    CreateDescriptor,
    FeedbackQuestion,
    ReconciliationPlan,
    ResponseRecord,
    Roster,
    UpdateDescriptor,
)


class ResponseEntry(Protocol):
    recipient: str
    details: Any


def reconcile(
    question: FeedbackQuestion,
    submitter: SubmitterContext,
    existing: Sequence[ResponseRecord],
    entries: Sequence[ResponseEntry],
    recipients: Iterable[str],
    roster: Roster,
    default_section: str,
) -> ReconciliationPlan:
    """Diff existing responses against the submitted entries.

    - No entries: every existing response of the giver is deleted and
      `recipients` is ignored.
    - Entry for a recipient with a stored response: update descriptor that
      replaces giver, sections, recipient and details.
    - Entry for a new recipient: create descriptor.
    - Stored response whose recipient is not in `recipients`: delete.
    """
    if not entries:
        return ReconciliationPlan(deletes=tuple(existing), delete_all=True)

    by_recipient = {record.recipient: record for record in existing}
    creates: List[CreateDescriptor] = []
    updates: List[UpdateDescriptor] = []
    merged: List[Any] = []

    for entry in entries:
        section = recipient_section(question, entry.recipient, roster, default_section)
        current = by_recipient.get(entry.recipient)
        if current is not None:
            updated = replace(
                current,
                giver=submitter.giver_identifier,
                giver_section=submitter.giver_section,
                recipient=entry.recipient,
                recipient_section=section,
                details=entry.details,
            )
            updates.append(UpdateDescriptor.from_merged(updated))
            merged.append(updated)
        else:
            created = CreateDescriptor(
                question_id=question.question_id,
                course_id=question.course_id,
                session_name=question.session_name,
                giver=submitter.giver_identifier,
                giver_section=submitter.giver_section,
                recipient=entry.recipient,
                recipient_section=section,
                details=entry.details,
            )
            creates.append(created)
            merged.append(created)

    keep = set(recipients)
    deletes = tuple(record for record in existing if record.recipient not in keep)

    return ReconciliationPlan(
        creates=tuple(creates),
        updates=tuple(updates),
        deletes=deletes,
        merged=tuple(merged),
    )


__all__ = ["reconcile", "ResponseEntry"]
