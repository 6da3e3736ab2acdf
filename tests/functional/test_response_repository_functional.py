"""Persistence gateway calls against the functional SQLite store."""

from __future__ import annotations

import pytest

from app.logic import repository_responses as repo
from app.logic.errors import EntityAlreadyExistsError, EntityDoesNotExistError
from app.models.domain import CreateDescriptor, UpdateDescriptor
from app.models.question_details import TextResponseDetails

from conftest import ALICE, BOB, CAROL, COURSE, OPEN_SESSION, Q_TEXT, add_comment, fetch_all


def _create(recipient: str, answer: str = "hello"):
    return repo.create_response(
        CreateDescriptor(
            question_id=Q_TEXT,
            course_id=COURSE,
            session_name=OPEN_SESSION,
            giver=ALICE,
            giver_section="Section 1",
            recipient=recipient,
            recipient_section="Section 1",
            details=TextResponseDetails(answer=answer),
        )
    )


def test_created_response_can_be_read_back():
    created = _create(BOB)

    assert repo.get_response(created.response_id) == created
    assert repo.get_responses_from_giver_for_question(Q_TEXT, ALICE) == [created]
    assert repo.get_response("missing") is None


def test_duplicate_triple_is_rejected():
    _create(BOB)

    with pytest.raises(EntityAlreadyExistsError):
        _create(BOB, "again")


def test_update_of_missing_response_is_rejected():
    descriptor = UpdateDescriptor(
        response_id="missing",
        giver=ALICE,
        giver_section="Section 1",
        recipient=BOB,
        recipient_section="Section 1",
        details=TextResponseDetails(answer="x"),
    )

    with pytest.raises(EntityDoesNotExistError):
        repo.update_response_cascade(descriptor)


def test_update_into_an_existing_triple_is_rejected():
    _create(BOB)
    carol = _create(CAROL)

    with pytest.raises(EntityAlreadyExistsError):
        repo.update_response_cascade(
            UpdateDescriptor(
                response_id=carol.response_id,
                giver=ALICE,
                giver_section="Section 1",
                recipient=BOB,
                recipient_section="Section 1",
                details=TextResponseDetails(answer="x"),
            )
        )
    assert repo.get_response(carol.response_id) == carol


def test_update_moves_comment_sections_with_the_response():
    created = _create(CAROL)
    add_comment(created.response_id)

    updated = repo.update_response_cascade(
        UpdateDescriptor(
            response_id=created.response_id,
            giver=ALICE,
            giver_section="Section 9",
            recipient=CAROL,
            recipient_section="Section 2",
            details=TextResponseDetails(answer="changed"),
        )
    )

    assert repo.get_response(created.response_id) == updated
    assert fetch_all("SELECT giver_section, receiver_section FROM feedback_response_comment") == [
        ("Section 9", "Section 2")
    ]


def test_bulk_delete_only_touches_one_giver():
    first = _create(BOB)
    add_comment(first.response_id)
    _create(CAROL)
    other = repo.create_response(
        CreateDescriptor(
            question_id=Q_TEXT,
            course_id=COURSE,
            session_name=OPEN_SESSION,
            giver=BOB,
            giver_section="Section 1",
            recipient=ALICE,
            recipient_section="Section 1",
            details=TextResponseDetails(answer="hi"),
        )
    )

    assert repo.delete_responses_from_giver_for_question(Q_TEXT, ALICE) == 2
    assert repo.get_responses_from_giver_for_question(Q_TEXT, ALICE) == []
    assert repo.get_response(other.response_id) == other
    assert fetch_all("SELECT comment_id FROM feedback_response_comment") == []


def test_single_delete_ignores_missing_rows():
    created = _create(BOB)

    repo.delete_response_cascade(created.response_id)
    repo.delete_response_cascade(created.response_id)

    assert repo.get_response(created.response_id) is None
