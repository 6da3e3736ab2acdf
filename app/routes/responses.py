"""Feedback response submission endpoints.

Handlers only extract parameters and shape output; authorization,
reconciliation, validation and persistence live in `app.logic.submission`.
Identity is supplied by the upstream authentication layer through the
X-User-Email header.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse

from app.http.problem import PROBLEM_MEDIA_TYPE
from app.logic.problem_factory import problem_missing_identity
from app.logic.submission import list_responses, submit_responses
from app.models.submission import FeedbackResponseData, FeedbackResponsesData, FeedbackResponsesRequest

router = APIRouter()
logger = logging.getLogger(__name__)


def _missing_identity() -> JSONResponse:
    return JSONResponse(problem_missing_identity(), status_code=401, media_type=PROBLEM_MEDIA_TYPE)


@router.put(
    "/responses",
    summary="Replace the rater's responses to a feedback question",
    response_model=FeedbackResponsesData,
)
def put_feedback_responses(
    payload: FeedbackResponsesRequest,
    questionid: str = Query(..., min_length=1),
    intent: str = Query(...),
    moderatedperson: Optional[str] = Query(None),
    previewas: Optional[str] = Query(None),
    user_email: Optional[str] = Header(None, alias="X-User-Email"),
):
    """Submit a complete replacement answer set.

    Returns the created and updated responses; deleted responses are not
    listed.
    """
    if not user_email:
        return _missing_identity()
    records = submit_responses(
        questionid,
        intent,
        payload,
        user_email,
        moderated_person=moderatedperson,
        preview_as=previewas,
    )
    logger.info("responses_put question_id=%s intent=%s returned=%d", questionid, intent, len(records))
    return FeedbackResponsesData(responses=[FeedbackResponseData.from_record(r) for r in records])


@router.get(
    "/responses",
    summary="List the rater's responses to a feedback question",
    response_model=FeedbackResponsesData,
)
def get_feedback_responses(
    questionid: str = Query(..., min_length=1),
    intent: str = Query(...),
    moderatedperson: Optional[str] = Query(None),
    user_email: Optional[str] = Header(None, alias="X-User-Email"),
):
    if not user_email:
        return _missing_identity()
    records = list_responses(questionid, intent, user_email, moderated_person=moderatedperson)
    return FeedbackResponsesData(responses=[FeedbackResponseData.from_record(r) for r in records])


__all__ = ["router", "put_feedback_responses", "get_feedback_responses"]
