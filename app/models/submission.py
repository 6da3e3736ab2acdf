"""Pydantic request and response bodies for the responses endpoints."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator

from app.models.domain import ResponseRecord
from app.models.question_details import ResponseDetails


class FeedbackResponseEntry(BaseModel):
    recipient: str = Field(min_length=1)
    details: ResponseDetails


class FeedbackResponsesRequest(BaseModel):
    """Complete replacement answer set for one question.

    `recipients` is authoritative for deletion scope; every recipient named in
    `responses` must appear in it and at most once in `responses`.
    """

    recipients: List[str] = Field(default_factory=list)
    responses: List[FeedbackResponseEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _responses_within_recipients(self) -> "FeedbackResponsesRequest":
        seen: set[str] = set()
        for entry in self.responses:
            if entry.recipient in seen:
                raise ValueError(f"duplicate response for recipient {entry.recipient}")
            seen.add(entry.recipient)
        missing = seen - set(self.recipients)
        if self.responses and missing:
            raise ValueError(f"responses name recipients absent from recipients: {sorted(missing)}")
        return self


class FeedbackResponseData(BaseModel):
    response_id: str
    question_id: str
    giver: str
    giver_section: str
    recipient: str
    recipient_section: str
    details: ResponseDetails

    @classmethod
    def from_record(cls, record: ResponseRecord) -> "FeedbackResponseData":
        return cls(
            response_id=record.response_id,
            question_id=record.question_id,
            giver=record.giver,
            giver_section=record.giver_section,
            recipient=record.recipient,
            recipient_section=record.recipient_section,
            details=record.details,
        )


class FeedbackResponsesData(BaseModel):
    responses: List[FeedbackResponseData]


__all__ = [
    "FeedbackResponseEntry",
    "FeedbackResponsesRequest",
    "FeedbackResponseData",
    "FeedbackResponsesData",
]
