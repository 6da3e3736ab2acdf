"""Pydantic models for question configuration and response detail payloads.

Both families are discriminated on `question_type` so that a stored JSON
document can be parsed back into the right concrete model without a lookup
table.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class QuestionType:
    TEXT = "TEXT"
    MCQ = "MCQ"
    NUMSCALE = "NUMSCALE"
    CONSTSUM = "CONSTSUM"


# ---------------------------------------------------------------------------
# Question configuration (supplied by the question author)
# ---------------------------------------------------------------------------


class TextQuestionDetails(BaseModel):
    question_type: Literal["TEXT"] = "TEXT"
    recommended_length: int | None = Field(default=None, gt=0)


class McqQuestionDetails(BaseModel):
    question_type: Literal["MCQ"] = "MCQ"
    choices: List[str] = Field(default_factory=list)
    other_enabled: bool = False
    # STUDENTS, TEAMS or INSTRUCTORS to derive choices from the course roster
    generate_options_for: str = "NONE"


class NumScaleQuestionDetails(BaseModel):
    question_type: Literal["NUMSCALE"] = "NUMSCALE"
    min_scale: int = 1
    max_scale: int = 5
    step: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def _scale_is_ordered(self) -> "NumScaleQuestionDetails":
        if self.min_scale >= self.max_scale:
            raise ValueError("min_scale must be less than max_scale")
        return self


class ConstSumQuestionDetails(BaseModel):
    question_type: Literal["CONSTSUM"] = "CONSTSUM"
    options: List[str] = Field(default_factory=list)
    distribute_to_recipients: bool = False
    points: int = Field(default=100, gt=0)
    points_per_option: bool = False
    force_uneven_distribution: bool = False


QuestionDetails = Annotated[
    Union[TextQuestionDetails, McqQuestionDetails, NumScaleQuestionDetails, ConstSumQuestionDetails],
    Field(discriminator="question_type"),
]


# ---------------------------------------------------------------------------
# Response details (supplied by the rater)
# ---------------------------------------------------------------------------


class TextResponseDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_type: Literal["TEXT"] = "TEXT"
    answer: str


class McqResponseDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_type: Literal["MCQ"] = "MCQ"
    answer: str = ""
    is_other: bool = False
    other_field_content: str = ""


class NumScaleResponseDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_type: Literal["NUMSCALE"] = "NUMSCALE"
    answer: float


class ConstSumResponseDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_type: Literal["CONSTSUM"] = "CONSTSUM"
    answers: tuple[int, ...] = ()


ResponseDetails = Annotated[
    Union[TextResponseDetails, McqResponseDetails, NumScaleResponseDetails, ConstSumResponseDetails],
    Field(discriminator="question_type"),
]

_QUESTION_DETAILS_ADAPTER: TypeAdapter = TypeAdapter(QuestionDetails)
_RESPONSE_DETAILS_ADAPTER: TypeAdapter = TypeAdapter(ResponseDetails)


def parse_question_details(raw: str | bytes | dict):
    """Parse stored question configuration (JSON text or dict)."""
    if isinstance(raw, dict):
        return _QUESTION_DETAILS_ADAPTER.validate_python(raw)
    return _QUESTION_DETAILS_ADAPTER.validate_json(raw)


def parse_response_details(raw: str | bytes | dict):
    """Parse stored response details (JSON text or dict)."""
    if isinstance(raw, dict):
        return _RESPONSE_DETAILS_ADAPTER.validate_python(raw)
    return _RESPONSE_DETAILS_ADAPTER.validate_json(raw)


__all__ = [
    "QuestionType",
    "TextQuestionDetails",
    "McqQuestionDetails",
    "NumScaleQuestionDetails",
    "ConstSumQuestionDetails",
    "QuestionDetails",
    "TextResponseDetails",
    "McqResponseDetails",
    "NumScaleResponseDetails",
    "ConstSumResponseDetails",
    "ResponseDetails",
    "parse_question_details",
    "parse_response_details",
]
