"""Question-type specific validation of merged responses.

Rules receive the question configuration and the details of every response
as it will look after the operation, and return human readable error
messages. An empty list means the answer set may be committed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Dict, List, Sequence

from app.models.domain import FeedbackQuestion, Roster
from app.models.participant_type import FeedbackParticipantType as P
from app.models.question_details import QuestionType

logger = logging.getLogger(__name__)

Rule = Callable[[Any, Sequence[Any]], List[str]]

# Tolerance when checking that a scale answer sits on a step boundary
_STEP_EPSILON = 1e-9


def _validate_text(config: Any, records: Sequence[Any]) -> List[str]:
    errors: List[str] = []
    for record in records:
        if not record.details.answer.strip():
            errors.append(f"Text response for {record.recipient} cannot be empty")
    return errors


def _validate_mcq(config: Any, records: Sequence[Any]) -> List[str]:
    errors: List[str] = []
    for record in records:
        details = record.details
        if details.is_other:
            if not config.other_enabled:
                errors.append("'Other' is not an option for this question")
            elif not details.other_field_content.strip():
                errors.append(f"'Other' response for {record.recipient} cannot be empty")
        elif details.answer not in config.choices:
            errors.append(f"{details.answer!r} is not a valid option for this question")
    return errors


def _validate_numscale(config: Any, records: Sequence[Any]) -> List[str]:
    errors: List[str] = []
    for record in records:
        answer = record.details.answer
        if not math.isfinite(answer):
            errors.append(f"Response for {record.recipient} must be a finite number")
            continue
        if answer < config.min_scale or answer > config.max_scale:
            errors.append(
                f"{answer:g} is out of the range [{config.min_scale}, {config.max_scale}]"
            )
            continue
        steps = (answer - config.min_scale) / config.step
        if abs(steps - round(steps)) > _STEP_EPSILON:
            errors.append(f"{answer:g} is not a valid value for step {config.step:g}")
    return errors


def _validate_constsum(config: Any, records: Sequence[Any]) -> List[str]:
    errors: List[str] = []
    answers = [tuple(record.details.answers) for record in records]
    if any(point < 0 for entry in answers for point in entry):
        return ["Points cannot be negative"]

    if config.distribute_to_recipients:
        if any(len(entry) != 1 for entry in answers):
            return ["Each recipient must be given exactly one points value"]
        total = config.points * len(answers) if config.points_per_option else config.points
        given = [entry[0] for entry in answers]
        if sum(given) != total:
            errors.append(f"Points distributed to recipients must add up to {total}, got {sum(given)}")
        if config.force_uneven_distribution and len(set(given)) != len(given):
            errors.append("Every recipient must be given a different number of points")
        return errors

    total = config.points * len(config.options) if config.points_per_option else config.points
    for record, entry in zip(records, answers):
        if len(entry) != len(config.options):
            errors.append(
                f"Response for {record.recipient} must distribute points over {len(config.options)} options"
            )
            continue
        if sum(entry) != total:
            errors.append(f"Points for {record.recipient} must add up to {total}, got {sum(entry)}")
        if config.force_uneven_distribution and len(set(entry)) != len(entry):
            errors.append(f"Every option must be given a different number of points for {record.recipient}")
    return errors


RULES: Dict[str, Rule] = {
    QuestionType.TEXT: _validate_text,
    QuestionType.MCQ: _validate_mcq,
    QuestionType.NUMSCALE: _validate_numscale,
    QuestionType.CONSTSUM: _validate_constsum,
}


def populate_generated_options(question: FeedbackQuestion, roster: Roster) -> FeedbackQuestion:
    """Return the question with MCQ choices generated from the roster.

    Questions without generated options are returned unchanged.
    """
    config = question.details
    source = getattr(config, "generate_options_for", P.NONE)
    if question.question_type != QuestionType.MCQ or source == P.NONE:
        return question
    if source == P.STUDENTS:
        choices = [s.name for s in roster.students]
    elif source == P.TEAMS:
        choices = list(roster.teams())
    elif source == P.INSTRUCTORS:
        choices = [i.name for i in roster.instructors]
    else:
        logger.warning("mcq_generate_options_unknown question_id=%s source=%s", question.question_id, source)
        return question
    return replace(question, details=config.model_copy(update={"choices": choices}))


def validate(question: FeedbackQuestion, merged_records: Sequence[Any]) -> List[str]:
    """Validate merged responses for a question; return all error messages."""
    mismatched = [r for r in merged_records if r.details.question_type != question.question_type]
    if mismatched:
        return [
            f"Response for {r.recipient} is a {r.details.question_type} response "
            f"but the question is {question.question_type}"
            for r in mismatched
        ]
    rule = RULES.get(question.question_type)
    if rule is None:
        return [f"Unsupported question type {question.question_type}"]
    errors = rule(question.details, merged_records)
    if errors:
        logger.info(
            "responses_validation_failed question_id=%s errors=%d", question.question_id, len(errors)
        )
    return errors


__all__ = ["RULES", "populate_generated_options", "validate"]
