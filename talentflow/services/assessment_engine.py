"""
Assessment form engine.

Decides which questions of an assessment are visible for a given set of
answers and validates those answers against each question's type, required
flag and validation rules.

Conditional logic is single level: a question looks only at the answer of the
question it depends on. A question that is itself hidden counts as unanswered,
so chains of dependent questions collapse naturally when an earlier answer
changes.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Sequence

from talentflow.schemas.assessment import (
    ConditionOperator,
    ConditionalLogic,
    Question,
    QuestionType,
)

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "This field is required"


def is_empty(answer: Any) -> bool:
    """None, blank strings and empty collections count as unanswered."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, tuple, dict)):
        return len(answer) == 0
    return False


def _referenced_id(logic: ConditionalLogic, questions: Sequence[Question]) -> Optional[str]:
    if isinstance(logic.depends_on, int):
        if 0 <= logic.depends_on < len(questions):
            return questions[logic.depends_on].id
        return None
    return logic.depends_on


def _equals(answer: Any, expected: Any) -> bool:
    if isinstance(answer, list):
        return expected in answer
    if isinstance(answer, (int, float)) and isinstance(expected, str):
        return str(answer) == expected
    return answer == expected


def condition_met(logic: ConditionalLogic, answer: Any) -> bool:
    """Evaluate one conditional rule against the referenced answer."""
    if is_empty(answer):
        return False

    if logic.condition == ConditionOperator.EQUALS:
        return _equals(answer, logic.value)
    if logic.condition == ConditionOperator.NOT_EQUALS:
        return not _equals(answer, logic.value)
    if logic.condition == ConditionOperator.CONTAINS:
        if isinstance(answer, list):
            return logic.value in answer
        return str(logic.value).lower() in str(answer).lower()

    return False


def visible_questions(questions: Sequence[Question], responses: Dict[str, Any]) -> List[Question]:
    """
    Return the questions shown to the candidate, in order.

    Args:
        questions: Assessment questions in display order
        responses: Answers keyed by question id

    Returns:
        The subset of questions whose conditional rule (if any) is satisfied
    """
    visible_ids = set()
    shown = []

    for question in questions:
        logic = question.conditional_logic
        if logic is None:
            visible = True
        else:
            ref_id = _referenced_id(logic, questions)
            if ref_id is None or ref_id not in visible_ids:
                visible = False
            else:
                visible = condition_met(logic, responses.get(ref_id))

        if visible:
            visible_ids.add(question.id)
            shown.append(question)

    return shown


def _validate_text(question: Question, answer: Any) -> Optional[str]:
    if not isinstance(answer, str):
        return "Answer must be text"

    rules = question.validation
    if rules.min_length is not None and len(answer) < rules.min_length:
        return f"Answer must be at least {rules.min_length} characters"
    if rules.max_length is not None and len(answer) > rules.max_length:
        return f"Answer must be at most {rules.max_length} characters"
    if rules.pattern and not re.fullmatch(rules.pattern, answer):
        return "Answer has an invalid format"
    return None


def _validate_numeric(question: Question, answer: Any) -> Optional[str]:
    if isinstance(answer, bool):
        return "Answer must be a number"
    try:
        value = float(answer)
    except (TypeError, ValueError, OverflowError):
        return "Answer must be a number"
    if not math.isfinite(value):
        return "Answer must be a number"

    rules = question.validation
    if rules.min is not None and value < rules.min:
        return f"Answer must be at least {rules.min:g}"
    if rules.max is not None and value > rules.max:
        return f"Answer must be at most {rules.max:g}"
    return None


def _validate_single_choice(question: Question, answer: Any) -> Optional[str]:
    if answer not in question.options:
        return "Answer must be one of the listed options"
    return None


def _validate_multi_choice(question: Question, answer: Any) -> Optional[str]:
    if not isinstance(answer, list):
        return "Answer must be a list of options"
    invalid = [a for a in answer if a not in question.options]
    if invalid:
        return f"Unknown option(s): {', '.join(map(str, invalid))}"
    return None


def _validate_file_upload(question: Question, answer: Any) -> Optional[str]:
    if isinstance(answer, str):
        return None
    if isinstance(answer, dict) and isinstance(answer.get("name"), str) and answer["name"].strip():
        return None
    return "Answer must be an uploaded file"


_VALIDATORS = {
    QuestionType.SHORT_TEXT: _validate_text,
    QuestionType.LONG_TEXT: _validate_text,
    QuestionType.NUMERIC: _validate_numeric,
    QuestionType.SINGLE_CHOICE: _validate_single_choice,
    QuestionType.MULTI_CHOICE: _validate_multi_choice,
    QuestionType.FILE_UPLOAD: _validate_file_upload,
}


def validate_answer(question: Question, answer: Any) -> Optional[str]:
    """Return an error message for a single answer, or None if it is acceptable."""
    if is_empty(answer):
        return REQUIRED_MESSAGE if question.required else None
    return _VALIDATORS[question.type](question, answer)


def validate_responses(questions: Sequence[Question], responses: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate answers for every visible question.

    Hidden questions are never validated, even when required.

    Returns:
        Mapping of question id to error message; empty when the form is valid
    """
    errors = {}
    for question in visible_questions(questions, responses):
        message = validate_answer(question, responses.get(question.id))
        if message:
            errors[question.id] = message

    if errors:
        logger.debug(f"Assessment answers failed validation: {errors}")
    return errors


def clean_responses(questions: Sequence[Question], responses: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only answers to visible questions; unknown keys are dropped."""
    return {
        q.id: responses[q.id]
        for q in visible_questions(questions, responses)
        if q.id in responses
    }
