"""
Pydantic schemas for assessments, their questions, and submitted answers.

Question definitions are validated here as a set (unique ids, options on
choice questions, conditional rules pointing backwards) so that the form
engine can rely on a well-formed question list.
"""

import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import Field, field_validator, model_validator

from talentflow.schemas.common import CamelModel


class QuestionType(str, Enum):
    """Supported question widgets"""
    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE_UPLOAD = "file-upload"


CHOICE_TYPES = {QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE}


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"


class QuestionValidation(CamelModel):
    """Per-question answer constraints"""
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}")
        return v


class ConditionalLogic(CamelModel):
    """
    Show the question only when another question's answer matches.

    depends_on is a question id, or a zero-based index into the question list
    (normalized to the id when the assessment is saved).
    """
    depends_on: Union[int, str]
    condition: ConditionOperator = ConditionOperator.EQUALS
    value: Any = None


class Question(CamelModel):
    id: Optional[str] = None
    type: QuestionType
    question: str = Field(..., min_length=1)
    options: List[str] = Field(default_factory=list)
    required: bool = False
    validation: QuestionValidation = Field(default_factory=QuestionValidation)
    conditional_logic: Optional[ConditionalLogic] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        # Seeded data uses numeric ids
        return str(v) if v is not None else None

    @field_validator("validation", mode="before")
    @classmethod
    def empty_validation(cls, v: Any) -> Any:
        return {} if v is None else v


class AssessmentCreateRequest(CamelModel):
    """Assessment definition as produced by the builder"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    questions: List[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_question_set(self) -> "AssessmentCreateRequest":
        seen_ids = []
        for index, question in enumerate(self.questions):
            if not question.id:
                question.id = uuid.uuid4().hex[:12]
            if question.id in seen_ids:
                raise ValueError(f"Duplicate question id '{question.id}'")

            if question.type in CHOICE_TYPES and not question.options:
                raise ValueError(f"Question '{question.id}' needs at least one option")

            logic = question.conditional_logic
            if logic is not None:
                if isinstance(logic.depends_on, int):
                    if not 0 <= logic.depends_on < index:
                        raise ValueError(
                            f"Question '{question.id}' can only depend on an earlier question"
                        )
                    logic.depends_on = self.questions[logic.depends_on].id
                elif logic.depends_on not in seen_ids:
                    raise ValueError(
                        f"Question '{question.id}' can only depend on an earlier question"
                    )

            seen_ids.append(question.id)
        return self


class AssessmentUpdateRequest(AssessmentCreateRequest):
    pass


class AssessmentResponse(CamelModel):
    id: int
    job_id: int
    title: str
    description: str
    questions: List[Question]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssessmentSaveResponse(CamelModel):
    success: bool = True
    assessment: AssessmentResponse
    message: str


class SubmissionRequest(CamelModel):
    """A candidate's answers keyed by question id"""
    candidate_id: int
    responses: Dict[str, Any] = Field(default_factory=dict)


class SubmissionResponse(CamelModel):
    id: int
    assessment_id: int
    candidate_id: int
    responses: Dict[str, Any]
    score: Optional[float] = None
    submitted_at: Optional[datetime] = None


class SubmitResultResponse(CamelModel):
    success: bool = True
    message: str
    response: SubmissionResponse
