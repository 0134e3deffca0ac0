from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_QUESTIONS = 10
DEFAULT_QUESTIONS = 5
MIN_ACCEPTED_QUESTIONS = 3

AssessmentType = Literal["mcq", "coding", "mixed"]
QuestionType = Literal["mcq", "coding"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssessmentConfig(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    enabled: bool = False
    total_questions: int = DEFAULT_QUESTIONS
    type: AssessmentType = "mixed"
    passing_score: int = 70

    @field_validator("enabled", mode="before")
    @classmethod
    def _coerce_enabled(cls, v):
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return bool(v) if v is not None else False

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        if not isinstance(v, str):
            return "mixed"
        v = v.strip().lower()
        return v if v in ("mcq", "coding", "mixed") else "mixed"

    @field_validator("total_questions", "passing_score", mode="before")
    @classmethod
    def _none_to_default(cls, v, info):
        if v is None:
            return DEFAULT_QUESTIONS if info.field_name == "total_questions" else 70
        return v

    @property
    def effective_total_questions(self) -> int:
        if self.total_questions < 1:
            return DEFAULT_QUESTIONS
        return min(self.total_questions, MAX_QUESTIONS)


class Job(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str = ""
    skills: list[str] = Field(default_factory=list)
    assessment: AssessmentConfig = Field(default_factory=AssessmentConfig)
    min_percentage: int = 60

    @field_validator("min_percentage", mode="before")
    @classmethod
    def _default_min_percentage(cls, v):
        return 60 if v is None else v


class User(_CamelModel):
    uid: str
    name: str | None = None
    email: str | None = None
    coins: int | None = None


class ResumeProfile(_CamelModel):
    user_id: str


class Application(_CamelModel):
    job_id: str
    user_id: str
    resume_match_percent: float | None = None


class GeneratedQuestion(_CamelModel):
    type: QuestionType
    skill: str
    question: str
    options: list[str] | None = None
    correct_answer: int | None = None
    starter_code: str | None = None


class QuestionLogEntry(_CamelModel):
    user_id: str
    question_text: str
    skill: str = "General"
    difficulty: str = "medium"
    category: str = "MCQ"
    hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GenerationResult(_CamelModel):
    session_id: str
    questions: list[GeneratedQuestion]
    total_generated: int


# ── API wire models ──────────────────────────────────────────────────────────

class AssessmentRequest(_CamelModel):
    job_id: str | None = None
    user_id: str | None = None


class AssessmentSummary(_CamelModel):
    type: AssessmentType
    passing_score: int
    total_questions: int


class JobSummary(_CamelModel):
    title: str
    skills: list[str]
    assessment: AssessmentSummary


class AssessmentResponse(_CamelModel):
    session_id: str
    questions: list[GeneratedQuestion]
    total_generated: int
    job: JobSummary
