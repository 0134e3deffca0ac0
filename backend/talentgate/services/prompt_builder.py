"""
Renders the generation request for one assessment run.

Pure: the same job, type, count, passing score and seed always produce the
same prompt. The seed only exists to push the model towards fresh questions
on repeated runs.
"""
import secrets
from dataclasses import dataclass

from talentgate.models.assessment import Job
from talentgate.prompts.assessment_generation import (
    ASSESSMENT_GENERATION_PROMPT,
    ASSESSMENT_GENERATION_SYSTEM_PROMPT,
    TYPE_INSTRUCTIONS,
    TYPE_VALUES,
)

DEFAULT_SKILLS = ["General"]


@dataclass(frozen=True)
class GenerationPrompt:
    system: str
    user: str


def job_skills(job: Job) -> list[str]:
    skills = [s.strip() for s in job.skills if isinstance(s, str) and s.strip()]
    return skills or list(DEFAULT_SKILLS)


def build_generation_prompt(
    job: Job,
    assessment_type: str,
    total_questions: int,
    passing_score: int,
    seed: str | None = None,
) -> GenerationPrompt:
    assessment_type = assessment_type.lower()
    if assessment_type not in TYPE_INSTRUCTIONS:
        assessment_type = "mixed"

    user = ASSESSMENT_GENERATION_PROMPT.format(
        job_title=job.title or "Software Engineer",
        skills=", ".join(job_skills(job)),
        passing_score=passing_score,
        seed=seed or secrets.token_hex(8),
        total_questions=total_questions,
        type_instruction=TYPE_INSTRUCTIONS[assessment_type],
        type_values=TYPE_VALUES[assessment_type],
    )
    return GenerationPrompt(system=ASSESSMENT_GENERATION_SYSTEM_PROMPT, user=user)
