"""
Shared offline fixtures: in-memory stores, a scripted LLM provider and an
eligible applicant. No Supabase connection or LLM calls are made.
"""
import json
import os
import sys

import pytest

# Ensure backend/ is on the path when running from project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from talentgate.models.assessment import (
    Application,
    AssessmentConfig,
    Job,
    ResumeProfile,
    User,
)
from talentgate.services.ai_gateway import AIGateway
from talentgate.services.assessment_pipeline import AssessmentGenerator
from talentgate.services.ledger import InMemoryLedger
from talentgate.services.llm_providers import LLMProvider
from talentgate.services.question_log import InMemoryQuestionLogStore
from talentgate.services.records import in_memory_record_stores

JOB_ID = "job-1"
USER_ID = "user-1"


class ScriptedProvider(LLMProvider):
    """Returns queued responses in order; an Exception entry is raised."""

    def __init__(self, responses, name="scripted"):
        self.responses = list(responses)
        self.name = name
        self.calls = 0

    async def complete(self, system: str, user: str) -> str:
        self.calls += 1
        if not self.responses:
            raise RuntimeError("no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def mcq(text, options=None, correct=0, skill="Node"):
    return {
        "type": "mcq",
        "skill": skill,
        "question": text,
        "options": options if options is not None else ["A", "B", "C", "D"],
        "correctAnswer": correct,
    }


def coding(text, starter="function solve() {}", skill="SQL"):
    q = {"type": "coding", "skill": skill, "question": text}
    if starter is not None:
        q["starterCode"] = starter
    return q


def as_json(questions, wrap=True):
    return json.dumps({"questions": questions} if wrap else questions)


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


@pytest.fixture
def job():
    return Job(
        id=JOB_ID,
        title="Backend Engineer",
        skills=["Node", "SQL"],
        assessment=AssessmentConfig(enabled=True, total_questions=5, type="mixed"),
        min_percentage=60,
    )


@pytest.fixture
def stores(job):
    s = in_memory_record_stores()
    s.jobs.add(job)
    s.users.add(User(uid=USER_ID, name="Asha"))
    s.resume_profiles.add(ResumeProfile(user_id=USER_ID))
    s.applications.add(Application(job_id=JOB_ID, user_id=USER_ID, resume_match_percent=72))
    return s


@pytest.fixture
def question_log():
    return InMemoryQuestionLogStore()


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def make_generator(stores, question_log, ledger):
    def _make(*providers, ledger_override=None, verbose_errors=True, max_attempts=3):
        gateway = AIGateway(
            providers=list(providers),
            max_attempts=max_attempts,
            backoff_base_ms=0,
            min_chars=20,
            timeout_seconds=None,
        )
        return AssessmentGenerator(
            stores=stores,
            question_log=question_log,
            ledger=ledger_override or ledger,
            gateway=gateway,
            coin_cost=20,
            verbose_errors=verbose_errors,
        )
    return _make
