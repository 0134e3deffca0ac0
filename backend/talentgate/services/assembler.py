import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from talentgate.core.errors import InsufficientUniqueQuestions
from talentgate.models.assessment import (
    MIN_ACCEPTED_QUESTIONS,
    GeneratedQuestion,
    GenerationResult,
    QuestionLogEntry,
)
from talentgate.services.hashing import derive_session_id
from talentgate.services.question_log import QuestionLogStore
from talentgate.services.question_validator import validate_question

logger = logging.getLogger("talentgate.assembler")


def assemble_questions(
    candidates: Iterable[Any],
    *,
    user_id: str,
    job_id: str,
    total_questions: int,
    history_hashes: set[str],
    question_log: QuestionLogStore,
    now: Optional[datetime] = None,
) -> GenerationResult:
    """Validate, dedup and persist candidates; build the run result.

    ``history_hashes`` is the user's logged history, loaded once at run start.
    It is copied, not mutated. A failed log write is logged and the question
    is still served.
    """
    seen = set(history_hashes)
    accepted: list[GeneratedQuestion] = []
    rejected = 0

    for i, raw in enumerate(candidates):
        if len(accepted) >= total_questions:
            logger.info("Reached %d questions, dropping remaining candidates", total_questions)
            break

        outcome = validate_question(raw, seen)
        if not outcome.accepted:
            rejected += 1
            logger.info("Candidate %d rejected: %s", i + 1, outcome.reason)
            continue

        q = outcome.question
        seen.add(outcome.hash)
        try:
            question_log.create(QuestionLogEntry(
                user_id=user_id,
                question_text=q.question,
                skill=q.skill,
                difficulty="medium",
                category=q.type.upper(),
                hash=outcome.hash,
            ))
        except Exception as exc:
            logger.warning("QuestionLog write failed for user %s (soft-fail): %s", user_id, exc)
        accepted.append(q)

    if len(accepted) < MIN_ACCEPTED_QUESTIONS:
        logger.error(
            "Only %d questions accepted for user %s (%d rejected, need %d)",
            len(accepted), user_id, rejected, MIN_ACCEPTED_QUESTIONS,
        )
        raise InsufficientUniqueQuestions(accepted=len(accepted), minimum=MIN_ACCEPTED_QUESTIONS)

    return GenerationResult(
        session_id=derive_session_id(user_id, job_id, now),
        questions=accepted,
        total_generated=len(accepted),
    )
