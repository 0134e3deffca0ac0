"""
Assessment generation pipeline.

Turns ``(job_id, user_id)`` into a validated, deduplicated question set:

  1. check_eligibility()        -> job / user / resume / application / match gate
  2. soft_deduct()              -> coin debit, never blocks
  3. build_generation_prompt()  -> one request for up to N questions
  4. AIGateway                  -> bounded attempts with provider fallback + repair
  5. assemble_questions()       -> validate, dedup against history, persist log
  6. AssessmentResponse         -> session id, questions, job summary

Every failure leaves as an AssessmentError; anything unexpected is wrapped in
InternalError whose message is only detailed in development.

Store, ledger and QuestionLog backends are synchronous (supabase-py), so each
of those stages runs via asyncio.to_thread and the FastAPI event loop is never
blocked by a run.
"""
import asyncio
import logging
import time
from typing import Optional

from talentgate.core.config import Settings, get_settings
from talentgate.core.errors import AssessmentError, InternalError
from talentgate.models.assessment import (
    AssessmentResponse,
    AssessmentSummary,
    JobSummary,
)
from talentgate.services.ai_gateway import AIGateway, get_ai_gateway
from talentgate.services.assembler import assemble_questions
from talentgate.services.eligibility import check_eligibility
from talentgate.services.ledger import InMemoryLedger, LedgerService, SupabaseLedger, soft_deduct
from talentgate.services.prompt_builder import build_generation_prompt
from talentgate.services.question_log import (
    InMemoryQuestionLogStore,
    QuestionLogStore,
    SupabaseQuestionLogStore,
)
from talentgate.services.records import (
    RecordStores,
    in_memory_record_stores,
    supabase_record_stores,
)

logger = logging.getLogger("talentgate.pipeline")

LEDGER_REASON = "Skill Assessment"


class AssessmentGenerator:
    def __init__(
        self,
        stores: RecordStores,
        question_log: QuestionLogStore,
        ledger: LedgerService,
        gateway: AIGateway,
        coin_cost: int = 20,
        verbose_errors: bool = False,
    ):
        self.stores = stores
        self.question_log = question_log
        self.ledger = ledger
        self.gateway = gateway
        self.coin_cost = coin_cost
        self.verbose_errors = verbose_errors

    async def generate(self, job_id: str, user_id: str) -> AssessmentResponse:
        try:
            return await self._generate(job_id, user_id)
        except AssessmentError:
            raise
        except Exception as exc:
            logger.exception("[ASSESSMENT ERROR] job=%s user=%s", job_id, user_id)
            if self.verbose_errors:
                raise InternalError(f"Assessment generation failed: {exc}") from exc
            raise InternalError() from exc

    async def _generate(self, job_id: str, user_id: str) -> AssessmentResponse:
        t0 = time.time()
        ctx = await asyncio.to_thread(check_eligibility, job_id, user_id, self.stores)
        job = ctx.job

        await asyncio.to_thread(soft_deduct, self.ledger, user_id, self.coin_cost, LEDGER_REASON)

        total_questions = job.assessment.effective_total_questions
        assessment_type = job.assessment.type
        passing_score = job.assessment.passing_score

        history_hashes = await asyncio.to_thread(self.question_log.hashes_for_user, user_id)
        logger.info(
            "Generating %s assessment: job=%s user=%s n=%d history=%d",
            assessment_type, job_id, user_id, total_questions, len(history_hashes),
        )

        prompt = build_generation_prompt(job, assessment_type, total_questions, passing_score)
        outcome = await self.gateway.generate_with_retries(prompt)

        # log inserts are sync SDK calls; keep them off the event loop
        result = await asyncio.to_thread(
            assemble_questions,
            outcome.payload["questions"],
            user_id=user_id,
            job_id=job_id,
            total_questions=total_questions,
            history_hashes=history_hashes,
            question_log=self.question_log,
        )

        logger.info(
            "[ASSESSMENT] Generated %d questions (requested %d) for user %s via %s in %dms",
            result.total_generated, total_questions, user_id, outcome.provider,
            int((time.time() - t0) * 1000),
        )
        return AssessmentResponse(
            session_id=result.session_id,
            questions=result.questions,
            total_generated=result.total_generated,
            job=JobSummary(
                title=job.title,
                skills=list(job.skills),
                assessment=AssessmentSummary(
                    type=assessment_type,
                    passing_score=passing_score,
                    total_questions=total_questions,
                ),
            ),
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_MEMORY_STORES: Optional[RecordStores] = None
_MEMORY_QUESTION_LOG: Optional[InMemoryQuestionLogStore] = None
_MEMORY_LEDGER: Optional[InMemoryLedger] = None


def _memory_backends():
    global _MEMORY_STORES, _MEMORY_QUESTION_LOG, _MEMORY_LEDGER
    if _MEMORY_STORES is None:
        _MEMORY_STORES = in_memory_record_stores()
        _MEMORY_QUESTION_LOG = InMemoryQuestionLogStore()
        _MEMORY_LEDGER = InMemoryLedger()
    return _MEMORY_STORES, _MEMORY_QUESTION_LOG, _MEMORY_LEDGER


def get_assessment_generator(settings: Optional[Settings] = None) -> AssessmentGenerator:
    settings = settings or get_settings()

    if settings.store_backend.lower() == "supabase":
        # lazy import to avoid dependency/testing issues
        from talentgate.core.deps import get_supabase_client

        sb = get_supabase_client()
        stores = supabase_record_stores(sb)
        question_log: QuestionLogStore = SupabaseQuestionLogStore(sb)
        ledger: LedgerService = SupabaseLedger(sb)
    else:
        stores, question_log, ledger = _memory_backends()

    return AssessmentGenerator(
        stores=stores,
        question_log=question_log,
        ledger=ledger,
        gateway=get_ai_gateway(settings),
        coin_cost=settings.assessment_coin_cost,
        verbose_errors=settings.is_development,
    )
