"""
AI gateway: bounded attempt loop with provider fallback.

One *attempt* walks the provider chain in order and stops at the first
provider that returns usable text (non-empty, at least ``min_chars`` long).
A provider that raises, times out or returns short text is skipped and the
next one is tried within the same attempt.

``generate_with_retries`` owns the outer loop: up to ``max_attempts``
attempts, a linear backoff of ``attempt_index * backoff_base_ms`` between
them, and the Response Repairer applied to every usable text. Nothing inside
the loop raises; only exhaustion surfaces, as ``GenerationExhausted``.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Union

from talentgate.core.errors import GenerationExhausted
from talentgate.services.llm_providers import LLMProvider
from talentgate.services.prompt_builder import GenerationPrompt
from talentgate.services.response_repair import RepairResult, repair_response

logger = logging.getLogger("talentgate.ai_gateway")

RAW_PREVIEW_CHARS = 300


@dataclass(frozen=True)
class AttemptSuccess:
    raw_text: str
    provider: str
    providers_tried: list = field(default_factory=list)


@dataclass(frozen=True)
class AttemptFailure:
    reason: str
    providers_tried: list = field(default_factory=list)
    raw_text: str = ""


AttemptResult = Union[AttemptSuccess, AttemptFailure]


@dataclass(frozen=True)
class GatewayOutcome:
    payload: dict
    raw_text: str
    provider: str
    attempts: int


def _preview(text: str) -> str:
    return (text or "")[:RAW_PREVIEW_CHARS]


class AIGateway:
    def __init__(
        self,
        providers: list[LLMProvider],
        max_attempts: int = 3,
        backoff_base_ms: int = 500,
        min_chars: int = 20,
        timeout_seconds: Optional[float] = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.providers = list(providers)
        self.max_attempts = max(1, max_attempts)
        self.backoff_base_ms = max(0, backoff_base_ms)
        self.min_chars = min_chars
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    async def _call(self, provider: LLMProvider, prompt: GenerationPrompt) -> str:
        coro = provider.complete(prompt.system, prompt.user)
        if self.timeout_seconds:
            return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
        return await coro

    async def attempt(self, prompt: GenerationPrompt) -> AttemptResult:
        """Run one attempt across the provider chain."""
        tried: list[dict] = []
        last_text = ""
        if not self.providers:
            return AttemptFailure(reason="no providers configured")

        for provider in self.providers:
            t0 = time.time()
            try:
                text = (await self._call(provider, prompt) or "").strip()
            except asyncio.TimeoutError:
                tried.append({"provider": provider.name, "error": "timeout"})
                logger.warning("[AI] %s timed out after %ss", provider.name, self.timeout_seconds)
                continue
            except Exception as exc:
                tried.append({"provider": provider.name, "error": f"{exc.__class__.__name__}: {exc}"[:200]})
                logger.warning("[AI] %s failed: %s", provider.name, exc)
                continue

            latency_ms = int((time.time() - t0) * 1000)
            if len(text) < self.min_chars:
                last_text = text or last_text
                tried.append({"provider": provider.name, "error": f"short response ({len(text)} chars)"})
                logger.warning("[AI] %s returned %d chars, skipping", provider.name, len(text))
                continue

            tried.append({"provider": provider.name, "ok": True, "latency_ms": latency_ms})
            logger.info("[AI] %s responded with %d chars in %dms", provider.name, len(text), latency_ms)
            return AttemptSuccess(raw_text=text, provider=provider.name, providers_tried=tried)

        return AttemptFailure(reason="all providers failed", providers_tried=tried, raw_text=last_text)

    async def generate_with_retries(
        self,
        prompt: GenerationPrompt,
        repair: Callable[[str], RepairResult] = repair_response,
    ) -> GatewayOutcome:
        diagnostics: list[dict] = []
        last_raw = ""

        for attempt_index in range(self.max_attempts):
            if attempt_index > 0 and self.backoff_base_ms:
                await self._sleep(attempt_index * self.backoff_base_ms / 1000)

            result = await self.attempt(prompt)
            if isinstance(result, AttemptFailure):
                last_raw = result.raw_text or last_raw
                diagnostics.append({
                    "attempt": attempt_index + 1,
                    "error": result.reason,
                    "providers": result.providers_tried,
                })
                logger.warning(
                    "Attempt %d/%d: %s", attempt_index + 1, self.max_attempts, result.reason,
                )
                continue

            last_raw = result.raw_text
            repaired = repair(result.raw_text)
            if not repaired.ok:
                diagnostics.append({
                    "attempt": attempt_index + 1,
                    "error": f"unparseable response: {repaired.error}",
                    "providers": result.providers_tried,
                })
                logger.warning(
                    "Attempt %d/%d: %s response unusable (%s): %r",
                    attempt_index + 1, self.max_attempts, result.provider,
                    repaired.error, _preview(result.raw_text),
                )
                continue

            logger.info(
                "Attempt %d/%d: %s returned %d candidate questions",
                attempt_index + 1, self.max_attempts, result.provider,
                len(repaired.payload["questions"]),
            )
            return GatewayOutcome(
                payload=repaired.payload,
                raw_text=result.raw_text,
                provider=result.provider,
                attempts=attempt_index + 1,
            )

        logger.error(
            "AI generation exhausted after %d attempts: %s | last raw: %r",
            self.max_attempts, diagnostics, _preview(last_raw),
        )
        raise GenerationExhausted(attempts=diagnostics, last_raw_preview=_preview(last_raw))


def get_ai_gateway(settings=None) -> AIGateway:
    from talentgate.core.config import get_settings
    from talentgate.core.deps import get_llm_providers

    settings = settings or get_settings()
    return AIGateway(
        providers=get_llm_providers(settings),
        max_attempts=settings.ai_max_attempts,
        backoff_base_ms=settings.ai_backoff_base_ms,
        min_chars=settings.ai_min_response_chars,
        timeout_seconds=settings.ai_timeout_seconds,
    )
