import logging
from functools import lru_cache
from urllib.parse import urlparse

from supabase import create_client, Client
from openai import AsyncOpenAI

from talentgate.core.config import Settings, get_settings
from talentgate.services.llm_providers import GeminiProvider, LLMProvider, OpenAIChatProvider

logger = logging.getLogger("talentgate.deps")


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise RuntimeError("Supabase env vars missing (SUPABASE_URL / SUPABASE_SERVICE_KEY)")
    return create_client(settings.supabase_url, settings.supabase_service_key)


@lru_cache
def get_openai_client(api_key: str, base_url: str = "") -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url or None)


@lru_cache
def get_gemini_client(api_key: str):
    from google import genai

    return genai.Client(api_key=api_key)


def _openai_label(base_url: str) -> str:
    host = urlparse(base_url).hostname or ""
    if "openrouter" in host:
        return "openrouter"
    if "groq" in host:
        return "groq"
    return "openai"


def get_llm_providers(settings: Settings | None = None) -> list[LLMProvider]:
    """Return the provider fallback chain, primary family first.

    Providers without an API key are left out of the chain.
    """
    if settings is None:
        settings = get_settings()

    gemini: list[LLMProvider] = []
    if settings.gemini_api_key:
        client = get_gemini_client(settings.gemini_api_key)
        models = [settings.gemini_model]
        if settings.gemini_fallback_model and settings.gemini_fallback_model != settings.gemini_model:
            models.append(settings.gemini_fallback_model)
        gemini = [
            GeminiProvider(client, m, settings.ai_temperature, settings.ai_max_tokens)
            for m in models
        ]

    openai: list[LLMProvider] = []
    if settings.openai_api_key:
        client = get_openai_client(settings.openai_api_key, settings.openai_base_url)
        openai = [
            OpenAIChatProvider(
                client,
                settings.openai_model,
                settings.ai_temperature,
                settings.ai_max_tokens,
                label=_openai_label(settings.openai_base_url),
            )
        ]

    chain = openai + gemini if settings.llm_provider == "openai" else gemini + openai
    if not chain:
        logger.warning("No LLM provider configured (set GEMINI_API_KEY or OPENAI_API_KEY)")
    return chain
