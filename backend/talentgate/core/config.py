from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_name: str = "TalentGate Assessments"
    environment: str = "production"  # development | production
    debug: bool = False

    # Supabase
    supabase_url: str = ""
    supabase_service_key: str = ""
    store_backend: str = "memory"  # memory | supabase

    # Gemini (primary by default)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_fallback_model: str = "gemini-2.0-flash"

    # OpenAI-compatible fallback (OpenAI, OpenRouter, Groq)
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model: str = "gpt-4o-mini"

    llm_provider: str = "gemini"  # which family is tried first

    # Generation policy
    ai_max_attempts: int = 3
    ai_backoff_base_ms: int = 500
    ai_min_response_chars: int = 20
    ai_timeout_seconds: float = 60.0
    ai_temperature: float = 0.7
    ai_max_tokens: int = 4096

    # Ledger
    assessment_coin_cost: int = 20

    # CORS
    frontend_url: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache
def get_settings() -> Settings:
    return Settings()
