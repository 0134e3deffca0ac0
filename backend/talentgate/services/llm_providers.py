"""
Generative-AI backends used by the AI gateway.

Each provider turns a system + user prompt into raw response text and raises
on any provider-level failure. Fallback ordering, timeouts and retries are the
gateway's job, not the provider's.
"""
import logging
import os

logger = logging.getLogger("talentgate.llm_providers")
_prompt_logger = logging.getLogger("talentgate.llm_prompts")


def _log_prompt(provider: str, model: str, system: str, user: str, temperature: float, max_tokens: int) -> None:
    if os.environ.get("DEBUG_LLM_PROMPTS", "").lower() not in ("1", "true"):
        return
    _prompt_logger.warning(
        "\n\n%s\n"
        "── SYSTEM ──────────────────────────────────────────────\n%s\n"
        "── USER ────────────────────────────────────────────────\n%s\n"
        "── CONFIG ──────────────────────────────────────────────\n"
        "  provider=%s  model=%s  temp=%s  max_tokens=%s\n"
        "%s",
        "=" * 60,
        system or "(none)",
        user,
        provider,
        model,
        temperature,
        max_tokens,
        "=" * 60,
    )


class LLMProvider:
    name: str = "provider"

    async def complete(self, system: str, user: str) -> str:
        raise NotImplementedError


class GeminiProvider(LLMProvider):
    def __init__(self, client, model: str, temperature: float = 0.7, max_tokens: int = 4096):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.name = f"gemini:{model}"

    async def complete(self, system: str, user: str) -> str:
        from google.genai import types

        _log_prompt("gemini", self.model, system, user, self.temperature, self.max_tokens)
        config_kwargs = dict(
            system_instruction=system or None,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            response_mime_type="application/json",
        )
        if "2.5-flash" in self.model:
            # thinking off: it adds preamble text before the JSON
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=0)

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=user,
            config=types.GenerateContentConfig(**config_kwargs),
        )
        return response.text or ""


class OpenAIChatProvider(LLMProvider):
    """OpenAI chat completions; also serves OpenRouter and Groq via base_url."""

    def __init__(self, client, model: str, temperature: float = 0.7, max_tokens: int = 4096, label: str = "openai"):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.name = f"{label}:{model}"

    async def complete(self, system: str, user: str) -> str:
        _log_prompt("openai", self.model, system, user, self.temperature, self.max_tokens)
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": user})

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
