"""
Best-effort extraction of the questions payload from raw model text.

Models ignore "JSON only" often enough that the pipeline never trusts it:
fences are stripped, prose around the JSON is cut away, bare arrays and
``data`` keys are normalized to ``{"questions": [...]}``.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class RepairResult:
    payload: Optional[dict] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


def clean_json_response(content: str) -> str:
    """Strip markdown fences from model output."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _try_parse(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


def _normalize(value: Any) -> Any:
    if isinstance(value, list):
        return {"questions": value}
    if isinstance(value, dict) and "questions" not in value and isinstance(value.get("data"), list):
        value = dict(value)
        value["questions"] = value.pop("data")
    return value


def _has_questions(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("questions"), list)


def _extract_json(text: str) -> tuple[bool, Any]:
    """Parse the whole text, else the outermost {...}, else the outermost [...].

    A substring only wins if it yields a questions list: a bare array wrapped
    in prose also matches the {...} scan as its first element. When no
    candidate has questions, the first successful parse is returned so the
    caller can report what was wrong with it.
    """
    ok, value = _try_parse(text)
    if ok:
        return ok, _normalize(value)

    fallback = None
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        start = text.find(open_ch)
        end = text.rfind(close_ch)
        if start == -1 or end <= start:
            continue
        ok, value = _try_parse(text[start:end + 1])
        if not ok:
            continue
        value = _normalize(value)
        if _has_questions(value):
            return True, value
        if fallback is None:
            fallback = (True, value)
    return fallback or (False, None)


def repair_response(raw: str | None) -> RepairResult:
    if not raw or not raw.strip():
        return RepairResult(error="empty response")

    ok, value = _extract_json(clean_json_response(raw))
    if not ok:
        return RepairResult(error="no parseable JSON found")

    if not isinstance(value, dict):
        return RepairResult(error=f"top-level JSON is {type(value).__name__}, expected object")

    questions = value.get("questions")
    if not isinstance(questions, list):
        return RepairResult(error="payload has no 'questions' array")
    if not questions:
        return RepairResult(error="'questions' array is empty")

    return RepairResult(payload=value)
