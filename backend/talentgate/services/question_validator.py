"""
Per-question structural validation and correction.

Checks run in a fixed order and the first failing check discards the
candidate. Fixable defects are corrected instead of rejected:

  - MCQ ``correctAnswer`` outside ``options`` (or not an integer) -> 0
  - coding question without ``starterCode`` -> placeholder

The caller owns ``seen_hashes`` and records a hash only when the question is
accepted, so a rejected candidate never blocks a later one with the same text.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from talentgate.models.assessment import GeneratedQuestion
from talentgate.services.hashing import hash_question

logger = logging.getLogger("talentgate.question_validator")

STARTER_CODE_PLACEHOLDER = "// Write your solution here"
DEFAULT_SKILL = "General"
_VALID_TYPES = {"mcq", "coding"}
_OPTION_TEXT_KEYS = ("text", "option", "label", "value", "answer")


@dataclass(frozen=True)
class ValidationOutcome:
    question: Optional[GeneratedQuestion] = None
    hash: Optional[str] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.question is not None


def _reject(reason: str, question_hash: str | None = None) -> ValidationOutcome:
    return ValidationOutcome(hash=question_hash, reason=reason)


def _option_to_text(opt: Any) -> str:
    if isinstance(opt, str):
        return opt
    if isinstance(opt, dict):
        for key in _OPTION_TEXT_KEYS:
            if isinstance(opt.get(key), str):
                return opt[key]
        return json.dumps(opt, ensure_ascii=False)
    return "" if opt is None else str(opt)


def _normalize_options(raw_options: Any) -> list[str] | None:
    # Order is preserved so correctAnswer keeps pointing at the same option.
    if not isinstance(raw_options, list):
        return None
    return [_option_to_text(o) for o in raw_options]


def _as_index(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _correct_answer(value: Any, n_options: int) -> int:
    idx = _as_index(value)
    if idx is None or idx < 0 or idx >= n_options:
        return 0
    return idx


def validate_question(raw: Any, seen_hashes: set[str]) -> ValidationOutcome:
    if not isinstance(raw, dict):
        return _reject("candidate is not an object")

    text = raw.get("question")
    if not isinstance(text, str) or not text.strip():
        return _reject("question text missing")
    text = text.strip()

    question_hash = hash_question(text)
    if question_hash in seen_hashes:
        return _reject("duplicate question", question_hash)

    q_type = raw.get("type")
    q_type = q_type.strip().lower() if isinstance(q_type, str) and q_type.strip() else "mcq"
    if q_type not in _VALID_TYPES:
        return _reject(f"unsupported type '{q_type}'", question_hash)

    skill = raw.get("skill")
    skill = skill.strip() if isinstance(skill, str) and skill.strip() else DEFAULT_SKILL

    if q_type == "mcq":
        options = _normalize_options(raw.get("options"))
        if options is None or len(options) < 2:
            return _reject("mcq needs at least 2 options", question_hash)
        correct = _correct_answer(raw.get("correctAnswer"), len(options))
        if correct != raw.get("correctAnswer"):
            logger.info("Corrected correctAnswer %r -> %d", raw.get("correctAnswer"), correct)
        question = GeneratedQuestion(
            type="mcq", skill=skill, question=text, options=options, correct_answer=correct,
        )
    else:
        starter = raw.get("starterCode")
        if not isinstance(starter, str) or not starter.strip():
            starter = STARTER_CODE_PLACEHOLDER
        question = GeneratedQuestion(
            type="coding", skill=skill, question=text, starter_code=starter,
        )

    return ValidationOutcome(question=question, hash=question_hash)
