import hashlib
import unicodedata
from datetime import datetime, timezone


def _is_text_char(ch: str) -> bool:
    # letters, digits and combining marks (matras, accents) of any script
    return unicodedata.category(ch)[0] in ("L", "N", "M")


def normalize_question_text(text: str) -> str:
    """Lower-case and drop whitespace, punctuation and symbols.

    Letters and digits of every script are kept, so "SQL 中的索引是什么?" and
    "SQL 中的视图是什么?" stay distinct while "What is a JOIN?" and
    "what is a join" collapse. Text with no letters or digits at all keeps its
    whitespace-collapsed form.
    """
    lowered = text.lower()
    normalized = "".join(ch for ch in lowered if _is_text_char(ch))
    if normalized:
        return normalized
    return " ".join(lowered.split())


def hash_question(text: str) -> str:
    """SHA-256 of the normalized question text (dedup key)."""
    return hashlib.sha256(normalize_question_text(text).encode("utf-8")).hexdigest()


def derive_session_id(user_id: str, job_id: str, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    seed = f"{user_id}{job_id}{now.isoformat()}"
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()
