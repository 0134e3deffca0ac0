"""
Append-only log of every question shown to a user.

The log is the dedup history: a question whose hash is already logged for a
user is never served to that user again. Entries are never updated or
deleted here.
"""
import logging
from collections import defaultdict
from typing import Optional

from talentgate.models.assessment import QuestionLogEntry

logger = logging.getLogger("talentgate.question_log")


class QuestionLogStore:
    def find_by_user(self, user_id: str) -> list[QuestionLogEntry]:
        raise NotImplementedError

    def create(self, entry: QuestionLogEntry) -> QuestionLogEntry:
        raise NotImplementedError

    def hashes_for_user(self, user_id: str) -> set[str]:
        return {e.hash for e in self.find_by_user(user_id)}


class InMemoryQuestionLogStore(QuestionLogStore):
    def __init__(self):
        self._data: dict[str, list[QuestionLogEntry]] = defaultdict(list)

    def find_by_user(self, user_id: str) -> list[QuestionLogEntry]:
        return list(self._data.get(user_id, []))

    def create(self, entry: QuestionLogEntry) -> QuestionLogEntry:
        self._data[entry.user_id].append(entry)
        return entry

    def count(self, user_id: Optional[str] = None) -> int:
        if user_id is not None:
            return len(self._data.get(user_id, []))
        return sum(len(v) for v in self._data.values())


class SupabaseQuestionLogStore(QuestionLogStore):
    TABLE = "question_logs"

    def __init__(self, supabase_client):
        self.sb = supabase_client

    def find_by_user(self, user_id: str) -> list[QuestionLogEntry]:
        r = (
            self.sb.table(self.TABLE)
            .select("user_id, question_text, skill, difficulty, category, hash, created_at")
            .eq("user_id", user_id)
            .execute()
        )
        rows = getattr(r, "data", None) or []
        return [
            QuestionLogEntry(
                user_id=d["user_id"],
                question_text=d.get("question_text") or "",
                skill=d.get("skill") or "General",
                difficulty=d.get("difficulty") or "medium",
                category=d.get("category") or "MCQ",
                hash=d["hash"],
                **({"created_at": d["created_at"]} if d.get("created_at") else {}),
            )
            for d in rows
        ]

    def hashes_for_user(self, user_id: str) -> set[str]:
        r = self.sb.table(self.TABLE).select("hash").eq("user_id", user_id).execute()
        return {d["hash"] for d in (getattr(r, "data", None) or []) if d.get("hash")}

    def create(self, entry: QuestionLogEntry) -> QuestionLogEntry:
        self.sb.table(self.TABLE).insert({
            "user_id": entry.user_id,
            "question_text": entry.question_text,
            "skill": entry.skill,
            "difficulty": entry.difficulty,
            "category": entry.category,
            "hash": entry.hash,
            "created_at": entry.created_at.isoformat(),
        }).execute()
        return entry
