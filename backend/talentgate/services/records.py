"""
Read-only collaborator stores consulted by the eligibility gatekeeper.

Each store has an in-memory implementation (default, used in tests) and a
Supabase implementation selected with ``STORE_BACKEND=supabase``.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from talentgate.models.assessment import Application, Job, ResumeProfile, User

logger = logging.getLogger("talentgate.records")


class JobStore:
    def find_by_id(self, job_id: str) -> Optional[Job]:
        raise NotImplementedError


class UserStore:
    def find_by_uid(self, uid: str) -> Optional[User]:
        raise NotImplementedError


class ResumeProfileStore:
    def find_by_user(self, user_id: str) -> Optional[ResumeProfile]:
        raise NotImplementedError


class ApplicationStore:
    def find(self, job_id: str, user_id: str) -> Optional[Application]:
        raise NotImplementedError


# ── In-memory ────────────────────────────────────────────────────────────────

class InMemoryJobStore(JobStore):
    def __init__(self, jobs: list[Job] | None = None):
        self._data = {j.id: j for j in jobs or []}

    def add(self, job: Job) -> Job:
        self._data[job.id] = job
        return job

    def find_by_id(self, job_id: str) -> Optional[Job]:
        return self._data.get(job_id)


class InMemoryUserStore(UserStore):
    def __init__(self, users: list[User] | None = None):
        self._data = {u.uid: u for u in users or []}

    def add(self, user: User) -> User:
        self._data[user.uid] = user
        return user

    def find_by_uid(self, uid: str) -> Optional[User]:
        return self._data.get(uid)


class InMemoryResumeProfileStore(ResumeProfileStore):
    def __init__(self, profiles: list[ResumeProfile] | None = None):
        self._data = {p.user_id: p for p in profiles or []}

    def add(self, profile: ResumeProfile) -> ResumeProfile:
        self._data[profile.user_id] = profile
        return profile

    def find_by_user(self, user_id: str) -> Optional[ResumeProfile]:
        return self._data.get(user_id)


class InMemoryApplicationStore(ApplicationStore):
    def __init__(self, applications: list[Application] | None = None):
        self._data = {}
        for a in applications or []:
            self.add(a)

    def _key(self, job_id: str, user_id: str):
        return f"{job_id}::{user_id}"

    def add(self, application: Application) -> Application:
        self._data[self._key(application.job_id, application.user_id)] = application
        return application

    def find(self, job_id: str, user_id: str) -> Optional[Application]:
        return self._data.get(self._key(job_id, user_id))


# ── Supabase ─────────────────────────────────────────────────────────────────

def _first_row(result) -> Optional[dict]:
    data = getattr(result, "data", None)
    if not data:
        return None
    return data[0]


class SupabaseJobStore(JobStore):
    def __init__(self, supabase_client):
        self.sb = supabase_client

    def find_by_id(self, job_id: str) -> Optional[Job]:
        row = _first_row(self.sb.table("jobs").select("*").eq("id", job_id).limit(1).execute())
        if not row:
            return None
        return Job(
            id=str(row["id"]),
            title=row.get("title") or "",
            skills=row.get("skills") or [],
            assessment=row.get("assessment") or {},
            min_percentage=row.get("min_percentage"),
        )


class SupabaseUserStore(UserStore):
    def __init__(self, supabase_client):
        self.sb = supabase_client

    def find_by_uid(self, uid: str) -> Optional[User]:
        row = _first_row(self.sb.table("users").select("*").eq("uid", uid).limit(1).execute())
        if not row:
            return None
        return User(uid=row["uid"], name=row.get("name"), email=row.get("email"), coins=row.get("coins"))


class SupabaseResumeProfileStore(ResumeProfileStore):
    def __init__(self, supabase_client):
        self.sb = supabase_client

    def find_by_user(self, user_id: str) -> Optional[ResumeProfile]:
        row = _first_row(
            self.sb.table("resume_profiles").select("user_id").eq("user_id", user_id).limit(1).execute()
        )
        return ResumeProfile(user_id=row["user_id"]) if row else None


class SupabaseApplicationStore(ApplicationStore):
    def __init__(self, supabase_client):
        self.sb = supabase_client

    def find(self, job_id: str, user_id: str) -> Optional[Application]:
        row = _first_row(
            self.sb.table("applications")
            .select("job_id, user_id, resume_match_percent")
            .eq("job_id", job_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not row:
            return None
        return Application(
            job_id=str(row["job_id"]),
            user_id=row["user_id"],
            resume_match_percent=row.get("resume_match_percent"),
        )


@dataclass
class RecordStores:
    jobs: JobStore
    users: UserStore
    resume_profiles: ResumeProfileStore
    applications: ApplicationStore


def in_memory_record_stores() -> RecordStores:
    return RecordStores(
        jobs=InMemoryJobStore(),
        users=InMemoryUserStore(),
        resume_profiles=InMemoryResumeProfileStore(),
        applications=InMemoryApplicationStore(),
    )


def supabase_record_stores(supabase_client) -> RecordStores:
    return RecordStores(
        jobs=SupabaseJobStore(supabase_client),
        users=SupabaseUserStore(supabase_client),
        resume_profiles=SupabaseResumeProfileStore(supabase_client),
        applications=SupabaseApplicationStore(supabase_client),
    )
