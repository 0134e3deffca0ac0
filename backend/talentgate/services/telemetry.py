"""
Per-request telemetry for assessment endpoints.

Each instrumented call emits one ``api_call`` event carrying the applicant
(``user_id``), the job, the outcome and the latency. Failed calls carry the
AssessmentError code from the HTTP detail (e.g. ``MATCH_BELOW_THRESHOLD``) so
gate rejections and AI exhaustion can be told apart downstream.
"""
import time
import json
import logging
import os
from typing import Any, Optional
from functools import wraps

from fastapi import HTTPException

logger = logging.getLogger("talentgate.telemetry")


def emit_event(event: str, *, route: str, version: str, user_id: Optional[str] = None,
               job_id: Optional[str] = None, error_code: Optional[str] = None,
               latency_ms: Optional[int] = None, status_code: Optional[int] = None,
               ok: Optional[bool] = None):
    payload = {
        "event": event,
        "route": route,
        "version": version,
        "user_id": user_id,
        "job_id": job_id,
        "error_code": error_code,
        "latency_ms": latency_ms,
        "status_code": status_code,
        "ok": ok,
        "ts": time.time(),
    }
    # single-line JSON for log parsing
    logger.info("telemetry=%s", json.dumps(payload, separators=(",", ":")))

    if os.getenv("ENABLE_TELEMETRY_DB", "0") != "1":
        return

    try:
        from talentgate.core.deps import get_supabase_client
        sb = get_supabase_client()
        sb.table("telemetry_events").insert({k: v for k, v in payload.items() if k != "ts"}).execute()
    except Exception as e:
        logger.error("[telemetry.emit_event] %s", e, exc_info=True)


def _request_ids(kwargs: dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    request = kwargs.get("request")
    return getattr(request, "user_id", None), getattr(request, "job_id", None)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, HTTPException):
        if isinstance(exc.detail, dict) and exc.detail.get("code"):
            return exc.detail["code"]
        return f"HTTP_{exc.status_code}"
    return exc.__class__.__name__


def instrument(route: str, version: str):
    """Wrap an async endpoint taking a ``request`` body with jobId/userId."""
    def deco(fn):
        @wraps(fn)
        async def wrapped(*args, **kwargs):
            user_id, job_id = _request_ids(kwargs)
            t0 = time.time()
            ok = True
            code = None
            status = 200
            try:
                return await fn(*args, **kwargs)
            except Exception as e:
                ok = False
                code = _error_code(e)
                status = getattr(e, "status_code", 500)
                raise
            finally:
                emit_event("api_call", route=route, version=version, user_id=user_id, job_id=job_id,
                           latency_ms=int((time.time() - t0) * 1000), ok=ok,
                           error_code=code, status_code=status)
        return wrapped
    return deco
