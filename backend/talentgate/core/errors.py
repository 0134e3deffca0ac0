"""
Typed failures of the assessment generation pipeline.

Every terminal outcome other than success is an AssessmentError subclass.
The API layer maps ``status_code`` onto the HTTP response; ``details`` holds
operator diagnostics that are only exposed in development.
"""
from typing import Any, Optional


class AssessmentError(Exception):
    code = "ASSESSMENT_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


# ── Gatekeeper stage ─────────────────────────────────────────────────────────

class JobNotFound(AssessmentError):
    code = "JOB_NOT_FOUND"
    status_code = 404

    def __init__(self, job_id: str):
        super().__init__("Job not found", {"job_id": job_id})


class AssessmentDisabled(AssessmentError):
    code = "ASSESSMENT_DISABLED"
    status_code = 400

    def __init__(self, job_id: str):
        super().__init__("Assessment not enabled for this job", {"job_id": job_id})


class UserNotFound(AssessmentError):
    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, user_id: str):
        super().__init__("User not found", {"user_id": user_id})


class ResumeNotAnalyzed(AssessmentError):
    code = "RESUME_NOT_ANALYZED"
    status_code = 400

    def __init__(self, user_id: str):
        super().__init__(
            "Resume has not been analyzed yet. Upload and analyze your resume first",
            {"user_id": user_id},
        )


class NotApplied(AssessmentError):
    code = "NOT_APPLIED"
    status_code = 400

    def __init__(self, job_id: str, user_id: str):
        super().__init__(
            "You must apply to the job first", {"job_id": job_id, "user_id": user_id}
        )


class MatchBelowThreshold(AssessmentError):
    code = "MATCH_BELOW_THRESHOLD"
    status_code = 400

    def __init__(self, actual: float, required: float):
        self.actual = actual
        self.required = required
        super().__init__(
            f"Resume match {actual:g}% is below the required {required:g}%",
            {"actual": actual, "required": required},
        )


# ── Generation stage ─────────────────────────────────────────────────────────

class GenerationExhausted(AssessmentError):
    code = "GENERATION_EXHAUSTED"
    status_code = 503

    def __init__(self, attempts: list[dict], last_raw_preview: str = ""):
        self.attempts = attempts
        self.last_raw_preview = last_raw_preview
        super().__init__(
            "AI service unavailable. Please try again.",
            {"attempts": attempts, "last_raw_preview": last_raw_preview},
        )


class InsufficientUniqueQuestions(AssessmentError):
    code = "INSUFFICIENT_UNIQUE_QUESTIONS"
    status_code = 503

    def __init__(self, accepted: int, minimum: int = 3):
        self.accepted = accepted
        super().__init__(
            f"Assessment generation failed. Generated only {accepted} questions (< {minimum}).",
            {"accepted": accepted, "minimum": minimum},
        )


class InternalError(AssessmentError):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "Assessment generation failed"):
        super().__init__(message)
