"""
Pre-flight checks that must pass before any AI call or coin spend.

Checks run in order and stop at the first failure:
  job exists -> assessment enabled -> user exists -> resume analyzed
  -> application exists -> resume match meets the job threshold
"""
import logging
from dataclasses import dataclass

from talentgate.core.errors import (
    AssessmentDisabled,
    JobNotFound,
    MatchBelowThreshold,
    NotApplied,
    ResumeNotAnalyzed,
    UserNotFound,
)
from talentgate.models.assessment import Application, Job, User
from talentgate.services.records import RecordStores

logger = logging.getLogger("talentgate.eligibility")


@dataclass(frozen=True)
class EligibilityContext:
    job: Job
    user: User
    application: Application


def check_eligibility(job_id: str, user_id: str, stores: RecordStores) -> EligibilityContext:
    job = stores.jobs.find_by_id(job_id)
    if job is None:
        raise JobNotFound(job_id)
    if not job.assessment.enabled:
        logger.info("Assessment disabled for job %s: %s", job_id, job.assessment)
        raise AssessmentDisabled(job_id)

    user = stores.users.find_by_uid(user_id)
    if user is None:
        raise UserNotFound(user_id)

    if stores.resume_profiles.find_by_user(user_id) is None:
        raise ResumeNotAnalyzed(user_id)

    application = stores.applications.find(job_id, user_id)
    if application is None:
        raise NotApplied(job_id, user_id)

    required = job.min_percentage
    actual = application.resume_match_percent or 0
    if actual < required:
        logger.info("User %s match %s%% below %s%% for job %s", user_id, actual, required, job_id)
        raise MatchBelowThreshold(actual=actual, required=required)

    return EligibilityContext(job=job, user=user, application=application)
