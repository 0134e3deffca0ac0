import logging

from fastapi import APIRouter, Depends, HTTPException

from talentgate.core.config import get_settings
from talentgate.core.errors import AssessmentError, GenerationExhausted
from talentgate.models.assessment import AssessmentRequest, AssessmentResponse
from talentgate.services.assessment_pipeline import AssessmentGenerator, get_assessment_generator
from talentgate.services.telemetry import instrument

logger = logging.getLogger("talentgate.api.assessments")
router = APIRouter(prefix="/api", tags=["assessments"])


def assessment_generator() -> AssessmentGenerator:
    return get_assessment_generator()


def _error_detail(exc: AssessmentError) -> dict:
    detail = {"code": exc.code, "message": exc.message}
    if isinstance(exc, GenerationExhausted):
        # provider diagnostics and raw output stay in the logs outside development
        if get_settings().is_development:
            detail.update(exc.details)
    elif exc.details:
        detail.update(exc.details)
    return detail


@router.post(
    "/generate-full-assessment",
    response_model=AssessmentResponse,
    response_model_exclude_none=True,
)
@instrument(route="/api/generate-full-assessment", version="v1")
async def generate_full_assessment(
    request: AssessmentRequest,
    generator: AssessmentGenerator = Depends(assessment_generator),
):
    """Generate a deduplicated skill assessment for one applicant and job."""
    if not request.job_id or not request.user_id:
        raise HTTPException(status_code=400, detail="jobId and userId are required")

    try:
        return await generator.generate(request.job_id, request.user_id)
    except AssessmentError as exc:
        logger.warning("Assessment failed for user %s job %s: %s", request.user_id, request.job_id, exc)
        raise HTTPException(status_code=exc.status_code, detail=_error_detail(exc))
