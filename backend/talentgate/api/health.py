from fastapi import APIRouter

from talentgate.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    settings = get_settings()
    return {"status": "ok", "environment": settings.environment}
