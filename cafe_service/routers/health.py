from datetime import datetime, timezone

from fastapi import APIRouter

from cafe_service.env import ENVIRONMENT

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENVIRONMENT,
    }
