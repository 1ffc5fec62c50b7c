from fastapi import APIRouter
from ...config import get_settings

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health():
    # the relay has no dependencies of its own to probe; report config only
    s = get_settings()
    return {
        "status": "ok",
        "env": s.ENV,
        "provider": s.RESEND_API_URL,
        "metrics": s.METRICS_ENABLED,
    }

@router.get("/liveness")
async def liveness():
    return {"alive": True}
