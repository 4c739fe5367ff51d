# lottery/api/routers/health.py
from fastapi import APIRouter

from lottery.config.settings import settings

router = APIRouter()


@router.get("", summary="Health / basic info endpoint")
def health():
    return {"status": "ok", "service": settings.SERVICE_NAME, "env": settings.ENV}
