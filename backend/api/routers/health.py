"""헬스 체크 라우터"""
from fastapi import APIRouter, Depends

from config import Settings, get_settings

router = APIRouter(tags=["시스템"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.APP_VERSION}


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs", "health": "/health"}
