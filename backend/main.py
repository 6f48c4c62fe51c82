"""
스토어프론트 결제 조회 서비스 - FastAPI 메인 애플리케이션
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import Settings, get_settings
from api.routers import health, xendit
from infrastructure.persistence.database import Database


def setup_logging(settings: Settings) -> None:
    Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.LOG_FILE,
        rotation="10 MB",
        retention="30 days",
        level=settings.LOG_LEVEL
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 수명 주기 관리"""
        logger.info("서비스 시작...")
        database = Database(settings.DB_URL, echo=settings.DEBUG)
        await database.init_db()
        app.state.database = database
        logger.info("데이터베이스 초기화 완료")
        if not settings.XENDIT_SECRET_KEY:
            logger.warning("XENDIT_SECRET_KEY 미설정 - 결제사 직접 조회가 불가능합니다.")

        yield

        logger.info("서비스 종료...")
        await database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="게임 계정 스토어프론트 - Xendit 결제 상태 조회 및 콜백 처리",
        lifespan=lifespan
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(xendit.router)
    return app


setup_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
