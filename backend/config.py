"""
스토어프론트 결제 조회 서비스 설정
"""
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "스토어프론트 결제 조회 서비스"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 데이터베이스 설정 (Supabase Postgres는 postgresql+asyncpg:// 사용)
    DB_URL: str = "sqlite+aiosqlite:///./data/storefront.db"

    # Xendit 설정 (키는 환경 변수로만 주입)
    XENDIT_SECRET_KEY: Optional[str] = None
    XENDIT_API_URL: str = "https://api.xendit.co"
    XENDIT_CALLBACK_TOKEN: Optional[str] = None
    XENDIT_TIMEOUT: float = 30  # 초

    # 상태 모니터 설정
    MONITOR_PENDING_LIMIT: int = 20
    MONITOR_PAID_LIMIT: int = 50

    # CORS 설정
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"  # 백엔드 전용 환경 변수 파일
        case_sensitive = True
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()
