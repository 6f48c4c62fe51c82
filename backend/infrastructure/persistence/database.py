"""
데이터베이스 연결 및 세션 관리

엔진은 모듈 import 시점이 아니라 애플리케이션 lifespan에서 한 번 생성되어
app.state.database 로 주입된다.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Database:
    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {"echo": echo, "future": True}
        if url.startswith("sqlite"):
            _ensure_sqlite_dir(url)
        else:
            engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )

    async def init_db(self):
        """테이블 생성 (운영 스키마는 Supabase 마이그레이션으로 관리)"""
        import infrastructure.persistence.models  # noqa: F401 - 모델을 Base.metadata에 등록
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """컨텍스트 매니저 형태의 세션"""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


def _ensure_sqlite_dir(url: str) -> None:
    path = url.split(":///", 1)[-1]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
