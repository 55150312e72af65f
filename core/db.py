from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import declarative_base
from core.config import get_settings

# Base 정의 (모델에서 import)
Base = declarative_base()

# 싱글턴 엔진
engine = None


def _connect_args(db_url: str, timeout: float) -> dict:
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout}
    return {"timeout": timeout}


def init_engine(db_url=None, timeout=None):
    global engine
    if engine is None:
        settings = get_settings()
        db_url = db_url or settings.database_url
        timeout = timeout if timeout is not None else settings.db_timeout_seconds
        engine = create_async_engine(
            db_url,
            future=True,
            pool_pre_ping=True,
            connect_args=_connect_args(db_url, timeout),
        )
    return engine


async def dispose_engine():
    global engine
    if engine is not None:
        await engine.dispose()
    engine = None
