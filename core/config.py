import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

# .env 파일에서 환경변수 로드
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./error_logs.db"


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    db_timeout_seconds: float = 5.0
    cache_ttl_seconds: float = 300.0
    cache_max_entries: int = 1000
    default_page_size: int = 20
    max_page_size: int = 100
    frontend_url: str = "*"
    log_level: str = "INFO"
    port: int = 3000

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            db_timeout_seconds=float(env.get("DB_TIMEOUT_SECONDS", "5")),
            cache_ttl_seconds=float(env.get("CACHE_TTL_SECONDS", "300")),
            cache_max_entries=int(env.get("CACHE_MAX_ENTRIES", "1000")),
            default_page_size=int(env.get("DEFAULT_PAGE_SIZE", "20")),
            max_page_size=int(env.get("MAX_PAGE_SIZE", "100")),
            frontend_url=env.get("FRONTEND_URL", "*"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            port=int(env.get("PORT", "3000")),
        )


def get_settings() -> Settings:
    return Settings.from_env()
