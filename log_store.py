import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from sqlalchemy import and_, func
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import sessionmaker

from core.db import Base
from models.error_log import ErrorLog, utcnow
from utils.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_TIMEOUT_SECONDS = 5.0
# SQL INTEGER(64bit) 최대값
MAX_SQL_INTEGER = 2 ** 63 - 1


class LogStore:
    """
    Persistence for error logs on top of an async SQLAlchemy engine.

    Every call is bounded by ``timeout`` seconds. Timeouts and connectivity
    failures are raised as StoreUnavailable.
    """

    def __init__(self, engine: AsyncEngine, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.engine = engine
        self.timeout = timeout
        self.session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _run(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"[store] {operation} timed out after {self.timeout}s")
            raise StoreUnavailable(dev_message=f"{operation} timed out after {self.timeout}s") from e
        except (OperationalError, InterfaceError, PoolTimeoutError, OSError) as e:
            logger.warning(f"[store] {operation} failed: {e}")
            raise StoreUnavailable(dev_message=f"{operation} failed: {e}") from e

    async def create_schema(self) -> None:
        async def _create():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        await self._run("create_schema", _create)

    async def insert_many(self, logs: List[ErrorLog]) -> List[ErrorLog]:
        # 단일 트랜잭션: 전부 저장되거나 전부 실패
        async def _insert():
            async with self.session_factory() as session:
                async with session.begin():
                    session.add_all(logs)
                    await session.flush()
            return logs
        return await self._run("insert_many", _insert)

    async def update_status_by_id(self, log_id: int, status: str) -> Optional[ErrorLog]:
        if not -MAX_SQL_INTEGER - 1 <= log_id <= MAX_SQL_INTEGER:
            return None
        async def _update():
            async with self.session_factory() as session:
                async with session.begin():
                    log = await session.get(ErrorLog, log_id)
                    if log is None:
                        return None
                    log.status = status
                    log.updated_at = utcnow()
                return log
        return await self._run("update_status_by_id", _update)

    async def get_by_id(self, log_id: int) -> Optional[ErrorLog]:
        if not -MAX_SQL_INTEGER - 1 <= log_id <= MAX_SQL_INTEGER:
            return None
        async def _get():
            async with self.session_factory() as session:
                return await session.get(ErrorLog, log_id)
        return await self._run("get_by_id", _get)

    async def find_page(self, filters: Sequence[Any], order_by: Sequence[Any], skip: int, limit: int) -> List[ErrorLog]:
        async def _find():
            async with self.session_factory() as session:
                return await self._select_page(session, filters, order_by, skip, limit)
        return await self._run("find_page", _find)

    async def count(self, filters: Sequence[Any]) -> int:
        async def _count():
            async with self.session_factory() as session:
                return await self._select_count(session, filters)
        return await self._run("count", _count)

    async def find_page_with_count(
        self, filters: Sequence[Any], order_by: Sequence[Any], skip: int, limit: int
    ) -> Tuple[List[ErrorLog], int]:
        """Count and page fetch inside one transaction so both see the same snapshot."""
        async def _find():
            async with self.session_factory() as session:
                async with session.begin():
                    total = await self._select_count(session, filters)
                    # 마지막 페이지 이후는 조회 생략
                    logs = [] if skip >= total else await self._select_page(session, filters, order_by, skip, limit)
            return logs, total
        return await self._run("find_page_with_count", _find)

    @staticmethod
    async def _select_page(session, filters, order_by, skip, limit) -> List[ErrorLog]:
        if skip > MAX_SQL_INTEGER:
            return []
        q = select(ErrorLog).where(and_(*filters)) if filters else select(ErrorLog)
        q = q.order_by(*order_by).offset(skip).limit(limit)
        result = await session.execute(q)
        return list(result.scalars().all())

    @staticmethod
    async def _select_count(session, filters) -> int:
        q = select(func.count()).select_from(ErrorLog)
        if filters:
            q = q.where(and_(*filters))
        result = await session.execute(q)
        return int(result.scalar_one())

    async def close(self) -> None:
        await self.engine.dispose()
