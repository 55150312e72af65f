import logging
import math
from datetime import datetime, timezone
from typing import Any, List

from sqlalchemy import or_

from log_query import QueryDescriptor
from log_store import LogStore
from models.error_log import ErrorLog
from response_cache import ResponseCache
from schemas.error_log import ErrorLogRead, LogPage, Pagination

logger = logging.getLogger(__name__)

# wire 필드명 -> 정렬 컬럼
SORT_COLUMNS = {
    "id": ErrorLog.id,
    "message": ErrorLog.message,
    "level": ErrorLog.level,
    "source": ErrorLog.source,
    "status": ErrorLog.status,
    "serverTimestamp": ErrorLog.server_timestamp,
    "clientTimestamp": ErrorLog.client_timestamp,
    "createdAt": ErrorLog.created_at,
    "updatedAt": ErrorLog.updated_at,
}


def build_filters(descriptor: QueryDescriptor) -> List[Any]:
    filters = []
    if descriptor.level:
        filters.append(ErrorLog.level == descriptor.level)
    if descriptor.source:
        filters.append(ErrorLog.source == descriptor.source)
    if descriptor.status:
        filters.append(ErrorLog.status == descriptor.status)
    if descriptor.start_date:
        filters.append(ErrorLog.server_timestamp >= _naive_utc(descriptor.start_date))
    if descriptor.end_date:
        filters.append(ErrorLog.server_timestamp <= _naive_utc(descriptor.end_date))
    if descriptor.search:
        filters.append(or_(
            ErrorLog.message.icontains(descriptor.search, autoescape=True),
            ErrorLog.stack_trace.icontains(descriptor.search, autoescape=True),
        ))
    return filters


def build_order_by(descriptor: QueryDescriptor) -> List[Any]:
    column = SORT_COLUMNS[descriptor.sort_by]
    if descriptor.order == "asc":
        return [column.asc(), ErrorLog.id.asc()]
    return [column.desc(), ErrorLog.id.desc()]


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


class QueryExecutor:
    def __init__(self, store: LogStore, cache: ResponseCache):
        self.store = store
        self.cache = cache

    async def execute(self, descriptor: QueryDescriptor) -> LogPage:
        key = descriptor.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"[cache] hit {key}")
            return cached.model_copy(update={"cached": True})
        logger.debug(f"[cache] miss {key}")

        # 조회 시작 전 generation을 기억해 두고, 그 사이 쓰기가 있었다면 캐시하지 않음
        generation = self.cache.generation
        logs, total = await self.store.find_page_with_count(
            build_filters(descriptor),
            build_order_by(descriptor),
            descriptor.skip,
            descriptor.limit,
        )
        total = max(total, 0)
        page = LogPage(
            data=[ErrorLogRead.model_validate(log) for log in logs],
            pagination=Pagination(
                current_page=descriptor.page,
                total_pages=total_pages(total, descriptor.limit),
                total_logs=total,
                limit=descriptor.limit,
            ),
            cached=False,
        )
        self.cache.set(key, page, generation=generation)
        return page


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
