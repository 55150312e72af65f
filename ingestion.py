import logging
from typing import Any, List

from pydantic import ValidationError

from log_store import LogStore
from models.error_log import ErrorLog, STATUSES, utcnow
from response_cache import ResponseCache
from schemas.error_log import ErrorLogCreate, ErrorLogRead
from utils.exceptions import InvalidParameter, NotFound, ValidationFailed

logger = logging.getLogger(__name__)


class IngestionService:
    """Validates and persists error reports, invalidating cached list pages on every write."""

    def __init__(self, store: LogStore, cache: ResponseCache):
        self.store = store
        self.cache = cache

    async def ingest(self, payload: Any) -> List[ErrorLogRead]:
        items = payload if isinstance(payload, list) else [payload]
        if not items:
            raise ValidationFailed("No logs provided")

        validated, errors = [], []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append({"index": index, "field": None, "message": "Log entry must be a JSON object"})
                continue
            try:
                validated.append(ErrorLogCreate.model_validate(item))
            except ValidationError as e:
                for err in e.errors():
                    errors.append({
                        "index": index,
                        "field": ".".join(str(p) for p in err["loc"]) or None,
                        "message": err["msg"],
                    })
        if errors:
            first = errors[0]
            raise ValidationFailed(
                f"Log validation failed: {first['field'] or 'entry'} at index {first['index']}: {first['message']}",
                errors=errors,
            )

        # serverTimestamp는 항상 서버에서 지정
        server_timestamp = utcnow()
        logs = [
            ErrorLog(
                message=log.message,
                level=log.level,
                source=log.source,
                stack_trace=log.stack_trace,
                context=log.context,
                browser_info=log.browser_info,
                status=log.status,
                server_timestamp=server_timestamp,
                client_timestamp=log.client_timestamp.replace(tzinfo=None) if log.client_timestamp else None,
            )
            for log in validated
        ]
        try:
            saved = await self.store.insert_many(logs)
        finally:
            # 성공 여부와 관계없이 무효화
            self.cache.invalidate_all()
        logger.info(f"Stored {len(saved)} error log(s)")
        return [ErrorLogRead.model_validate(log) for log in saved]

    async def update_status(self, log_id: Any, status: Any) -> ErrorLogRead:
        if not isinstance(status, str) or status not in STATUSES:
            raise InvalidParameter("status", "Invalid status value")
        try:
            log_id = int(log_id)
        except (TypeError, ValueError):
            raise InvalidParameter("id", f"Invalid log id: {log_id!r}")

        try:
            log = await self.store.update_status_by_id(log_id, status)
        finally:
            self.cache.invalidate_all()
        if log is None:
            raise NotFound("Log not found", dev_message=f"no error log with id {log_id}")
        logger.info(f"Log {log_id} status -> {status}")
        return ErrorLogRead.model_validate(log)
