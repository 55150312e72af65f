"""Normalisation of raw list-query parameters into a canonical descriptor."""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from models.error_log import LEVELS, STATUSES
from utils.exceptions import InvalidParameter

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "serverTimestamp"
SORT_ORDERS = ("asc", "desc")
SORTABLE_FIELDS = (
    "id",
    "message",
    "level",
    "source",
    "status",
    "serverTimestamp",
    "clientTimestamp",
    "createdAt",
    "updatedAt",
)
CACHE_KEY_PREFIX = "logs:"


@dataclass(frozen=True)
class QueryDescriptor:
    level: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    sort_by: str = DEFAULT_SORT_FIELD
    order: str = "desc"
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def to_params(self) -> Dict[str, str]:
        """Raw-parameter form of the descriptor; ``normalize`` maps it back to an equal descriptor."""
        params = {
            "sortBy": self.sort_by,
            "order": self.order,
            "page": str(self.page),
            "limit": str(self.limit),
        }
        for name, value in (("level", self.level), ("source", self.source), ("status", self.status), ("search", self.search)):
            if value is not None:
                params[name] = value
        if self.start_date is not None:
            params["startDate"] = _format_instant(self.start_date)
        if self.end_date is not None:
            params["endDate"] = _format_instant(self.end_date)
        return params

    @property
    def cache_key(self) -> str:
        return CACHE_KEY_PREFIX + json.dumps(self.to_params(), sort_keys=True, separators=(",", ":"))


def normalize(
    raw_params: Mapping[str, Any],
    max_page_size: int = MAX_PAGE_SIZE,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> QueryDescriptor:
    """
    Build a QueryDescriptor from loosely-typed request parameters.

    Unknown keys are ignored. Empty values count as absent. Malformed values
    raise InvalidParameter naming the offending parameter.
    """
    max_page_size = max(1, max_page_size)

    level = _clean(raw_params.get("level"), "level")
    if level is not None and level not in LEVELS:
        raise InvalidParameter("level", f"Invalid level. Must be one of: {', '.join(LEVELS)}")

    status = _clean(raw_params.get("status"), "status")
    if status is not None and status not in STATUSES:
        raise InvalidParameter("status", f"Invalid status. Must be one of: {', '.join(STATUSES)}")

    sort_by = _clean(raw_params.get("sortBy"), "sortBy") or DEFAULT_SORT_FIELD
    if sort_by not in SORTABLE_FIELDS:
        raise InvalidParameter("sortBy", f"Cannot sort by '{sort_by}'. Must be one of: {', '.join(SORTABLE_FIELDS)}")

    order = raw_params.get("order")
    order = order.strip().lower() if isinstance(order, str) else ""
    if order not in SORT_ORDERS:
        order = "desc"

    page = _parse_int(raw_params.get("page"), "page")
    if page is None or page < 1:
        page = 1

    limit = _parse_int(raw_params.get("limit"), "limit")
    if limit is None:
        limit = default_page_size
    limit = min(max(limit, 1), max_page_size)

    return QueryDescriptor(
        level=level,
        source=_clean(raw_params.get("source"), "source"),
        status=status,
        start_date=_parse_instant(raw_params.get("startDate"), "startDate"),
        end_date=_parse_instant(raw_params.get("endDate"), "endDate"),
        search=_clean(raw_params.get("search"), "search"),
        sort_by=sort_by,
        order=order,
        page=page,
        limit=limit,
    )


def _clean(raw: Any, field: str) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidParameter(field, f"'{field}' must be a string")
    raw = raw.strip()
    return raw or None


def _parse_int(raw: Any, field: str) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise InvalidParameter(field, f"Invalid '{field}' parameter, must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            pass
    raise InvalidParameter(field, f"Invalid '{field}' parameter, must be an integer")


def _parse_instant(raw: Any, field: str) -> Optional[datetime]:
    if isinstance(raw, datetime):
        value = raw
    else:
        text = _clean(raw, field)
        if text is None:
            return None
        if text[-1] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidParameter(field, f"Invalid '{field}' parameter, expected an ISO-8601 timestamp")
    # timezone 없는 값은 UTC로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_instant(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()
