from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, Any, List, Literal
from datetime import datetime, timezone

Level = Literal["error", "warning", "info"]
Status = Literal["new", "acknowledged", "resolved", "ignored"]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ErrorLogCreate(BaseModel):
    """Incoming error report. Unknown fields (including serverTimestamp) are dropped."""
    message: str
    level: Level = "error"
    source: Optional[str] = None
    stack_trace: Optional[str] = Field(None, alias="stackTrace")
    context: Optional[Dict[str, Any]] = None
    browser_info: Optional[Dict[str, Any]] = Field(None, alias="browserInfo")
    status: Status = "new"
    client_timestamp: Optional[datetime] = Field(None, alias="clientTimestamp")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Error message is required")
        return v

    @field_validator("level", "status", mode="before")
    @classmethod
    def null_means_default(cls, v, info):
        if v is None:
            return "error" if info.field_name == "level" else "new"
        return v

    @field_validator("client_timestamp")
    @classmethod
    def client_timestamp_utc(cls, v):
        return as_utc(v)


class ErrorLogRead(BaseModel):
    id: int
    message: str
    level: str
    source: Optional[str] = None
    stack_trace: Optional[str] = Field(None, serialization_alias="stackTrace")
    context: Optional[Dict[str, Any]] = None
    browser_info: Optional[Dict[str, Any]] = Field(None, serialization_alias="browserInfo")
    status: str
    server_timestamp: datetime = Field(serialization_alias="serverTimestamp")
    client_timestamp: Optional[datetime] = Field(None, serialization_alias="clientTimestamp")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("server_timestamp", "client_timestamp", "created_at", "updated_at")
    @classmethod
    def timestamps_utc(cls, v):
        return as_utc(v)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Pagination(BaseModel):
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    total_logs: int = Field(serialization_alias="totalLogs")
    limit: int


class LogPage(BaseModel):
    data: List[ErrorLogRead]
    pagination: Pagination
    cached: bool = False

    def to_wire(self) -> Dict[str, Any]:
        body = self.model_dump(mode="json", by_alias=True)
        return {"status": "success", **body}
