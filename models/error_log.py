from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Index
from .base import Base

LEVELS = ("error", "warning", "info")
STATUSES = ("new", "acknowledged", "resolved", "ignored")


def utcnow() -> datetime:
    # DB에는 UTC naive 값으로 저장
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ErrorLog(Base):
    __tablename__ = 'error_logs'
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    message = Column(Text, nullable=False)
    stack_trace = Column(Text, nullable=True)
    source = Column(String(255), nullable=True, index=True)
    level = Column(String(16), nullable=False, default="error", index=True)
    context = Column(JSON, nullable=True)
    browser_info = Column(JSON, nullable=True)
    status = Column(String(16), nullable=False, default="new", index=True)
    server_timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    client_timestamp = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_error_logs_server_timestamp_id", "server_timestamp", "id"),
    )

    def __repr__(self):
        return f"<ErrorLog(id={self.id}, level='{self.level}', status='{self.status}')>"
