import pytest
from datetime import datetime, timezone
from pydantic import ValidationError
from schemas.error_log import ErrorLogCreate, ErrorLogRead, LogPage, Pagination

# 1. ErrorLogCreate 모델 테스트
def test_error_log_create_defaults():
    log = ErrorLogCreate(message="boom")
    assert log.level == "error"
    assert log.status == "new"
    assert log.source is None
    assert log.context is None

def test_error_log_create_aliases():
    log = ErrorLogCreate.model_validate({
        "message": "boom",
        "stackTrace": "at main.js:1",
        "browserInfo": {"platform": "MacOS"},
        "clientTimestamp": "2024-01-01T09:00:00+09:00",
    })
    assert log.stack_trace == "at main.js:1"
    assert log.browser_info == {"platform": "MacOS"}
    assert log.client_timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)

def test_error_log_create_validation_error():
    with pytest.raises(ValidationError):
        ErrorLogCreate(message=123)  # 잘못된 타입
    with pytest.raises(ValidationError):
        ErrorLogCreate(message="m", level="critical")

def test_error_log_create_null_level_uses_default():
    log = ErrorLogCreate.model_validate({"message": "m", "level": None, "status": None})
    assert log.level == "error"
    assert log.status == "new"

# 2. ErrorLogRead / LogPage 직렬화 테스트
def test_log_page_wire_shape():
    read = ErrorLogRead(
        id=1,
        message="m",
        level="info",
        status="new",
        stack_trace="trace",
        server_timestamp=datetime(2024, 1, 1, 12, 0),
    )
    page = LogPage(data=[read], pagination=Pagination(current_page=1, total_pages=1, total_logs=1, limit=20))
    wire = page.to_wire()
    assert wire["status"] == "success"
    assert wire["cached"] is False
    assert wire["pagination"] == {"currentPage": 1, "totalPages": 1, "totalLogs": 1, "limit": 20}
    record = wire["data"][0]
    assert record["stackTrace"] == "trace"
    assert record["serverTimestamp"].startswith("2024-01-01T12:00:00")
    assert record["serverTimestamp"].endswith("Z")

# 3. v2 model_config 사용
def test_models_use_config_dict():
    assert ErrorLogCreate.model_config["populate_by_name"] is True
    assert ErrorLogCreate.model_config["extra"] == "ignore"
    assert ErrorLogRead.model_config["from_attributes"] is True
