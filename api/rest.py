import logging
from typing import Any, Optional
from fastapi import FastAPI, Body, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from core.config import Settings, get_settings
from core.db import init_engine, dispose_engine
from ingestion import IngestionService
from log_query import normalize
from log_store import LogStore
from query_executor import QueryExecutor
from response_cache import ResponseCache
from retry_policy import wait_for_store
from utils.exceptions import ServiceException, InternalError, ValidationFailed

logger = logging.getLogger(__name__)


def _wire_components(app: FastAPI, store: LogStore) -> None:
    app.state.store = store
    app.state.query_executor = QueryExecutor(store, app.state.cache)
    app.state.ingestion = IngestionService(store, app.state.cache)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LogStore] = None,
    cache: Optional[ResponseCache] = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Error Log Service", description="Error log ingestion and query API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=True,
    )

    app.state.settings = settings
    app.state.cache = cache or ResponseCache(
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.cache_max_entries,
    )
    app.state.store = None
    app.state.owns_engine = False
    if store is not None:
        _wire_components(app, store)

    @app.on_event("startup")
    async def on_startup():
        if app.state.store is not None:
            return
        engine = init_engine(settings.database_url, settings.db_timeout_seconds)
        store = LogStore(engine, timeout=settings.db_timeout_seconds)
        await wait_for_store(store)
        app.state.owns_engine = True
        _wire_components(app, store)
        logger.info("Log store connected")

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.owns_engine:
            await dispose_engine()

    # DI: app.state에 올려둔 컴포넌트 주입
    def get_query_executor(request: Request) -> QueryExecutor:
        return request.app.state.query_executor

    def get_ingestion(request: Request) -> IngestionService:
        return request.app.state.ingestion

    @app.get("/health")
    async def health():
        return {"status": "OK"}

    @app.post("/api/logs", status_code=201)
    async def create_logs(payload: Any = Body(...), ingestion: IngestionService = Depends(get_ingestion)):
        logs = await ingestion.ingest(payload)
        return {"status": "success", "data": [log.to_wire() for log in logs]}

    @app.get("/api/logs")
    async def get_logs(request: Request, executor: QueryExecutor = Depends(get_query_executor)):
        descriptor = normalize(
            request.query_params,
            max_page_size=settings.max_page_size,
            default_page_size=settings.default_page_size,
        )
        page = await executor.execute(descriptor)
        return page.to_wire()

    @app.patch("/api/logs/{log_id}")
    async def update_log_status(log_id: str, payload: Any = Body(None), ingestion: IngestionService = Depends(get_ingestion)):
        status = payload.get("status") if isinstance(payload, dict) else None
        log = await ingestion.update_status(log_id, status)
        return {"status": "success", "data": log.to_wire()}

    @app.exception_handler(ServiceException)
    async def service_exception_handler(request: Request, exc: ServiceException):
        if exc.status_code >= 500:
            logger.error(f"[{exc.code}] {exc.dev_message or exc.message} | {request.url}")
        else:
            logger.info(f"[{exc.code}] {exc.message} | {request.url}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        err = ValidationFailed("Invalid request body", dev_message=str(exc))
        logger.info(f"[{err.code}] {exc.errors()} | {request.url}")
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error | {request.url}")
        err = InternalError(dev_message=str(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    return app


app = create_app()
