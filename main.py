import json
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from database import DocumentStore
from errors import GENERIC_ERROR_MESSAGE, ServiceError
from observability import setup_logging
import accounts
import resources
import storefront

logger = logging.getLogger(__name__)


class IndentedJSONResponse(JSONResponse):
    indent = 3

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=self.indent,
            separators=(",", ": "),
        ).encode("utf-8")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    owns_store = app.state.store is None
    if owns_store:
        store = DocumentStore(settings.mongo_uri, settings.database_name, settings.users_collection)
        # a StoreError here aborts startup before the server listens
        await run_in_threadpool(store.connect)
        app.state.store = store
    logger.info("Lessons storefront API started")
    yield
    if owns_store:
        app.state.store.close()
        app.state.store = None
    logger.info("Lessons storefront API shutting down")


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or get_settings()
    response_class = type("AppJSONResponse", (IndentedJSONResponse,), {"indent": settings.json_indent})

    app = FastAPI(title="Lessons Storefront API", lifespan=lifespan, default_response_class=response_class)
    app.state.settings = settings
    app.state.store = store

    # added before CORS so it sits inside it; 500s still get CORS headers
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
            response = response_class(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": GENERIC_ERROR_MESSAGE},
            )
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        return {"message": "Lessons storefront backend is running"}

    @app.get("/test")
    def test_database(request: Request):
        current = request.app.state.store
        response = {
            "backend": "Running",
            "database": "Not Available",
            "database_name": settings.database_name,
            "collections": [],
        }
        if current is None or not current.ping():
            return response_class(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response)
        response["database"] = "Connected"
        response["collections"] = current.db.list_collection_names()[:10]
        return response

    # fixed routes first so /api/search etc. are not taken as collection names
    app.include_router(storefront.router)
    app.include_router(accounts.router)
    app.include_router(resources.router)

    if os.path.isdir(settings.static_dir):
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    register_error_handlers(app, response_class)
    return app


def register_error_handlers(app: FastAPI, response_class=JSONResponse):

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"{exc.code} on {request.url.path}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return response_class(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return response_class(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request data",
                "details": [
                    {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # no route for this path, or none for this method
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(PyMongoError)
    async def store_error_handler(request: Request, exc: PyMongoError):
        logger.error(f"Store error on {request.url.path}: {exc}", exc_info=True)
        return response_class(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_ERROR_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return response_class(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_ERROR_MESSAGE},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
