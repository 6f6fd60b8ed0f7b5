import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, configure_logging, get_settings
from exceptions import MethodNotAllowed
from form_service import health, prepare_store
from routing import (
    CORS_HEADERS,
    HEALTH_PATH,
    PREFLIGHT_HEADERS,
    SUBMISSIONS_PATH,
    SUBMIT_PATH,
    Reply,
    list_all,
    submit,
)
from schemas import HealthResponse
from stores import SubmissionStore, build_store

logger = logging.getLogger(__name__)


def to_response(reply: Reply) -> JSONResponse:
    return JSONResponse(status_code=reply.status, content=reply.payload, headers=reply.headers)


def get_store(request: Request) -> SubmissionStore:
    return request.app.state.store


def create_app(settings: Optional[Settings] = None, store: Optional[SubmissionStore] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One store for the life of the process, shared by all requests
        app.state.store = store if store is not None else build_store(settings)
        await run_in_threadpool(prepare_store, app.state.store, settings.SHEET_TITLE)
        yield

    app = FastAPI(
        title="Registration Form API",
        description="Collects form submissions into a Google Sheet",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        response = await call_next(request)
        # Ensure CORS headers are present for all responses
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and wrong methods both get the 405 failure body
        rejected = MethodNotAllowed(request.method, request.url.path)
        logger.info(f"Rejected request: {rejected} ({exc.status_code})")
        return JSONResponse(
            status_code=rejected.status_code,
            content={"success": False, "message": rejected.public_message},
        )

    @app.options("/{path:path}")
    async def options_handler(path: str):
        return JSONResponse(status_code=200, content={}, headers=PREFLIGHT_HEADERS)

    @app.get(HEALTH_PATH, response_model=HealthResponse)
    async def health_check():
        return health()

    @app.get(SUBMISSIONS_PATH)
    def get_submissions(store: SubmissionStore = Depends(get_store)):
        return to_response(list_all(store))

    @app.post(SUBMIT_PATH)
    async def submit_form(request: Request, store: SubmissionStore = Depends(get_store)):
        raw = await request.body()
        try:
            body = json.loads(raw) if raw else {}
        except ValueError:
            body = {}
        reply = await run_in_threadpool(submit, body, store, settings.SHEET_TITLE)
        return to_response(reply)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=get_settings().PORT,
    )
