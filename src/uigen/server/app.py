"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from uigen.backends.base import Generator, build_generator
from uigen.errors import (
    BackendError,
    CodeValidationError,
    SessionNotFoundError,
    UIGenError,
    VersionNotFoundError,
)
from uigen.schemas.config import AppConfig
from uigen.server.routers import generate, health, sessions
from uigen.sessions.chat import ChatService
from uigen.sessions.store import SessionStore

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SessionNotFoundError)
    @app.exception_handler(VersionNotFoundError)
    async def not_found(request: Request, exc: UIGenError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CodeValidationError)
    async def invalid_code(request: Request, exc: CodeValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})

    @app.exception_handler(BackendError)
    async def backend_failed(request: Request, exc: BackendError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(UIGenError)
    async def generation_failed(request: Request, exc: UIGenError) -> JSONResponse:
        logger.error("Generation failed on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": str(exc) or "Internal Server Error"})


def create_app(
    config: AppConfig | None = None,
    generator: Generator | None = None,
    *,
    dry_run: bool = False,
) -> FastAPI:
    config = config or AppConfig()
    generator = generator or build_generator(config, dry_run=dry_run)
    store = SessionStore(max_sessions=config.max_sessions, max_versions=config.max_versions)

    app = FastAPI(
        title="uigen",
        description="Natural-language UI generation from a fixed component library",
        version="0.1.0",
    )
    app.state.config = config
    app.state.generator = generator
    app.state.store = store
    app.state.chat = ChatService(store, generator, max_prompt_chars=config.max_prompt_chars)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(generate.router)
    app.include_router(sessions.router, prefix="/api/v1")

    logger.info("uigen application initialized (backend=%s)", generator.name)
    return app
