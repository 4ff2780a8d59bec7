import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from draftpress.config import Settings, settings as default_settings
from draftpress.db.engine import build_engine, build_session_factory
from draftpress.errors import DraftpressError
from draftpress.routers import projects, versions, files, publish, preview, tools

logger = logging.getLogger("draftpress.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    engine = build_engine(app.state.settings)
    app.state.session_factory = build_session_factory(engine)
    try:
        yield
    finally:
        await engine.dispose()


async def handle_domain_error(request: Request, exc: DraftpressError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = default_settings

    app = FastAPI(title="draftpress", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DraftpressError, handle_domain_error)

    app.include_router(projects.router)
    app.include_router(versions.router)
    app.include_router(files.router)
    app.include_router(publish.router)
    app.include_router(preview.router)
    app.include_router(tools.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def main() -> None:
    logging.basicConfig(level=default_settings.log_level.upper())
    logger.info("draftpress API starting (host=%s, port=%d)", default_settings.api_host, default_settings.api_port)
    uvicorn.run(
        "draftpress.main:create_app",
        factory=True,
        host=default_settings.api_host,
        port=default_settings.api_port,
        log_level=default_settings.log_level.lower(),
    )
