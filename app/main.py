"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory
from app.core.errors import DomainError, InvalidData
from app.services.bootstrap import run_bootstrap
from app.services.notifier import EmailNotifier

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "error_count": len(exc.errors())},
        )
        return JSONResponse(
            status_code=InvalidData.status_code,
            content={"message": InvalidData.default_message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker[Session] | None = None,
    notifier: EmailNotifier | None = None,
) -> FastAPI:
    """
    Build the application. Tests pass their own settings, session factory (e.g. in-memory
    SQLite) and notifier; otherwise they are built from the environment.
    """
    settings = settings or get_settings()
    if session_factory is None:
        session_factory = build_session_factory(
            build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        )
    if notifier is None:
        notifier = EmailNotifier.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.BOOTSTRAP_ON_STARTUP:
            db = session_factory()
            try:
                provinces_created, admin_created = run_bootstrap(db, settings)
                logger.info(
                    "Startup bootstrap done: provinces_created=%s admin_created=%s",
                    provinces_created,
                    admin_created,
                )
            finally:
                db.close()
        yield

    app = FastAPI(
        title="Doadores API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Doadores API"}

    return app


app = create_app()
