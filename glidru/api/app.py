"""
FastAPI application for the GlidrU API.

This is the HTTP API the browser front-end talks to.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from glidru.api.questions import router as questions_router
from glidru.api.users import router as users_router
from glidru.auth.identity import IdentityProvider
from glidru.auth.local import LocalIdentityProvider
from glidru.config import Settings, configure_logging, get_settings
from glidru.core.errors import GlidrError, Unauthenticated
from glidru.core.utils import utc_now
from glidru.integrations.sentry import capture_exception, init_sentry
from glidru.services.questions import QuestionStore
from glidru.services.users import UserService
from glidru.storage.base import MetadataStorage
from glidru.storage.local import InMemoryMetadataStorage

logger = logging.getLogger(__name__)


# =============================================================================
# Backends
# =============================================================================


def create_backends(settings: Settings) -> tuple[MetadataStorage, IdentityProvider]:
    """
    Build the document store and identity provider for this process.

    Firebase when credentials or a project id are configured, in-memory
    otherwise. Production refuses the in-memory backends: the local
    identity provider trusts any token signed with its own secret.
    """
    if settings.use_firebase:
        from glidru.auth.firebase import FirebaseIdentityProvider, init_firebase
        from glidru.storage.firestore import FirestoreMetadataStorage

        firebase_app = init_firebase(settings)
        return FirestoreMetadataStorage(firebase_app), FirebaseIdentityProvider(firebase_app)

    if settings.is_production:
        raise RuntimeError(
            "Production requires Firebase: set FIREBASE_CREDENTIALS_PATH or "
            "FIREBASE_PROJECT_ID and unset USE_IN_MEMORY_BACKENDS"
        )
    if settings.uses_default_token_secret:
        logger.warning("Local identity provider is signing with the default secret")
    return InMemoryMetadataStorage(), LocalIdentityProvider(settings)


def _install_services(
    app: FastAPI,
    settings: Settings,
    storage: MetadataStorage,
    identity: IdentityProvider,
) -> None:
    app.state.storage = storage
    app.state.identity = identity
    app.state.questions = QuestionStore(storage, collection=settings.questions_collection)
    app.state.users = UserService(
        identity,
        storage,
        collection=settings.users_collection,
        page_size=settings.user_list_page_size,
    )


# =============================================================================
# Error Handlers
# =============================================================================


async def handle_domain_error(request: Request, exc: GlidrError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}

    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=exc,
        )
        capture_exception(exc, method=request.method, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})

    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        if field not in fields:
            fields.append(field)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "fields": fields},
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed unexpectedly", exc_info=exc)
    capture_exception(exc, method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: MetadataStorage | None = None,
    identity: IdentityProvider | None = None,
) -> FastAPI:
    """
    Create the API.

    Backends passed in are used as-is (tests pass fakes); missing ones are
    created during startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")

        if not hasattr(app.state, "questions"):
            _install_services(app, settings, *create_backends(settings))

        logger.info(f"GlidrU API starting in {settings.environment} mode")
        yield
        logger.info("GlidrU API shutting down")

    app = FastAPI(
        title="GlidrU API",
        description="Per-user question lists for college application planning",
        version="0.1.0",
        lifespan=lifespan,
    )

    if storage is not None or identity is not None:
        if storage is None or identity is None:
            default_storage, default_identity = create_backends(settings)
            storage = storage or default_storage
            identity = identity or default_identity
        _install_services(app, settings, storage, identity)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GlidrError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(questions_router, prefix=settings.api_prefix)
    app.include_router(users_router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "timestamp": utc_now().isoformat()}

    return app


def build_default_app() -> FastAPI:
    """Entry point for `uvicorn glidru.api.app:build_default_app --factory`."""
    configure_logging()
    return create_app()
