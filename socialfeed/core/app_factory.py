from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..application.services.post_service import PostService
from ..domain.errors import FeedError
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import posts as posts_router
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Social Feed", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(posts_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FeedError)
    async def handle_feed_error(request: Request, exc: FeedError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _format_validation_errors(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"msg": "Server error"},
        )


def _format_validation_errors(errors: Any) -> List[Dict[str, Any]]:
    formatted: List[Dict[str, Any]] = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ())]
        param = location[-1] if len(location) > 1 else None
        message = str(error.get("msg", "Invalid value"))
        if error.get("type") == "missing" and param:
            message = f"{param} is required"
        elif message.startswith("Value error, "):
            message = message[len("Value error, "):]
        item: Dict[str, Any] = {"msg": message, "location": location[0] if location else None}
        if param:
            item["param"] = param
        formatted.append(item)
    return formatted


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        persistence = SQLitePersistence(settings.database_path)
        password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        token_service = TokenService(
            jwt_secret=settings.jwt_secret,
            jwt_algorithm=settings.jwt_algorithm,
            expiration=timedelta(minutes=settings.jwt_exp_minutes),
        )
        auth_service = AuthService(persistence, password_hasher, token_service)
        post_service = PostService(persistence)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            password_hasher=password_hasher,
            token_service=token_service,
            auth_service=auth_service,
            post_service=post_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Social feed started with database %s", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan
