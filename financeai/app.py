"""FastAPI application factory for the FinanceAI API."""
from __future__ import annotations

import logging
import random
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from financeai.core.config import Settings, get_settings
from financeai.core.logging import configure_logging
from financeai.repositories import Repository, build_repository
from financeai.routers import ai_tools as ai_tools_router
from financeai.routers import blogs as blogs_router
from financeai.routers import market as market_router
from financeai.routers import newsletter as newsletter_router
from financeai.routers import users as users_router
from financeai.services.ai_tools_service import AIToolsService
from financeai.services.blog_service import BlogService
from financeai.services.content_client import ContentClient, GeminiContentClient
from financeai.services.market_service import MarketService
from financeai.services.newsletter_service import NewsletterService
from financeai.services.user_service import UserService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:5000",
    "http://127.0.0.1:5000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline security headers for JSON responses."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        return JSONResponse({"message": "Invalid request"}, status_code=400)

    @app.exception_handler(SQLAlchemyError)
    async def _storage_failure(request: Request, exc: SQLAlchemyError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse({"message": "Internal server error"}, status_code=500)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"message": "Internal server error"}, status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    *,
    repository: Optional[Repository] = None,
    content_client: Optional[ContentClient] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Build the app; collaborators not passed in are built from settings."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if repository is None:
        repository = build_repository(settings)
    if content_client is None:
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; AI generation requests will fail")
        content_client = GeminiContentClient(settings.gemini_api_key, settings.gemini_model)

    app = FastAPI(title="FinanceAI API")

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(DEV_ORIGINS)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _register_error_handlers(app)

    app.state.settings = settings
    app.state.repository = repository
    app.state.blog_service = BlogService(repository, content_client)
    app.state.ai_tools_service = AIToolsService(
        repository, content_client, dedupe=settings.stock_analysis_dedupe, rng=rng
    )
    app.state.newsletter_service = NewsletterService(repository)
    app.state.user_service = UserService(repository)
    app.state.market_service = MarketService(rng)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "storage": repository.backend}

    app.include_router(blogs_router.router)
    app.include_router(ai_tools_router.router)
    app.include_router(newsletter_router.router)
    app.include_router(users_router.router)
    app.include_router(market_router.router)

    logger.info("FinanceAI API ready (storage=%s, env=%s)", repository.backend, settings.app_env)
    return app


def main() -> None:
    import uvicorn

    uvicorn.run("financeai.app:create_app", factory=True, host="0.0.0.0", port=5000)


if __name__ == "__main__":
    main()
