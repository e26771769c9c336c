import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from medscribe.config import Settings
from medscribe.dependencies import limiter
from medscribe.exceptions import MedScribeError, medscribe_error_handler
from medscribe.routers import handwriting, health, records
from medscribe.services.document_ai import DocumentAIService
from medscribe.services.gemini import GeminiService
from medscribe.services.rxnorm import RxNormClient

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        # Only create real clients if not already set (tests inject mocks)
        if not hasattr(app.state, "document_ai_service"):
            try:
                app.state.document_ai_service = DocumentAIService(
                    project_id=settings.gcp_project_id,
                    location=settings.gcp_location,
                    processor_id=settings.gcp_processor_id,
                )
            except Exception as exc:
                logger.warning("Document AI unavailable: %s", exc)
                app.state.document_ai_service = None
        if not hasattr(app.state, "gemini_service"):
            try:
                app.state.gemini_service = GeminiService(
                    api_key=settings.gemini_api_key,
                    model_name=settings.gemini_model,
                )
            except Exception as exc:
                logger.warning("Gemini unavailable: %s", exc)
                app.state.gemini_service = None
        if not hasattr(app.state, "rxnorm_client"):
            app.state.rxnorm_client = RxNormClient(
                base_url=settings.rxnorm_base_url,
                timeout=settings.rxnorm_timeout_seconds,
            )
        yield

    application = FastAPI(
        title="MedScribe API",
        description=(
            "Handwritten prescription recognition and medical record "
            "summaries with Document AI and Gemini"
        ),
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_exception_handler(MedScribeError, medscribe_error_handler)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router)
    application.include_router(handwriting.router)
    application.include_router(records.router)

    return application


def _create_default_app() -> FastAPI:
    """Create app with settings from environment. Used by uvicorn."""
    try:
        return create_app()
    except Exception:
        # During testing or when env vars aren't set, return a placeholder.
        # Tests use create_app(settings=...) directly.
        return FastAPI()


app = _create_default_app()
