"""
Demo FastAPI application wiring the consent middleware
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from privacy_consent import __version__
from privacy_consent.api.routes import consent, health
from privacy_consent.core.config import get_settings
from privacy_consent.core.errors import ConsentProtocolError
from privacy_consent.core.logging_config import LoggingConfig
from privacy_consent.core.middleware import ConsentHeaderMiddleware, LoggingContextMiddleware
from privacy_consent.core.vocabulary import Vocabulary, get_vocabulary

LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    vocabulary = get_vocabulary()
    logger.info(
        f"Starting {settings.app_name} in {settings.app_env} mode",
        extra={
            "categories": list(vocabulary.categories),
            "purposes": list(vocabulary.purposes),
        },
    )
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app(vocabulary: Optional[Vocabulary] = None) -> FastAPI:
    """Build the application; ``vocabulary`` overrides the configured one"""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Consent-preference header protocol demo",
        version=__version__,
        lifespan=lifespan,
    )

    # Added first so it runs innermost, next to the endpoints
    app.add_middleware(ConsentHeaderMiddleware, vocabulary=vocabulary)
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.ack_header_name],
    )

    @app.exception_handler(ConsentProtocolError)
    async def consent_error_handler(request: Request, exc: ConsentProtocolError):
        """Caller errors from consent helpers become 400 responses"""
        logger.warning("Consent protocol error", extra={"error": exc.to_dict()})
        return JSONResponse(status_code=400, content={"detail": exc.to_dict()})

    app.include_router(health.router)
    app.include_router(consent.router)
    return app


app = create_app()
