"""
ASGI middleware for request logging context and the consent header exchange
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from privacy_consent.components.encoder import encode_ack_header
from privacy_consent.components.query import preference_communicated
from privacy_consent.core.config import get_settings
from privacy_consent.core.logging_config import LoggingConfig, header_log_field
from privacy_consent.core.vocabulary import Vocabulary, get_vocabulary
from privacy_consent.services.consent_service import read_consent

logger = LoggingConfig.get_logger(__name__)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to add request context to logs"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.time()
        try:
            response = await call_next(request)
            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            response.headers["X-Request-ID"] = request_id
            return response
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            raise
        finally:
            LoggingConfig.clear_context()


class ConsentHeaderMiddleware(BaseHTTPMiddleware):
    """
    Decode the consent header on the way in, encode the acknowledgement on the way out

    Endpoint code reads ``request.state.consent`` and queues asks on
    ``request.state.consent_asks`` (see ``privacy_consent.services.consent_service``).
    The encoder runs exactly once per response, after the endpoint returns and
    before headers are sent.
    """

    def __init__(self, app: ASGIApp, vocabulary: Optional[Vocabulary] = None):
        super().__init__(app)
        self.vocabulary = vocabulary

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        vocabulary = self.vocabulary or get_vocabulary()

        request.state.consent_vocabulary = vocabulary
        request.state.consent = read_consent(request.headers, vocabulary)
        request.state.consent_asks = []
        request.state.data_collection_log = []

        response = await call_next(request)

        events = getattr(request.state, "data_collection_log", None) or []
        for event in events:
            logger.info(
                "Data collected",
                extra={
                    "category": event.category,
                    "purpose": event.purpose,
                    "description": event.description,
                    "collected_at": event.timestamp.isoformat(),
                },
            )

        asks = getattr(request.state, "consent_asks", None)
        if asks is None:
            logger.error("Consent ask list missing from request state")
            return response

        ack_pending = get_settings().always_acknowledge or preference_communicated(
            request.state.consent
        )
        if not asks and not ack_pending:
            return response

        value = encode_ack_header(ack_pending, asks)
        response.headers[vocabulary.ack_header_name] = value
        response.headers.add_vary_header(vocabulary.consent_header_name)
        logger.debug(
            "Consent response header set",
            extra={header_log_field(vocabulary.ack_header_name): value, "ask_count": len(asks)},
        )
        return response
