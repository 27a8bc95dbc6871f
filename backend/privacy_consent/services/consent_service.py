"""
Request-scoped consent helpers for endpoint code.

The middleware stores per-request state on ``request.state``:

- ``consent``: the decoded ConsentState
- ``consent_asks``: ordered list of AskRequest to encode at response time
- ``data_collection_log``: DataCollectionEvent records for the audit log
- ``consent_vocabulary``: the vocabulary the state was decoded with
"""
from typing import List, Optional, Sequence

from fastapi import Request
from starlette.datastructures import Headers

from privacy_consent.components.contracts import AskRequest, ConsentState, DataCollectionEvent
from privacy_consent.components.decoder import absent_state, decode_consent_header
from privacy_consent.components.encoder import build_ask
from privacy_consent.components.query import consent_given as _consent_given
from privacy_consent.components.query import preference_communicated
from privacy_consent.core.errors import ParseError
from privacy_consent.core.logging_config import LoggingConfig, header_log_field
from privacy_consent.core.vocabulary import Vocabulary, get_vocabulary

logger = LoggingConfig.get_logger(__name__)


def read_consent(headers: Headers, vocabulary: Optional[Vocabulary] = None) -> ConsentState:
    """Decode the inbound consent header, degrading to the absent state on failure"""
    vocabulary = vocabulary or get_vocabulary()
    raw = headers.get(vocabulary.consent_header_name)
    if not raw or not raw.strip():
        logger.debug("No consent preference sent")
        return absent_state(vocabulary)
    try:
        return decode_consent_header(raw, vocabulary)
    except ParseError as e:
        logger.warning(
            "Unparsable consent header ignored",
            extra={"error": e.to_dict(), header_log_field(vocabulary.consent_header_name): raw},
        )
        return absent_state(vocabulary)


def get_consent_state(request: Request) -> Optional[ConsentState]:
    """FastAPI dependency returning the decoded state, if the middleware ran"""
    return getattr(request.state, "consent", None)


def _request_vocabulary(request: Request) -> Vocabulary:
    return getattr(request.state, "consent_vocabulary", None) or get_vocabulary()


def preference_sent(request: Request) -> bool:
    """Whether the request carried a consent header"""
    return preference_communicated(get_consent_state(request))


def consent_given(request: Request, *pairs: Sequence[str]) -> bool:
    """Whether consent for all (category, purpose) pairs is given"""
    return _consent_given(get_consent_state(request), pairs, _request_vocabulary(request))


def _pending_asks(request: Request) -> List[AskRequest]:
    asks = getattr(request.state, "consent_asks", None)
    if asks is None:
        asks = []
        request.state.consent_asks = asks
    return asks


def ask_for_consent(request: Request, reason: str, ask_id: str, *requested: Sequence[str]) -> AskRequest:
    """Queue an ask for consent on the response to this request"""
    ask = build_ask(reason, ask_id, *requested, vocabulary=_request_vocabulary(request))
    _pending_asks(request).append(ask)
    return ask


def log_data_collection(
    request: Request,
    category: str,
    purpose: str,
    description: Optional[str] = None,
) -> DataCollectionEvent:
    """Record that data was collected while serving this request"""
    event = DataCollectionEvent(category=category, purpose=purpose, description=description)
    log = getattr(request.state, "data_collection_log", None)
    if log is None:
        log = []
        request.state.data_collection_log = log
    log.append(event)
    return event
