"""
Codec and ASGI middleware for the consent-preference header protocol.
"""
from privacy_consent.components.compactor import compact, render_group, render_groups
from privacy_consent.components.contracts import (AskRequest, ConsentMatrix,
                                                  ConsentState, DataCollectionEvent,
                                                  UnknownToken)
from privacy_consent.components.decoder import (absent_state, decode_consent_header,
                                                parse_consent_header)
from privacy_consent.components.encoder import build_ask, encode_ack_header, render_ask
from privacy_consent.components.query import consent_given, preference_communicated
from privacy_consent.core.errors import (ConsentErrorKind, ConsentProtocolError,
                                         InvalidConsentPair, InvalidVocabularyReference,
                                         MalformedState, ParseError, TokenKind)
from privacy_consent.core.vocabulary import Vocabulary, get_vocabulary, load_vocabulary

__version__ = "0.1.0"

__all__ = [
    "AskRequest",
    "ConsentErrorKind",
    "ConsentMatrix",
    "ConsentProtocolError",
    "ConsentState",
    "DataCollectionEvent",
    "InvalidConsentPair",
    "InvalidVocabularyReference",
    "MalformedState",
    "ParseError",
    "TokenKind",
    "UnknownToken",
    "Vocabulary",
    "absent_state",
    "build_ask",
    "compact",
    "consent_given",
    "decode_consent_header",
    "encode_ack_header",
    "get_vocabulary",
    "load_vocabulary",
    "parse_consent_header",
    "preference_communicated",
    "render_ask",
    "render_group",
    "render_groups",
]
