"""
Consent protocol error classification
"""
from enum import Enum
from typing import Any, Dict, Optional, Sequence


class ConsentErrorKind(str, Enum):
    """Closed set of error kinds raised by the codec"""
    UNKNOWN_TOKEN = "unknown_token"  # Decode time, recovered locally
    INVALID_VOCABULARY_REFERENCE = "invalid_vocabulary_reference"  # Caller typo or vocabulary mismatch
    MALFORMED_STATE = "malformed_state"  # Internal corruption
    INVALID_PAIR = "invalid_pair"  # Pair without exactly two elements
    PARSE_ERROR = "parse_error"  # Header value with no group at all


class TokenKind(str, Enum):
    """Which half of the vocabulary a token was expected to belong to"""
    CATEGORY = "category"
    PURPOSE = "purpose"


class ConsentProtocolError(Exception):
    """Base class for consent codec errors"""

    kind: ConsentErrorKind = ConsentErrorKind.MALFORMED_STATE

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "message": self.message,
            "kind": self.kind.value,
            "metadata": self.metadata,
        }


class InvalidVocabularyReference(ConsentProtocolError):
    """A category or purpose token that the installed vocabulary does not know"""

    kind = ConsentErrorKind.INVALID_VOCABULARY_REFERENCE

    def __init__(self, expected_kind: TokenKind, token: Any, context: Optional[str] = None):
        where = f" in {context}" if context else ""
        super().__init__(
            f"Unknown {expected_kind.value}{where} '{token}'. "
            f"Is the correct vocabulary installed?",
            metadata={"expected_kind": expected_kind.value, "token": token, "context": context},
        )
        self.expected_kind = expected_kind
        self.token = token
        self.context = context


class MalformedState(ConsentProtocolError):
    """A consent or ask matrix whose shape does not match the vocabulary"""

    kind = ConsentErrorKind.MALFORMED_STATE

    def __init__(self, detail: str, **metadata: Any):
        super().__init__(f"Consent state malformed: {detail}", metadata=metadata)
        self.detail = detail


class InvalidConsentPair(ConsentProtocolError):
    """A pair that is not exactly (category, purpose), or an unusable tracking target"""

    kind = ConsentErrorKind.INVALID_PAIR

    def __init__(self, pair: Any, detail: str = "expected 2 elements"):
        size = len(pair) if isinstance(pair, Sequence) and not isinstance(pair, str) else None
        super().__init__(
            f"Invalid consent pair {pair!r}: {detail}",
            metadata={"pair": repr(pair), "size": size, "detail": detail},
        )
        self.pair = pair
        self.detail = detail


class ParseError(ConsentProtocolError):
    """Header value that contains no brace-delimited group"""

    kind = ConsentErrorKind.PARSE_ERROR

    def __init__(self, raw: str):
        super().__init__(
            "Consent header value contains no group",
            metadata={"length": len(raw)},
        )
        self.raw = raw
