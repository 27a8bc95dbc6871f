"""
Protocol vocabulary: the ordered category and purpose catalogues and the wire header names
"""
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from privacy_consent.core.config import get_settings
from privacy_consent.core.errors import TokenKind

# Built-in catalogue
DEFAULT_CATEGORIES: Tuple[str, ...] = ("coo", "equ", "sfw", "geo")
DEFAULT_PURPOSES: Tuple[str, ...] = ("fcn", "per", "adm", "ana", "com", "trd", "loc")

# Reserved wire literals
NOTHING_LITERAL = "{NOT}"
ACK_LITERAL = "ACK"
ASK_KEYWORD = "ASK"
TRACKING_LITERAL = "global-tracking"
TRACKING_PSEUDO_CATEGORY = "tracking"

_RESERVED_TOKENS = frozenset(["NOT", ACK_LITERAL, ASK_KEYWORD, TRACKING_LITERAL, TRACKING_PSEUDO_CATEGORY])
_FORBIDDEN_CHARS = frozenset("{}, \t\r\n")


@dataclass(frozen=True)
class Vocabulary:
    """Immutable catalogue shared by every request"""
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    purposes: Tuple[str, ...] = DEFAULT_PURPOSES
    consent_header_name: str = "Privacy-Consent"
    ack_header_name: str = "Privacy-Consent-Ack"

    def __post_init__(self):
        object.__setattr__(self, "categories", tuple(self.categories))
        object.__setattr__(self, "purposes", tuple(self.purposes))
        _validate_tokens("categories", self.categories)
        _validate_tokens("purposes", self.purposes)
        overlap = set(self.categories) & set(self.purposes)
        if overlap:
            raise ValueError(f"tokens used as both category and purpose: {sorted(overlap)}")
        widths = {len(token) for token in self.categories + self.purposes}
        if len(widths) != 1:
            raise ValueError(f"vocabulary tokens must share one width, got widths {sorted(widths)}")

    def is_category(self, token: str) -> bool:
        return token in self.categories

    def is_purpose(self, token: str) -> bool:
        return token in self.purposes

    def classify(self, token: str) -> Optional[TokenKind]:
        """Return which half of the vocabulary a token belongs to, or None"""
        if token in self.categories:
            return TokenKind.CATEGORY
        if token in self.purposes:
            return TokenKind.PURPOSE
        return None

    def category_index(self, category: str) -> int:
        return self.categories.index(category)

    def purpose_index(self, purpose: str) -> int:
        return self.purposes.index(purpose)


def _validate_tokens(label: str, tokens: Sequence[str]):
    if not tokens:
        raise ValueError(f"vocabulary {label} must not be empty")
    for token in tokens:
        if not isinstance(token, str) or not token:
            raise ValueError(f"vocabulary {label} contain an empty or non-string token: {token!r}")
        if _FORBIDDEN_CHARS & set(token):
            raise ValueError(f"vocabulary token {token!r} contains a delimiter character")
        if token in _RESERVED_TOKENS:
            raise ValueError(f"vocabulary token {token!r} is a reserved protocol word")
    if len(set(tokens)) != len(tokens):
        raise ValueError(f"vocabulary {label} contain duplicates")


def load_vocabulary(
    path: Union[str, Path],
    consent_header_name: str = "Privacy-Consent",
    ack_header_name: str = "Privacy-Consent-Ack",
) -> Vocabulary:
    """Load a vocabulary from a JSON file with 'categories' and 'purposes' lists"""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"vocabulary file {path} must contain a JSON object")
    try:
        categories = data["categories"]
        purposes = data["purposes"]
    except KeyError as e:
        raise ValueError(f"vocabulary file {path} is missing {e.args[0]!r}") from e
    return Vocabulary(
        categories=tuple(categories),
        purposes=tuple(purposes),
        consent_header_name=consent_header_name,
        ack_header_name=ack_header_name,
    )


@lru_cache()
def get_vocabulary() -> Vocabulary:
    """Get the process-wide vocabulary, loaded once from settings"""
    settings = get_settings()
    if settings.vocabulary_file:
        return load_vocabulary(
            settings.vocabulary_file,
            consent_header_name=settings.consent_header_name,
            ack_header_name=settings.ack_header_name,
        )
    return Vocabulary(
        consent_header_name=settings.consent_header_name,
        ack_header_name=settings.ack_header_name,
    )
