"""
Inbound consent header decoder.

The header value is a run of brace-delimited groups with no separator::

    {coo equ ana per}{geo loc}{global-tracking adv1,adv2}

``{NOT}`` on its own means "nothing allowed". A group starting with
``global-tracking`` lists tracking targets; every other group is a set of
category and purpose tokens whose cross product is granted. Unknown tokens are
skipped so that newer senders stay readable by older receivers.
"""
import re
from typing import List, Optional, Tuple

from privacy_consent.components.contracts import ConsentState, UnknownToken
from privacy_consent.components.matrix import empty_matrix, matrix_from_cells
from privacy_consent.core.errors import ParseError, TokenKind
from privacy_consent.core.logging_config import LoggingConfig
from privacy_consent.core.vocabulary import (NOTHING_LITERAL, TRACKING_LITERAL,
                                             Vocabulary, get_vocabulary)

logger = LoggingConfig.get_logger(__name__)

_GROUP_RE = re.compile(r"{([^}]+)}")


def absent_state(vocabulary: Optional[Vocabulary] = None) -> ConsentState:
    """State for a request that sent no preference at all"""
    vocabulary = vocabulary or get_vocabulary()
    return ConsentState(matrix=empty_matrix(vocabulary), preference_communicated=False)


def _is_tracking_group(content: str) -> bool:
    return content == TRACKING_LITERAL or content.startswith(TRACKING_LITERAL + " ")


def _parse_tracking_group(content: str) -> Tuple[str, ...]:
    targets = content[len(TRACKING_LITERAL):].split(",")
    return tuple(target.strip() for target in targets if target.strip())


def parse_consent_header(
    raw: str,
    vocabulary: Optional[Vocabulary] = None,
) -> Tuple[ConsentState, List[UnknownToken]]:
    """
    Parse a header value into a state plus the list of skipped tokens

    Raises:
        ParseError: the value holds no brace-delimited group
    """
    vocabulary = vocabulary or get_vocabulary()
    value = raw.strip()

    if value == NOTHING_LITERAL:
        return ConsentState(matrix=empty_matrix(vocabulary), preference_communicated=True), []

    groups = _GROUP_RE.findall(value)
    if not groups:
        raise ParseError(raw)

    granted = set()
    tracking: Tuple[str, ...] = ()
    unknown: List[UnknownToken] = []

    for content in groups:
        if _is_tracking_group(content):
            # last tracking group wins
            tracking = _parse_tracking_group(content)
            continue

        categories = []
        purposes = []
        for token in content.split(" "):
            if not token:
                continue
            kind = vocabulary.classify(token)
            if kind is TokenKind.CATEGORY:
                categories.append(token)
            elif kind is TokenKind.PURPOSE:
                purposes.append(token)
            else:
                unknown.append(UnknownToken(token=token, group=content))

        granted.update((c, p) for c in categories for p in purposes)

    state = ConsentState(
        matrix=matrix_from_cells(vocabulary, granted),
        tracking=tracking,
        preference_communicated=True,
    )
    return state, unknown


def decode_consent_header(raw: str, vocabulary: Optional[Vocabulary] = None) -> ConsentState:
    """Decode an inbound header value, logging and skipping unknown tokens"""
    state, unknown = parse_consent_header(raw, vocabulary)
    for diagnostic in unknown:
        logger.warning(
            "Unknown element in consent header: %s",
            diagnostic.token,
            extra={"token": diagnostic.token},
        )
    return state
