"""
Outbound acknowledgement header encoder and ask construction
"""
from typing import List, Optional, Sequence

from privacy_consent.components.compactor import compact, render_groups
from privacy_consent.components.contracts import AskRequest
from privacy_consent.components.matrix import contains_true, matrix_from_cells, split_pair
from privacy_consent.core.config import get_settings
from privacy_consent.core.errors import InvalidConsentPair
from privacy_consent.core.logging_config import LoggingConfig
from privacy_consent.core.vocabulary import (ACK_LITERAL, ASK_KEYWORD, TRACKING_LITERAL,
                                             TRACKING_PSEUDO_CATEGORY, Vocabulary,
                                             get_vocabulary)

logger = LoggingConfig.get_logger(__name__)

_TARGET_DELIMITERS = frozenset("{},")


def _check_tracking_target(pair: Sequence[str], target: str):
    if not isinstance(target, str) or not target.strip():
        raise InvalidConsentPair(pair, "tracking target must be a non-empty string")
    if target != target.strip() or _TARGET_DELIMITERS & set(target):
        raise InvalidConsentPair(pair, "tracking target contains whitespace padding or a delimiter")


def build_ask(
    reason: str,
    ask_id: str,
    *requested: Sequence[str],
    vocabulary: Optional[Vocabulary] = None,
) -> AskRequest:
    """
    Build an ask for the given (category, purpose) pairs

    A pair whose first element is ``"tracking"`` requests the tracking target
    named by its second element instead of a matrix cell.

    Raises:
        InvalidConsentPair: a pair without exactly two elements, or a tracking
            target that is empty or holds a delimiter
        InvalidVocabularyReference: an unknown category or purpose
    """
    vocabulary = vocabulary or get_vocabulary()

    limit = get_settings().reason_soft_limit
    if len(reason) > limit:
        logger.warning(
            "Reasoning text is too long",
            extra={"ask_id": ask_id, "reason_length": len(reason), "reason_limit": limit},
        )

    cells = []
    tracking: List[str] = []
    for pair in requested:
        first, second = split_pair(pair)
        if first == TRACKING_PSEUDO_CATEGORY:
            _check_tracking_target(pair, second)
            tracking.append(second)
        else:
            cells.append((first, second))

    return AskRequest(
        matrix=matrix_from_cells(vocabulary, cells, context="ask_for_consent()"),
        tracking=tuple(tracking),
        reason=reason,
        id=ask_id,
    )


def render_ask(ask: AskRequest) -> str:
    """``{<groups><tracking group>} ID{<id>} TXT{<reason>}``"""
    parts = ["{"]
    if contains_true(ask.matrix):
        parts.append(render_groups(compact(ask.matrix)))
    if ask.tracking:
        parts.append("{" + TRACKING_LITERAL + " " + ",".join(ask.tracking) + "}")
    parts.append("}")
    parts.append(f" ID{{{ask.id}}} TXT{{{ask.reason}}}")
    return "".join(parts)


def encode_ack_header(ack_pending: bool, asks: Sequence[AskRequest]) -> str:
    """
    Assemble the outbound header value

    With no asks the value is the bare acknowledgement literal. Whether a bare
    acknowledgement is sent at all when ``ack_pending`` is false is decided by
    the hosting middleware.
    """
    if not asks:
        return ACK_LITERAL

    value = f"{ACK_LITERAL} {{{ASK_KEYWORD} " + "".join(render_ask(ask) for ask in asks) + "}"
    logger.debug(
        "Encoded consent response header",
        extra={"ask_count": len(asks), "ack_pending": ack_pending},
    )
    return value
