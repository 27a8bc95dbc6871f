"""
Consent queries over a decoded state
"""
from typing import Any, Iterable, Optional, Sequence

from privacy_consent.components.contracts import ConsentState
from privacy_consent.components.matrix import cell, require_pair, split_pair
from privacy_consent.core.errors import MalformedState
from privacy_consent.core.logging_config import LoggingConfig
from privacy_consent.core.vocabulary import (TRACKING_PSEUDO_CATEGORY, Vocabulary,
                                             get_vocabulary)

logger = LoggingConfig.get_logger(__name__)


def preference_communicated(state: Any) -> bool:
    """True only for a ConsentState decoded from a header that was actually sent"""
    if state is None:
        logger.debug("No consent state available")
        return False
    if not isinstance(state, ConsentState):
        logger.warning("Malformed consent state", extra={"state_type": type(state).__name__})
        return False
    if not isinstance(state.preference_communicated, bool):
        logger.warning("Malformed consent state: preference flag is not a bool")
        return False
    return state.preference_communicated


def consent_given(
    state: Optional[ConsentState],
    pairs: Iterable[Sequence[str]],
    vocabulary: Optional[Vocabulary] = None,
) -> bool:
    """
    Whether every (category, purpose) pair has been granted

    ``("tracking", target)`` checks membership of ``target`` in the tracking list.

    Raises:
        InvalidConsentPair: a pair without exactly two elements
        InvalidVocabularyReference: caller used a token the vocabulary lacks
        MalformedState: the state cannot answer for a known pair
    """
    if not preference_communicated(state):
        return False

    vocabulary = vocabulary or get_vocabulary()

    for pair in pairs:
        first, second = split_pair(pair)
        if first == TRACKING_PSEUDO_CATEGORY:
            if not isinstance(state.tracking, (tuple, list)):
                raise MalformedState("tracking list is not a sequence")
            granted = second in state.tracking
        else:
            require_pair(vocabulary, first, second, context="consent_given()")
            granted = cell(state.matrix, first, second)
        if not granted:
            return False
    return True
