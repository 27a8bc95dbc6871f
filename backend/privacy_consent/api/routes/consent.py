"""
Consent inspection and ask endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from privacy_consent.components.contracts import ConsentState
from privacy_consent.components.matrix import true_cells
from privacy_consent.core.errors import ConsentProtocolError
from privacy_consent.core.logging_config import LoggingConfig
from privacy_consent.core.vocabulary import TRACKING_PSEUDO_CATEGORY
from privacy_consent.services.consent_service import (ask_for_consent, consent_given,
                                                      get_consent_state, log_data_collection)

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(prefix="/consent", tags=["consent"])


class AskPayload(BaseModel):
    reason: str = Field(..., description="Human-readable reason shown to the user")
    id: str = Field(..., description="Identifier of this ask")
    pairs: List[List[str]] = Field(default_factory=list, description="[category, purpose] or ['tracking', target]")


def _parse_pair(raw: str) -> List[str]:
    return raw.split(":")


@router.get("")
async def read_consent_state(state: Optional[ConsentState] = Depends(get_consent_state)):
    """
    Decoded consent preference of the current request

    Returns:
        dict: whether a preference was sent, granted pairs and tracking targets
    """
    if state is None:
        raise HTTPException(status_code=500, detail="Consent middleware not installed")
    return {
        "preference_communicated": state.preference_communicated,
        "granted": [list(pair) for pair in true_cells(state.matrix)],
        "tracking": list(state.tracking),
    }


@router.get("/check")
async def check_consent(request: Request, pair: List[str] = Query(default=[])):
    """
    Check consent for ``category:purpose`` pairs (``tracking:<target>`` for tracking)
    """
    try:
        granted = consent_given(request, *[_parse_pair(p) for p in pair])
    except ConsentProtocolError as e:
        logger.info("Rejected consent check", extra={"error": e.to_dict()})
        raise HTTPException(status_code=400, detail=e.to_dict())
    if granted:
        for category, purpose in (_parse_pair(p) for p in pair):
            if category != TRACKING_PSEUDO_CATEGORY:
                log_data_collection(request, category, purpose, description="consent check")
    return {"granted": granted}


@router.post("/ask")
async def create_ask(request: Request, payload: AskPayload):
    """Queue an ask; it is encoded into the acknowledgement header of this response"""
    try:
        ask = ask_for_consent(request, payload.reason, payload.id, *payload.pairs)
    except ConsentProtocolError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return {"queued": ask.id, "tracking": list(ask.tracking)}
