"""
Health check endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from privacy_consent.core.config import get_settings
from privacy_consent.core.vocabulary import get_vocabulary

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint

    Returns:
        dict: Health status and the installed vocabulary
    """
    settings = get_settings()
    vocabulary = get_vocabulary()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "vocabulary": {
            "categories": list(vocabulary.categories),
            "purposes": list(vocabulary.purposes),
        },
    }
