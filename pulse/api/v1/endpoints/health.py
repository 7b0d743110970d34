from fastapi import APIRouter
from typing import Any

from pulse.core.config import settings

router = APIRouter()

@router.get("", response_model=dict[str, Any])
def health_check() -> Any:
    """
    Health check endpoint. Does not touch the database or the AI provider.
    """
    return {"status": "ok", "version": settings.VERSION}
