from fastapi import Request
import logging

from app.core.config import settings
from app.services.contact_validator import verify_api_key

logger = logging.getLogger(__name__)


async def api_key_guard(request: Request):
    """Guard that requires the shared secret in the x-api-key header."""
    verify_api_key(request.headers.get("x-api-key"), settings.API_KEY)
    return True
