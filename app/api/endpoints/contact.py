"""Contact form endpoints for the contact relay API.

This module contains the FastAPI route that relays contact form submissions
to the configured mailbox.
"""

import json
import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request, status

from app.api.api_key_guard import api_key_guard
from app.models.contact import ContactResponse, ErrorResponse
from app.services.contact_validator import validate_submission
from app.services.mail_service import mail_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Decode the request body, treating absent or malformed JSON as empty."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


@router.post(
    "/contact",
    response_model=ContactResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    summary="Relay contact form",
    description="Validate a contact form submission and forward it by email. Requires the x-api-key header.",
    responses={
        401: {"model": ErrorResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_contact_form(http_request: Request, authorized: bool = Depends(api_key_guard)) -> ContactResponse:
    """
    Relay a contact form message to the site owner.

    This endpoint:
    - Checks the shared secret before looking at the body
    - Validates and sanitizes the submitted fields
    - Composes a text and HTML notification and sends it over SMTP
    - Returns a preview link when a disposable test mailbox was used

    Args:
        http_request: FastAPI request object for the body and client metadata
        authorized: Result of the api_key_guard dependency

    Returns:
        ContactResponse with ok=True and an optional previewUrl

    Raises:
        ValidationError: If required fields are missing or the email is invalid
        TransportError: If the message could not be sanitized or sent
    """
    body = await read_json_body(http_request)
    submission = validate_submission(body)

    client_ip = http_request.client.host if http_request.client else None
    logger.info(f"Processing contact form submission from {submission.email}")

    result = await mail_service.send_contact(submission, remote_addr=client_ip)
    return ContactResponse(ok=result.ok, preview_url=result.preview_url)
