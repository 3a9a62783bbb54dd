"""
Contact Validator Module

Checks the shared secret and turns a raw request body into a ContactSubmission.
Nothing here performs I/O; every rejection is raised before any external call.
"""

import re
import logging
from typing import Any, Dict, Optional

from app.core.patterns import EMAIL_PATTERN
from app.core.exceptions import InvalidEmailError, MissingFieldsError, UnauthorizedError
from app.models.contact import ContactSubmission

logger = logging.getLogger(__name__)

MAX_HEADER_FIELD_LENGTH = 200
MAX_EMAIL_LENGTH = 256
MAX_MESSAGE_LENGTH = 10000

REQUIRED_FIELDS = ("subject", "name", "email", "message")

_LINE_BREAKS = re.compile(r"[\r\n]+")


def verify_api_key(provided: Optional[str], expected: Optional[str]) -> None:
    """Reject the request unless the shared secret matches exactly.

    An unset secret on the server side rejects every request.
    """
    if not expected or (provided or "") != expected:
        logger.warning("Rejected contact request with missing or invalid API key")
        raise UnauthorizedError()


def clean_header_field(value: Any, max_length: int = MAX_HEADER_FIELD_LENGTH) -> str:
    """Collapse CR/LF runs to a space, trim, and clamp a header-bound value."""
    text = _LINE_BREAKS.sub(" ", str(value)).strip()
    return text[:max_length]


def clean_message(value: Any) -> str:
    """Drop NUL bytes and clamp the message body, keeping its newlines."""
    text = str(value).replace("\x00", "").strip()
    return text[:MAX_MESSAGE_LENGTH]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_submission(body: Optional[Dict[str, Any]]) -> ContactSubmission:
    """Validate and sanitize a raw contact form body.

    Args:
        body: Decoded JSON body of the request, or None

    Returns:
        A ContactSubmission whose fields are safe to place in mail headers

    Raises:
        MissingFieldsError: If subject, name, email or message is empty
        InvalidEmailError: If the email does not match the address grammar
    """
    body = body if isinstance(body, dict) else {}

    if any(not body.get(field) for field in REQUIRED_FIELDS):
        raise MissingFieldsError()

    subject = clean_header_field(body["subject"])
    name = clean_header_field(body["name"])
    email = clean_header_field(body["email"], MAX_EMAIL_LENGTH)
    message = clean_message(body["message"])
    company = clean_header_field(body["company"]) if body.get("company") else None

    if not (subject and name and email and message):
        raise MissingFieldsError()

    if not is_valid_email(email):
        raise InvalidEmailError()

    return ContactSubmission(
        company=company or None,
        subject=subject,
        name=name,
        email=email,
        message=message,
    )
