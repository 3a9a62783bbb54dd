"""Contact form models for the contact relay API.

This module contains the Pydantic models for contact form relaying.
"""

from typing import Optional
from typing_extensions import Annotated
from pydantic import BaseModel, Field, ConfigDict


class ContactSubmission(BaseModel):
    """A validated contact form submission.

    Instances are only produced by the request validator, so every field is
    already trimmed, clamped and free of header-breaking characters.

    Attributes:
        company: Optional company name of the sender
        subject: Subject line chosen by the sender
        name: Full name of the sender
        email: Reply address of the sender
        message: Free-form message body
    """
    company: Annotated[Optional[str], Field(None, max_length=200, description="Optional company name")]
    subject: Annotated[str, Field(..., min_length=1, max_length=200, description="Subject of the inquiry")]
    name: Annotated[str, Field(..., min_length=1, max_length=200, description="Full name of the sender")]
    email: Annotated[str, Field(..., min_length=1, max_length=256, description="Reply address of the sender")]
    message: Annotated[str, Field(..., min_length=1, max_length=10000, description="Message body")]

    model_config = ConfigDict(frozen=True)


class MailMessage(BaseModel):
    """A composed email, consumed once by the transport.

    Attributes:
        from_email: Envelope and header sender address
        to_email: Recipient address
        subject: Subject header value
        text: Plain text body
        html: HTML body
    """
    from_email: str
    to_email: str
    subject: str
    text: str
    html: str

    model_config = ConfigDict(frozen=True)


class ContactResponse(BaseModel):
    """Response model for a relayed contact form.

    Attributes:
        ok: Whether the message was dispatched
        preview_url: Link to the test mailbox preview, only in test mode
    """
    ok: bool = Field(..., description="Whether the message was dispatched")
    preview_url: Optional[str] = Field(None, alias="previewUrl", description="Test mailbox preview link")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error body returned by the relay."""
    error: str = Field(..., description="Public error message")
    details: Optional[str] = Field(None, description="Underlying cause, when enabled")
