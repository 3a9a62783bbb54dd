"""
MailComposer Module

Builds the subject, plain text and HTML bodies of a relayed contact message.
The HTML body is rendered with Jinja2 so every interpolated field is escaped.
"""

import os
import logging
from datetime import datetime, timezone
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings
from app.models.contact import ContactSubmission, MailMessage

logger = logging.getLogger(__name__)

CONTACT_TEMPLATE = "contact_notification.html"

# Auto-escaping covers &, <, >, " and ' in every interpolated field
template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml']),
)


def format_timestamp(now: datetime) -> str:
    """Format a time as ISO-8601 truncated to seconds, with a space separator.

    Args:
        now: The time to format; naive values are taken as UTC

    Returns:
        A string like ``2026-10-17 09:30:12``
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.replace(microsecond=0, tzinfo=None).isoformat(sep=" ")


def build_subject_line(submission: ContactSubmission, now: datetime) -> str:
    company = f" ({submission.company})" if submission.company else ""
    return f"{settings.SUBJECT_PREFIX} {submission.subject}{company} — {format_timestamp(now)}"


def build_text_body(submission: ContactSubmission, now: datetime) -> str:
    lines = [
        f"日付: {format_timestamp(now)}",
        f"件名: {submission.subject}",
        f"送信者: {submission.name} <{submission.email}>",
    ]
    if submission.company:
        lines.append(f"会社: {submission.company}")
    lines.append("")
    lines.append(submission.message)
    return "\n".join(lines)


def build_html_body(submission: ContactSubmission, now: datetime, remote_addr: Optional[str] = None) -> str:
    """Render the HTML notification for a submission.

    Args:
        submission: The validated submission
        now: Time the submission was received
        remote_addr: Address of the submitting client, if known

    Returns:
        The rendered HTML, not yet sanitized
    """
    template = jinja_env.get_template(CONTACT_TEMPLATE)
    return template.render(
        sent_at=now.isoformat(),
        subject=submission.subject,
        name=submission.name,
        email=submission.email,
        company=submission.company,
        message=submission.message,
        remote_addr=remote_addr or "unknown",
    )


def compose_message(
    submission: ContactSubmission,
    *,
    to_email: str,
    from_email: str,
    now: Optional[datetime] = None,
    remote_addr: Optional[str] = None,
) -> MailMessage:
    """Compose the MailMessage for a validated submission."""
    now = now or datetime.now(timezone.utc)
    message = MailMessage(
        from_email=from_email,
        to_email=to_email,
        subject=build_subject_line(submission, now),
        text=build_text_body(submission, now),
        html=build_html_body(submission, now, remote_addr),
    )
    logger.debug(f"Composed contact message for {to_email}")
    return message
