"""HTML sanitization for outgoing mail bodies."""

import logging

import nh3

from app.core.exceptions import TransportError

logger = logging.getLogger(__name__)

# Tags and attributes used by the contact notification template
ALLOWED_TAGS = set(nh3.ALLOWED_TAGS) | {"table", "tr", "th", "td", "h2", "h3", "div", "small", "strong", "hr", "br"}
ALLOWED_ATTRIBUTES = {tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()}
ALLOWED_ATTRIBUTES["*"] = ALLOWED_ATTRIBUTES.get("*", set()) | {"style"}


def sanitize_html(html: str) -> str:
    """Strip executable markup from composed HTML.

    Script and style elements are removed with their content, event handler
    attributes are dropped, and only http/https/mailto links survive.

    Raises:
        TransportError: If the sanitizer rejects the input
    """
    try:
        return nh3.clean(
            html,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            url_schemes={"http", "https", "mailto"},
        )
    except Exception as e:
        logger.error(f"Error sanitizing HTML body: {str(e)}")
        raise TransportError("Failed to sanitize or send email", details=str(e)) from e
