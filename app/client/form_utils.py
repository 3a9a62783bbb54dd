"""Shared helpers for contact-style forms.

Used by every form that posts to the relay (contact, careers): reading the API
base and key from page metadata, posting with a client-side timeout, field
validation and status-message handling.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from app.core.patterns import EMAIL_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "/api"
DEFAULT_TIMEOUT_SECONDS = 15.0

FIELD_LABELS = {
    "subject": "件名",
    "name": "お名前",
    "email": "メールアドレス",
    "message": "お問い合わせ内容",
}
FIELD_ORDER = ("subject", "name", "email", "message")


def get_api_base(meta: Mapping[str, str]) -> str:
    """Read the API base from the ``api-base`` meta tag, defaulting to /api."""
    return meta.get("api-base") or DEFAULT_API_BASE


def get_api_key(meta: Mapping[str, str], api_key: Optional[str] = None) -> str:
    return api_key or meta.get("api-key") or ""


class ContactFormError(Exception):
    """Raised when the relay answers with a non-2xx status."""

    def __init__(self, message: str, status: int, body: Any):
        super().__init__(message)
        self.status = status
        self.body = body


def _parse_body(text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text) if text else {}
    except ValueError:
        return {"_raw": text}
    return parsed if isinstance(parsed, dict) else {"_raw": text}


async def post_contact(
    payload: Dict[str, Any],
    *,
    api_base: str = DEFAULT_API_BASE,
    api_key: str = "",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    on_start: Optional[Callable[[], None]] = None,
    on_success: Optional[Callable[[Dict[str, Any]], None]] = None,
    on_error: Optional[Callable[[Exception], None]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Post a contact payload to ``<api_base>/contact``.

    The timeout is enforced here; once it fires the request counts as failed
    even if the server finishes the send afterwards.

    Args:
        payload: Form fields to send as JSON
        api_base: Absolute base URL of the relay API
        api_key: Shared secret sent as x-api-key when non-empty
        timeout: Seconds before the request is cancelled
        on_start: Called before the request is made
        on_success: Called with the parsed response body
        on_error: Called with the exception before it is re-raised
        client: Optional HTTP client, mainly for tests

    Returns:
        The parsed JSON body; ``{"_raw": text}`` when it is not JSON

    Raises:
        ContactFormError: If the relay answers with a non-2xx status
        httpx.HTTPError: On network errors
        asyncio.TimeoutError: If the whole exchange exceeds ``timeout``
    """
    if on_start:
        on_start()

    url = api_base.rstrip("/") + "/contact"
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["x-api-key"] = api_key

    async def send() -> httpx.Response:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as http:
                return await http.post(url, json=payload, headers=headers)
        return await client.post(url, json=payload, headers=headers, timeout=timeout)

    try:
        # httpx timeouts apply per phase; wait_for bounds the whole exchange
        response = await asyncio.wait_for(send(), timeout)

        body = _parse_body(response.text)
        if not response.is_success:
            message = body.get("error") or body.get("message") or f"送信に失敗しました ({response.status_code})"
            raise ContactFormError(message, response.status_code, body)
    except Exception as e:
        logger.warning(f"Contact submission failed: {str(e)}")
        if on_error:
            on_error(e)
        raise

    if on_success:
        on_success(body)
    return body


@dataclass
class FieldValidation:
    missing: List[str] = field(default_factory=list)
    email_invalid: bool = False
    combined: str = ""
    first_invalid: str = "subject"

    @property
    def ok(self) -> bool:
        return not self.missing and not self.email_invalid


def validate_contact_fields(values: Mapping[str, Optional[str]]) -> FieldValidation:
    """Check required fields and the email format, with localized messages."""
    cleaned = {name: (values.get(name) or "").strip() for name in FIELD_ORDER}
    missing_fields = [name for name in FIELD_ORDER if not cleaned[name]]
    email_invalid = bool(cleaned["email"]) and not EMAIL_PATTERN.match(cleaned["email"])

    missing = [FIELD_LABELS[name] for name in missing_fields]
    if missing:
        combined = "、".join(missing) + "を入力してください。"
        if email_invalid:
            combined += "また、メールアドレスの形式が正しくありません。"
    elif email_invalid:
        combined = "メールアドレスの形式が正しくありません。"
    else:
        combined = ""

    if missing_fields:
        first_invalid = missing_fields[0]
    elif email_invalid:
        first_invalid = "email"
    else:
        first_invalid = "subject"

    return FieldValidation(missing=missing, email_invalid=email_invalid, combined=combined, first_invalid=first_invalid)


@dataclass
class FormMessage:
    """State of a form's status element."""
    text: str = ""
    color: str = ""
    preview_url: Optional[str] = None


class StatusController:
    """Sets and auto-clears the status text of a form."""

    def __init__(self, form_message: FormMessage):
        self.form_message = form_message
        self._timer: Optional[asyncio.TimerHandle] = None

    def set_status(self, text: str, color: Optional[str] = None) -> None:
        self.form_message.color = color or "inherit"
        self.form_message.text = text

    def set_status_with_timeout(self, text: str, color: Optional[str] = None, timeout: Optional[float] = None) -> None:
        """Show a status and clear its text after ``timeout`` seconds.

        Must be called from within a running event loop when a timeout is given.
        """
        self.clear_status()
        self.set_status(text, color)
        if timeout and timeout > 0:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(timeout, self._expire)

    def clear_status(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.form_message.text = ""
        self.form_message.color = ""
        self.form_message.preview_url = None

    def _expire(self) -> None:
        self._timer = None
        self.form_message.preview_url = None
        self.set_status("")

    def set_preview_link(self, url: Optional[str]) -> None:
        """Attach a link to the sent message preview; it clears with the status."""
        self.form_message.preview_url = url or None
