"""Contact form submission flow.

Validates the fields, disables the submit control while sending, posts to the
relay (or runs a local mock flow when the page carries no API key) and
reports a localized status.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from app.client.form_utils import (
    ContactFormError,
    DEFAULT_TIMEOUT_SECONDS,
    FormMessage,
    StatusController,
    get_api_base,
    get_api_key,
    post_contact,
    validate_contact_fields,
)

logger = logging.getLogger(__name__)

SENDING_TEXT = "送信中..."
MOCK_SENDING_TEXT = "送信中（モック）..."
SUCCESS_TEXT = "送信に成功しました。ありがとうございました。"
FAILURE_TEXT = "送信に失敗しました。"
TIMEOUT_REASON = "タイムアウトしました"

SUCCESS_COLOR = "green"
ERROR_COLOR = "#b91c1c"
STATUS_CLEAR_SECONDS = 1.8
MOCK_DELAY_SECONDS = 1.2


def failure_text(error: Exception) -> str:
    """Localized failure status naming the reason when one is known."""
    if isinstance(error, asyncio.TimeoutError):
        reason = TIMEOUT_REASON
    else:
        reason = str(error)
    return f"送信に失敗しました: {reason}" if reason else FAILURE_TEXT


@dataclass
class SubmitControl:
    label: str = "送信"
    disabled: bool = False
    busy: bool = False


@dataclass
class SubmitOutcome:
    ok: bool
    mocked: bool = False
    preview_url: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)


class ContactFormController:
    """Drives one contact form on a page.

    Args:
        meta: Page metadata (``api-base``, ``api-key``)
        timeout: Client-side request timeout in seconds
        mock_delay: Delay of the mock flow used without an API key
        client: Optional HTTP client passed to post_contact
    """

    def __init__(
        self,
        meta: Mapping[str, str],
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        mock_delay: float = MOCK_DELAY_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.meta = meta
        self.timeout = timeout
        self.mock_delay = mock_delay
        self.client = client
        self.submit_control = SubmitControl()
        self.form_message = FormMessage()
        self.status = StatusController(self.form_message)
        self.values: Dict[str, str] = {}

    def reset(self) -> None:
        self.values = {}

    async def submit(self, values: Mapping[str, Any]) -> SubmitOutcome:
        self.values = {k: ("" if v is None else str(v)) for k, v in values.items()}
        payload = {k: v.strip() for k, v in self.values.items()}

        validation = validate_contact_fields(payload)
        if not validation.ok:
            self.status.set_status(validation.combined, ERROR_COLOR)
            return SubmitOutcome(ok=False, errors={validation.first_invalid: validation.combined})

        self.submit_control.disabled = True
        self.submit_control.busy = True
        api_key = get_api_key(self.meta)
        self.status.set_status(SENDING_TEXT if api_key else MOCK_SENDING_TEXT, "black")

        try:
            if not api_key:
                await asyncio.sleep(self.mock_delay)
                self.status.set_status_with_timeout(SUCCESS_TEXT, SUCCESS_COLOR, STATUS_CLEAR_SECONDS)
                self.reset()
                return SubmitOutcome(ok=True, mocked=True)

            try:
                body = await post_contact(
                    payload,
                    api_base=get_api_base(self.meta),
                    api_key=api_key,
                    timeout=self.timeout,
                    client=self.client,
                )
            except (ContactFormError, httpx.HTTPError, asyncio.TimeoutError) as e:
                logger.error(f"Contact form submission failed: {e!r}")
                self.status.set_status_with_timeout(failure_text(e), ERROR_COLOR, STATUS_CLEAR_SECONDS)
                return SubmitOutcome(ok=False)

            preview_url = body.get("previewUrl")
            self.status.set_status_with_timeout(SUCCESS_TEXT, SUCCESS_COLOR, STATUS_CLEAR_SECONDS)
            self.status.set_preview_link(preview_url)
            self.reset()
            return SubmitOutcome(ok=True, preview_url=preview_url)
        finally:
            self.submit_control.disabled = False
            self.submit_control.busy = False
