"""
MailTransport Module

Selects the SMTP transport for a request and resolves the envelope addresses.
A transport is either the configured SMTP server or a disposable Ethereal
test mailbox provisioned on demand.
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from typing import Literal, Optional, Union

import httpx

from app.core.config import Settings
from app.core.exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 587
TEST_SMTP_HOST = "smtp.ethereal.email"
TEST_SMTP_PORT = 587
TEST_WEB_URL = "https://ethereal.email"

FALLBACK_TO_EMAIL = "info@example.com"
FALLBACK_FROM_EMAIL = "no-reply@example.com"

_RESPONSE_PROPS = re.compile(r"\[([^\]]+)\]\s*$")
_RESPONSE_PROP = re.compile(r"\b([A-Z0-9]+)=(\S+)")


@dataclass(frozen=True)
class ConfiguredTransport:
    host: str
    port: int
    secure: bool
    user: Optional[str]
    password: Optional[str]
    kind: Literal["configured"] = "configured"


@dataclass(frozen=True)
class EphemeralTransport:
    user: str
    password: str
    host: str = TEST_SMTP_HOST
    port: int = TEST_SMTP_PORT
    secure: bool = False
    web_url: str = TEST_WEB_URL
    kind: Literal["ephemeral"] = "ephemeral"


TransportConfig = Union[ConfiguredTransport, EphemeralTransport]


def configured_transport(settings: Settings) -> ConfiguredTransport:
    """Build the transport for an explicitly configured SMTP server.

    ``secure`` is only set when SMTP_PORT is literally the string "465".
    """
    return ConfiguredTransport(
        host=settings.SMTP_HOST,
        port=int(settings.SMTP_PORT or DEFAULT_SMTP_PORT),
        secure=settings.SMTP_PORT == "465",
        user=settings.SMTP_USER,
        password=settings.SMTP_PASS,
    )


async def create_test_account(api_url: str, client: Optional[httpx.AsyncClient] = None) -> EphemeralTransport:
    """Provision a disposable Ethereal mailbox.

    Args:
        api_url: Account provisioning endpoint
        client: Optional HTTP client, mainly for tests

    Returns:
        An EphemeralTransport routed through the fixed test SMTP host

    Raises:
        TransportError: If the account cannot be provisioned
    """
    payload = {"requestor": "contact-relay", "version": "1.0.0"}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=15.0) as http:
                response = await http.post(api_url, json=payload)
        else:
            response = await client.post(api_url, json=payload)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Failed to provision test mail account: {str(e)}")
        raise TransportError("Failed to send", details=str(e)) from e

    if data.get("status") != "success" or not data.get("user") or not data.get("pass"):
        logger.error(f"Test mail account API returned an unexpected payload: {data}")
        raise TransportError("Failed to send", details="Test account could not be created")

    logger.info(f"Provisioned test mail account {data['user']}")
    return EphemeralTransport(
        user=data["user"],
        password=data["pass"],
        web_url=data.get("web") or TEST_WEB_URL,
    )


async def select_transport(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> TransportConfig:
    if settings.SMTP_HOST:
        return configured_transport(settings)
    logger.info("SMTP_HOST not configured, using a disposable test mailbox")
    return await create_test_account(settings.TEST_ACCOUNT_API_URL, client=client)


def resolve_recipient(settings: Settings, transport: TransportConfig) -> str:
    """Configured recipient, then the test mailbox (test mode only), then the fallback."""
    if settings.TO_EMAIL:
        return settings.TO_EMAIL
    if transport.kind == "ephemeral":
        return transport.user
    return FALLBACK_TO_EMAIL


def resolve_sender(settings: Settings, to_email: Optional[str]) -> str:
    return settings.FROM_EMAIL or to_email or FALLBACK_FROM_EMAIL


def get_test_message_url(transport: TransportConfig, smtp_response: Optional[str]) -> Optional[str]:
    """Build the preview link for a message sent through a test mailbox.

    Ethereal answers the DATA command with ``Accepted [STATUS=new MSGID=...]``;
    the message id is turned into a web preview link. Configured transports
    never have a preview link.
    """
    if transport.kind != "ephemeral":
        return None

    props = {}
    match = _RESPONSE_PROPS.search(smtp_response or "")
    if match:
        props = dict(_RESPONSE_PROP.findall(match.group(1)))

    if "STATUS" in props and "MSGID" in props:
        return f"{transport.web_url}/message/{props['MSGID']}"
    return f"{transport.web_url}/messages"
