import json
import httpx
import pytest
from app.core.exceptions import TransportError
from app.services.mail_transport import (
    FALLBACK_FROM_EMAIL,
    FALLBACK_TO_EMAIL,
    ConfiguredTransport,
    EphemeralTransport,
    configured_transport,
    create_test_account,
    get_test_message_url,
    resolve_recipient,
    resolve_sender,
    select_transport,
)
from app.tests.constants.contact import ContactTestConstants

ACCOUNT_API = "https://api.nodemailer.com/user"


def account_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestConfiguredTransport:
    @pytest.mark.parametrize(
        "port, expected_port, expected_secure",
        [("465", 465, True), ("587", 587, False), (None, 587, False), ("0465", 465, False)],
    )
    def test_secure_only_for_literal_465(self, mock_configured_smtp, port, expected_port, expected_secure):
        mock_configured_smtp.SMTP_PORT = port

        transport = configured_transport(mock_configured_smtp)

        assert transport.kind == "configured"
        assert transport.port == expected_port
        assert transport.secure is expected_secure
        assert transport.host == ContactTestConstants.MOCK_SMTP_HOST.value
        assert transport.user == "smtp-user"
        assert transport.password == "smtp-pass"


@pytest.mark.asyncio
class TestCreateTestAccount:
    async def test_success(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "status": "success",
                    "user": ContactTestConstants.MOCK_TEST_ACCOUNT_USER.value,
                    "pass": ContactTestConstants.MOCK_TEST_ACCOUNT_PASS.value,
                    "smtp": {"host": "smtp.ethereal.email", "port": 587, "secure": False},
                    "web": "https://ethereal.email",
                },
            )

        async with account_client(handler) as client:
            transport = await create_test_account(ACCOUNT_API, client=client)

        assert transport == EphemeralTransport(
            user=ContactTestConstants.MOCK_TEST_ACCOUNT_USER.value,
            password=ContactTestConstants.MOCK_TEST_ACCOUNT_PASS.value,
        )
        assert transport.host == "smtp.ethereal.email"
        assert transport.port == 587
        assert transport.secure is False
        assert json.loads(requests[0].content)["requestor"] == "contact-relay"

    async def test_http_error(self):
        async with account_client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(TransportError) as exc_info:
                await create_test_account(ACCOUNT_API, client=client)

        assert exc_info.value.error == "Failed to send"

    async def test_unexpected_payload(self):
        async with account_client(lambda request: httpx.Response(200, json={"status": "error"})) as client:
            with pytest.raises(TransportError):
                await create_test_account(ACCOUNT_API, client=client)

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        async with account_client(handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await create_test_account(ACCOUNT_API, client=client)

        assert "unreachable" in exc_info.value.details


@pytest.mark.asyncio
class TestSelectTransport:
    async def test_configured_when_host_set(self, mock_configured_smtp, mock_create_test_account):
        transport = await select_transport(mock_configured_smtp)

        assert isinstance(transport, ConfiguredTransport)
        mock_create_test_account.assert_not_called()

    async def test_ephemeral_when_host_unset(self, mock_relay_settings, mock_create_test_account):
        transport = await select_transport(mock_relay_settings)

        assert transport.kind == "ephemeral"
        mock_create_test_account.assert_called_once_with(mock_relay_settings.TEST_ACCOUNT_API_URL, client=None)


class TestAddressResolution:
    ephemeral = EphemeralTransport(user="box@ethereal.email", password="pw")
    configured = ConfiguredTransport(host="smtp.example.com", port=587, secure=False, user=None, password=None)

    def test_configured_recipient_wins(self, mock_relay_settings):
        mock_relay_settings.TO_EMAIL = "owner@example.com"

        assert resolve_recipient(mock_relay_settings, self.ephemeral) == "owner@example.com"

    def test_test_mailbox_recipient_in_test_mode(self, mock_relay_settings):
        assert resolve_recipient(mock_relay_settings, self.ephemeral) == "box@ethereal.email"

    def test_fallback_recipient(self, mock_relay_settings):
        assert resolve_recipient(mock_relay_settings, self.configured) == FALLBACK_TO_EMAIL

    def test_sender_order(self, mock_relay_settings):
        assert resolve_sender(mock_relay_settings, "owner@example.com") == "owner@example.com"
        assert resolve_sender(mock_relay_settings, None) == FALLBACK_FROM_EMAIL

        mock_relay_settings.FROM_EMAIL = "relay@example.com"
        assert resolve_sender(mock_relay_settings, "owner@example.com") == "relay@example.com"


class TestTestMessageUrl:
    ephemeral = EphemeralTransport(user="box@ethereal.email", password="pw")

    def test_parses_message_id(self):
        url = get_test_message_url(self.ephemeral, ContactTestConstants.MOCK_SMTP_REPLY.value)

        assert url == f"https://ethereal.email/message/{ContactTestConstants.MOCK_MSGID.value}"

    @pytest.mark.parametrize("reply", [None, "", "Accepted", "Accepted [MSGID=abc]"])
    def test_falls_back_to_mailbox(self, reply):
        assert get_test_message_url(self.ephemeral, reply) == "https://ethereal.email/messages"

    def test_none_for_configured_transport(self):
        configured = ConfiguredTransport(host="smtp.example.com", port=587, secure=False, user=None, password=None)

        assert get_test_message_url(configured, ContactTestConstants.MOCK_SMTP_REPLY.value) is None
