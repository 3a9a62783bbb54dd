import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.tests.fixtures.contact import *
from app.tests.constants.contact import ContactTestConstants


@pytest.fixture(scope="function")
def api_key_headers():
    """Fixture providing headers carrying the configured shared secret."""
    return {"x-api-key": ContactTestConstants.MOCK_API_KEY.value}


@pytest.fixture(scope="function")
def client(mock_relay_settings):
    """Fixture providing a TestClient against the relay app."""
    with TestClient(app) as c:
        yield c
