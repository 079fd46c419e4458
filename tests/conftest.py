import copy
from unittest.mock import MagicMock, patch

import httpx
import pytest
import structlog

from sensor import SensorSettings
from sensor_models import Credentials


SERVICECOMMS_PAYLOAD = {
    "value": [
        {"Id": "Exchange", "WorkloadDisplayName": "Exchange Online", "Status": "ServiceOperational"},
        {"Id": "SharePoint", "WorkloadDisplayName": "SharePoint Online", "Status": "ServiceDegradation"},
        {"Id": "Lync", "WorkloadDisplayName": "Skype for Business", "Status": "Investigating"},
    ]
}

GRAPH_PAYLOAD = {
    "value": [
        {"service": "Exchange Online", "status": "serviceOperational", "id": "Exchange"},
        {"service": "Microsoft Teams", "status": "serviceRestored", "id": "microsoftteams"},
    ]
}


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id="client-123", client_secret="s3cret", tenant_id="contoso.onmicrosoft.com")


@pytest.fixture
def settings() -> SensorSettings:
    return SensorSettings(client_id="client-123", client_secret="s3cret",
                          tenant_id="contoso.onmicrosoft.com")


@pytest.fixture
def msal_app():
    """Patch MSAL so token requests never leave the process."""
    with patch("graph_client.ConfidentialClientApplication") as factory:
        app = MagicMock()
        app.acquire_token_for_client.return_value = {
            "token_type": "Bearer",
            "access_token": "eyJ0eXAi.test",
            "expires_in": 3599,
        }
        factory.return_value = app
        yield factory


@pytest.fixture
def json_transport():
    """Build an httpx transport that answers every request with one JSON body."""

    def build(payload, status_code=200, seen=None) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return build


@pytest.fixture
def servicecomms_payload() -> dict:
    return copy.deepcopy(SERVICECOMMS_PAYLOAD)


@pytest.fixture
def graph_payload() -> dict:
    return copy.deepcopy(GRAPH_PAYLOAD)
