import httpx
import pytest
from fastapi.testclient import TestClient

from weather_proxy.config import Settings
from weather_proxy.server import create_app

TEST_API_URL = "https://cwa.test/api/v1/rest/datastore/F-C0032-001"

SAMPLE_FORECAST = {
    "result": {"resource_id": "F-C0032-001", "fields": [{"id": "datasetDescription", "type": "String"}]},
    "records": {
        "datasetDescription": "三十六小時天氣預報",
        "location": [
            {
                "locationName": "臺中市",
                "weatherElement": [
                    {
                        "elementName": "Wx",
                        "time": [
                            {
                                "startTime": "2024-05-01 06:00:00",
                                "endTime": "2024-05-01 18:00:00",
                                "parameter": {"parameterName": "晴時多雲", "parameterValue": "2"},
                            }
                        ],
                    }
                ],
            }
        ],
    },
}


class FakeCWA:
    """Stands in for the CWA API behind an httpx.MockTransport and counts calls."""

    def __init__(self):
        self.requests = []
        self.responder = lambda request: httpx.Response(200, json=SAMPLE_FORECAST)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_params(self):
        return self.requests[-1].url.params


@pytest.fixture
def fake_cwa():
    return FakeCWA()


@pytest.fixture
def settings():
    return Settings(api_key="test-key", api_url=TEST_API_URL)


@pytest.fixture
def make_client(fake_cwa):
    """Factory: make_client(settings) -> TestClient wired to the fake upstream."""
    clients = []

    def _make(app_settings):
        app = create_app(app_settings, transport=httpx.MockTransport(fake_cwa))
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)


@pytest.fixture
def unconfigured_client(make_client):
    return make_client(Settings(api_key=None, api_url=TEST_API_URL))
