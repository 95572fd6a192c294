from unittest.mock import MagicMock, patch

import pytest

BASE_URL = "https://cloud.example.com"


def make_response(status_code=200, text="", json_data=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = json_data
    return response


@pytest.fixture(autouse=True)
def provider_base_url(monkeypatch):
    monkeypatch.setenv("PROVIDER_BASE_URL", BASE_URL)
    return BASE_URL


@pytest.fixture
def mock_request():
    """Patch the transport; every helper goes through requests.request."""
    with patch("dav_fixtures.http_helper.requests.request") as mocked:
        mocked.return_value = make_response(201)
        yield mocked


@pytest.fixture
def response():
    return make_response
