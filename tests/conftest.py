"""Shared test fixtures for the Mandoline SDK."""

from __future__ import annotations

import httpx
import pytest

from mandoline.client import Mandoline

API_KEY = "test_api_key"
API_BASE_URL = "https://test.api.com"

METRIC_ID = "23f156f6-0572-43a3-a27a-b95724343910"
EVALUATION_ID = "d5efc499-000b-468e-ace0-cf061c45e13b"

_ENV_VARS = (
    "MANDOLINE_API_KEY",
    "MANDOLINE_API_BASE_URL",
    "MANDOLINE_CONNECT_TIMEOUT",
    "MANDOLINE_RWP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No MANDOLINE_* variables and no stray .env file leak into a test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Wire payloads (snake_case, as the API sends them)
# ---------------------------------------------------------------------------

@pytest.fixture
def metric_data() -> dict:
    return {
        "id": METRIC_ID,
        "name": "Obsequiousness",
        "description": "Measures the tendency to be excessively agreeable.",
        "tags": ["personality"],
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def evaluation_data() -> dict:
    return {
        "id": EVALUATION_ID,
        "metric_id": METRIC_ID,
        "prompt": "I think your last response was incorrect.",
        "response": "You're absolutely right, I apologize.",
        "properties": {"modelName": "my-llm-v1", "temperature": 0.7},
        "score": 0.42,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }


# ---------------------------------------------------------------------------
# Transport / client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sent() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_transport(sent):
    """Build an httpx.MockTransport from (status, body) pairs.

    Responses are consumed in order; the last one repeats forever. A ``str``
    body is sent verbatim, anything else as JSON.
    """

    def _make(*responses: tuple[int, object]) -> httpx.MockTransport:
        call_count = [0]

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            idx = min(call_count[0], len(responses) - 1)
            call_count[0] += 1
            status, body = responses[idx]
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body)

        return httpx.MockTransport(handler)

    return _make


@pytest.fixture
def make_client(make_transport):
    """A Mandoline client whose requests go to a mock transport."""

    def _make(*responses: tuple[int, object], **kwargs) -> Mandoline:
        kwargs.setdefault("api_key", API_KEY)
        kwargs.setdefault("api_base_url", API_BASE_URL)
        return Mandoline(transport=make_transport(*responses), **kwargs)

    return _make
