"""Unit tests for the HTTP transport and its retry behavior."""

import json
from unittest.mock import patch

import httpx
import pytest

from hf_inference.services.errors import EmptyTokenError
from hf_inference.services.transport import InferenceTransport
from hf_inference.utils.retry import NetworkError

URL = "https://api-inference.huggingface.co/models/gpt2"


def _transport(hub, **kwargs) -> InferenceTransport:
    kwargs.setdefault("retry_delay", 0)
    return InferenceTransport("fake-api-token", client=hub.client(), **kwargs)


@pytest.mark.unit
class TestInferenceTransport:
    def test_rejects_blank_token(self):
        with pytest.raises(EmptyTokenError):
            InferenceTransport("   ")

    def test_post_sends_json_with_bearer_auth(self, hub):
        hub.add(URL, httpx.Response(200, json=[{"generated_text": "ok"}]))

        response = _transport(hub).post(URL, {"inputs": "Hello"})

        assert response.status_code == 200
        request = hub.requests[0]
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer fake-api-token"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"inputs": "Hello"}

    def test_default_policy(self):
        transport = InferenceTransport("fake-api-token")
        try:
            assert transport.timeout == 30.0
            assert transport.retries == 2
            assert transport.retry_delay == 1.0
        finally:
            transport.close()

    def test_retries_server_errors_then_succeeds(self, hub):
        hub.add(
            URL,
            httpx.Response(503, json={"error": "Model is loading"}),
            httpx.Response(500, json={"error": "oops"}),
            httpx.Response(200, json=[{"generated_text": "ok"}]),
        )

        response = _transport(hub).post(URL, {"inputs": "Hello"})

        assert response.status_code == 200
        assert len(hub.requests) == 3

    def test_returns_last_response_when_retries_exhausted(self, hub):
        hub.add(URL, httpx.Response(429, json={"error": "Rate limit reached"}))

        response = _transport(hub).post(URL, {"inputs": "Hello"})

        assert response.status_code == 429
        assert len(hub.requests) == 3  # first attempt + 2 retries

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_client_errors_are_not_retried(self, hub, status):
        hub.add(URL, httpx.Response(status, json={"error": "nope"}))

        response = _transport(hub).post(URL, {"inputs": "Hello"})

        assert response.status_code == status
        assert len(hub.requests) == 1

    def test_network_errors_are_retried_then_raised(self, hub):
        hub.add(URL, httpx.ConnectError("unreachable"))

        with pytest.raises(NetworkError):
            _transport(hub, retries=1).post(URL, {"inputs": "Hello"})

        assert len(hub.requests) == 2

    def test_network_error_then_success(self, hub):
        hub.add(
            URL,
            httpx.ReadTimeout("slow"),
            httpx.Response(200, json={"generated_text": "ok"}),
        )

        response = _transport(hub).post(URL, {"inputs": "Hello"})

        assert response.status_code == 200

    def test_waits_fixed_delay_between_attempts(self, hub):
        hub.add(URL, httpx.Response(500, json={"error": "down"}))

        with patch("hf_inference.utils.retry.time.sleep") as mock_sleep:
            _transport(hub, retry_delay=1.0).post(URL, {"inputs": "Hello"})

        assert [call.args[0] for call in mock_sleep.call_args_list] == [1.0, 1.0]

    def test_zero_retries_makes_one_attempt(self, hub):
        hub.add(URL, httpx.Response(500, json={"error": "down"}))

        response = _transport(hub, retries=0).post(URL, {"inputs": "Hello"})

        assert response.status_code == 500
        assert len(hub.requests) == 1

    def test_close_leaves_injected_client_open(self, hub):
        client = hub.client()
        with InferenceTransport("fake-api-token", client=client):
            pass

        assert client.is_closed is False
        client.close()

    def test_close_closes_owned_client(self):
        transport = InferenceTransport("fake-api-token")
        transport.close()

        assert transport.client.is_closed is True
