import pytest
import requests

from transformbot.services.completion_client import CompletionClient, CompletionClientError


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_generate_posts_prompt_and_returns_output_text():
    session = FakeSession(FakeResponse({"output_text": "function f(r){ return r; }"}))
    client = CompletionClient("http://localhost:3002/", session=session)

    assert client.generate("discount attribute") == "function f(r){ return r; }"
    url, kwargs = session.requests[0]
    assert url == "http://localhost:3002/complete"
    assert kwargs["json"] == {"prompt": "discount attribute"}


def test_error_status_raises_with_status_code():
    client = CompletionClient("http://localhost:3002",
                              session=FakeSession(FakeResponse({"error": "Failed to get completion"}, 500)))

    with pytest.raises(CompletionClientError, match="Response status: 500"):
        client.generate("discount attribute")


def test_transport_error_raises():
    client = CompletionClient("http://localhost:3002",
                              session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(CompletionClientError, match="refused"):
        client.generate("discount attribute")


def test_non_json_body_raises():
    client = CompletionClient("http://localhost:3002",
                              session=FakeSession(FakeResponse(ValueError("no json"))))

    with pytest.raises(CompletionClientError):
        client.generate("discount attribute")


def test_missing_output_text_returns_none():
    client = CompletionClient("http://localhost:3002", session=FakeSession(FakeResponse({})))

    assert client.generate("discount attribute") is None
