from types import SimpleNamespace

import pytest
from langchain_core.messages import AIMessage

from transformbot.config import Settings
from transformbot.models import SessionState


class FakeChatModel:
    """Stands in for ChatGroq: records every invoke() and answers with fixed content."""

    def __init__(self, content="function removeSku(record) { delete record.sku; return record; }",
                 error=None, response=None):
        self.content = content
        self.error = error
        self.response = response
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        if self.response is not None:
            return self.response
        return AIMessage(content=self.content)


class FakeGenerator:
    """Stands in for CompletionClient."""

    def __init__(self, output="function f(r) { return r; }", error=None):
        self.output = output
        self.error = error
        self.prompts = []

    def generate(self, description):
        self.prompts.append(description)
        if self.error:
            raise self.error
        return self.output


class FakeSearchClient:
    def __init__(self, hits=None, error=None):
        self.hits = hits or []
        self.error = error
        self.calls = []

    def search_single_index(self, index_name, search_params=None):
        """Same call shape as algoliasearch SearchClientSync."""
        self.calls.append((index_name, search_params))
        if self.error:
            raise self.error
        return SimpleNamespace(hits=self.hits)


@pytest.fixture
def fake_llm():
    return FakeChatModel()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def settings():
    return Settings(api_key="gsk_test_key_1234")


@pytest.fixture
def empty_state():
    return SessionState()


@pytest.fixture
def make_llm():
    return FakeChatModel


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def make_search_client():
    return FakeSearchClient
