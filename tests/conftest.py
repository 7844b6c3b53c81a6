import pytest
from fastapi.testclient import TestClient

from chat.completions import Completion
from chat.config import Settings
from chat.session_store import SessionStore
from chat.token_tracker import TokenTracker
from chat.turns import TurnProcessor


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeCompletionClient:
    """Stands in for the OpenAI client; records every call."""

    def __init__(self, reply: Completion | None = None):
        self.reply = reply or Completion(text="hello", model_used="m1", total_tokens=5)
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    def complete(self, transcript, config, purpose="chat"):
        self.calls.append((list(transcript), config, purpose))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def processor(store, completion_client):
    return TurnProcessor(store, completion_client)


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        openai_model="gpt-test",
        rate_limit_per_minute=0,
    )


@pytest.fixture
def app(settings, completion_client, clock):
    from api.main import create_app

    return create_app(
        settings=settings,
        completion_client=completion_client,
        clock=clock,
        token_tracker=TokenTracker(),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
