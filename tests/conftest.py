import os
from types import SimpleNamespace

import httpx
import openai
import pytest
from dotenv import load_dotenv
from openai.types.chat import ChatCompletion

# Load environment variables from .env file for tests
load_dotenv()

XAI_URL = "https://api.x.ai/v1/chat/completions"


class FakeCompletions:
    """Stands in for AsyncOpenAI().chat.completions; replays scripted outcomes."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome()
        return outcome


class FakeAsyncOpenAI:
    def __init__(self, outcomes):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


@pytest.fixture(scope="session")
def api_key():
    """Fixture to provide the xAI API key for integration tests."""
    key = os.getenv("XAI_API_KEY")
    if not key:
        pytest.skip("XAI_API_KEY environment variable not set")
    return key


@pytest.fixture
def make_completion():
    def _make(content: str, citations: list[str] | None = None) -> ChatCompletion:
        return ChatCompletion.model_validate(
            {
                "id": "cmpl-test",
                "object": "chat.completion",
                "created": 1700000000,
                "model": "grok-3-latest",
                "choices": [
                    {
                        "index": 0,
                        "finish_reason": "stop",
                        "message": {"role": "assistant", "content": content},
                    }
                ],
                "citations": citations or [],
            }
        )

    return _make


@pytest.fixture
def status_error():
    def _make(status: int, body: str = "upstream failure") -> openai.APIStatusError:
        request = httpx.Request("POST", XAI_URL)
        response = httpx.Response(status, request=request, text=body)
        return openai.APIStatusError(f"Error code: {status}", response=response, body=body)

    return _make


@pytest.fixture
def connection_error():
    def _make() -> openai.APIConnectionError:
        return openai.APIConnectionError(request=httpx.Request("POST", XAI_URL))

    return _make


@pytest.fixture
def fake_openai():
    return FakeAsyncOpenAI


@pytest.fixture
def sleeps():
    """Records backoff waits instead of sleeping."""
    recorded: list[float] = []

    async def _sleep(seconds: float):
        recorded.append(seconds)

    _sleep.recorded = recorded
    return _sleep
