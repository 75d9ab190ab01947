from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from config.settings import Settings
from interview.client import CompletionOptions
from interview.core.store import InMemorySessionStore, Message
from interview.errors import UpstreamError


class FakeCompleter:
    """Returns queued replies and records every transcript it was sent."""

    def __init__(self, replies: Optional[List[str]] = None) -> None:
        self.replies = list(replies or [])
        self.calls: List[List[Message]] = []
        self.options: List[CompletionOptions] = []
        self.fail_with: Optional[str] = None
        self.crash_with: Optional[Exception] = None

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def complete(self, transcript: Sequence[Message], options: CompletionOptions) -> str:
        self.calls.append(list(transcript))
        self.options.append(options)
        if self.crash_with is not None:
            raise self.crash_with
        if self.fail_with is not None:
            raise UpstreamError(self.fail_with)
        return self.replies.pop(0) if self.replies else "Tell me about yourself."


@pytest.fixture
def settings(monkeypatch) -> Settings:
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("APP_ENV", "test")
    for name in ("OPENAI_MODEL", "OPENAI_BASE_URL", "OPENAI_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return Settings()


@pytest.fixture
def completer() -> FakeCompleter:
    return FakeCompleter()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def client(settings, completer, store):
    app = create_app(settings=settings, completer=completer, store=store)
    with TestClient(app) as test_client:
        yield test_client
