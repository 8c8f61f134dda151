"""Shared fixtures: an in-memory store and a scripted stand-in for Gemini."""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from agent.agent import ConversationGateway
from agent.core.memory import SessionStore
from agent.core.prompt import SYSTEM_PROMPT
from agent.provider import ProviderConfig
from app.main import create_app


class FakeChatSession:
    def __init__(self, provider: "FakeProvider") -> None:
        self._provider = provider

    async def send_and_stream(self, text: str) -> AsyncIterator[str]:
        self._provider.sent.append(text)
        if self._provider.error is not None:
            raise self._provider.error
        for fragment in self._provider.fragments:
            yield fragment


class FakeProvider:
    def __init__(self) -> None:
        self.fragments: List[str] = []
        self.error: Optional[Exception] = None
        self.create_error: Optional[Exception] = None
        self.sessions: List[Dict[str, Any]] = []
        self.sent: List[str] = []

    def reply_with(self, *fragments: str) -> None:
        self.fragments = list(fragments)
        self.error = None

    def create_chat_session(
        self, config: ProviderConfig, prior_history: Sequence[Dict[str, Any]]
    ) -> FakeChatSession:
        self.sessions.append({"config": config, "history": list(prior_history)})
        if self.create_error is not None:
            raise self.create_error
        return FakeChatSession(self)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(model="gemini-2.0-flash", system_instruction=SYSTEM_PROMPT)


@pytest.fixture
def gateway(store, provider, provider_config) -> ConversationGateway:
    return ConversationGateway(store=store, provider=provider, config=provider_config)


@pytest.fixture
def client(gateway) -> TestClient:
    return TestClient(create_app(gateway=gateway))
