from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from agent.core.memory import Turn


ProviderContent = Dict[str, Any]


@dataclass(frozen=True)
class ProviderConfig:
    model: str
    system_instruction: str
    generation_config: Dict[str, str] = field(
        default_factory=lambda: {"response_mime_type": "text/plain"}
    )


class ChatSession(Protocol):
    def send_and_stream(self, text: str) -> AsyncIterator[str]:
        ...


class ChatProvider(Protocol):
    def create_chat_session(
        self, config: ProviderConfig, prior_history: Sequence[ProviderContent]
    ) -> ChatSession:
        ...


def to_provider_content(turn: Turn) -> ProviderContent:
    return {"role": turn.role, "parts": [{"text": turn.text}]}


def to_provider_history(turns: Sequence[Turn]) -> List[ProviderContent]:
    return [to_provider_content(t) for t in turns]


def from_provider_content(content: ProviderContent) -> Turn:
    text = "".join(part.get("text", "") for part in content.get("parts") or [])
    return Turn(role=content["role"], text=text)


def to_lc_messages(history: Sequence[ProviderContent]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for item in history:
        turn = from_provider_content(item)
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    return messages


def _chunk_text(chunk: BaseMessage) -> str:
    content = chunk.content
    if isinstance(content, str):
        return content
    pieces = []
    for part in content or []:
        if isinstance(part, str):
            pieces.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            pieces.append(part.get("text", ""))
    return "".join(pieces)


class GeminiChatSession:
    def __init__(
        self,
        llm: ChatGoogleGenerativeAI,
        system_instruction: str,
        prior_history: Sequence[ProviderContent],
    ) -> None:
        self._llm = llm
        self._system_instruction = system_instruction
        self._history = list(prior_history)

    async def send_and_stream(self, text: str) -> AsyncIterator[str]:
        messages: List[BaseMessage] = [SystemMessage(content=self._system_instruction)]
        messages.extend(to_lc_messages(self._history))
        messages.append(HumanMessage(content=text))
        async for chunk in self._llm.astream(messages):
            fragment = _chunk_text(chunk)
            if fragment:
                yield fragment


class GeminiChatProvider:
    """Gemini-backed provider that opens one chat session per turn."""

    def __init__(self, api_key: str, temperature: Optional[float] = None) -> None:
        self._api_key = api_key
        self._temperature = temperature

    def create_chat_session(
        self, config: ProviderConfig, prior_history: Sequence[ProviderContent]
    ) -> GeminiChatSession:
        if prior_history and prior_history[0].get("role") != "user":
            raise ValueError(
                f"First content should be with role 'user', got {prior_history[0].get('role')}"
            )

        kwargs: Dict[str, Any] = {
            "model": config.model,
            "google_api_key": self._api_key,
        }
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature
        mime_type = config.generation_config.get("response_mime_type")
        if mime_type:
            kwargs["response_mime_type"] = mime_type

        llm = ChatGoogleGenerativeAI(**kwargs)
        return GeminiChatSession(llm, config.system_instruction, prior_history)
