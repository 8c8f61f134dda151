from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from agent.core.memory import SessionStore, Turn
from agent.core.prompt import BOOTSTRAP_MESSAGE, SYSTEM_PROMPT
from agent.errors import ValidationError, classify_provider_error
from agent.provider import (
    ChatProvider,
    GeminiChatProvider,
    ProviderConfig,
    to_provider_content,
    to_provider_history,
)
from config.settings import Settings


logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    reply: str
    transcript: List[Turn]


class ConversationGateway:
    """Runs one chat turn: read the transcript, ask the provider, record both turns.

    The first turn of a session ignores the caller's text and sends the fixed
    bootstrap utterance instead, so the provider always sees a user turn first.
    Transcripts change only after the whole reply has been drained; a failed
    provider call leaves the session exactly as it was.
    """

    def __init__(
        self,
        store: SessionStore,
        provider: ChatProvider,
        config: ProviderConfig,
        timeout: Optional[float] = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.config = config
        self.timeout = timeout
        self._session_locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._session_locks.get(session_id)
        if lock is None:
            lock = self._session_locks[session_id] = asyncio.Lock()
        return lock

    async def handle_turn(
        self, session_id: Optional[str], user_response: Optional[str]
    ) -> TurnResult:
        if session_id is None or user_response is None:
            raise ValidationError("missing sessionId or userResponse")
        if not isinstance(session_id, str) or not isinstance(user_response, str):
            raise ValidationError("sessionId and userResponse must be strings")

        async with self._lock_for(session_id):
            return await self._run_turn(session_id, user_response)

    async def _run_turn(self, session_id: str, user_response: str) -> TurnResult:
        transcript = self.store.get(session_id)
        if transcript:
            user_turn = Turn(role="user", text=user_response)
        else:
            user_turn = Turn(role="user", text=BOOTSTRAP_MESSAGE)

        request_history = to_provider_history(transcript)
        request_history.append(to_provider_content(user_turn))

        try:
            if self.timeout:
                reply = await asyncio.wait_for(
                    self._ask_provider(request_history), timeout=self.timeout
                )
            else:
                reply = await self._ask_provider(request_history)
        except Exception as exc:
            logger.exception("Error calling Gemini API: %s", exc)
            raise classify_provider_error(exc) from exc

        model_turn = Turn(role="model", text=reply)
        self.store.append(session_id, [user_turn, model_turn])
        logger.info(
            "Turn handled: session=%s prior_turns=%s reply_chars=%s",
            session_id,
            len(transcript),
            len(reply),
        )
        return TurnResult(reply=reply, transcript=self.store.get(session_id))

    async def _ask_provider(self, request_history: List[dict]) -> str:
        # Prior turns seed the session; the newest user turn is the live message.
        prior_history, latest = request_history[:-1], request_history[-1]
        session = self.provider.create_chat_session(self.config, prior_history)
        fragments = []
        async for fragment in session.send_and_stream(latest["parts"][0]["text"]):
            fragments.append(fragment)
        return "".join(fragments)


def build_gateway(settings: Settings, store: Optional[SessionStore] = None) -> ConversationGateway:
    api_key = settings.require_api_key()
    provider = GeminiChatProvider(api_key=api_key, temperature=settings.temperature)
    config = ProviderConfig(model=settings.gemini_model, system_instruction=SYSTEM_PROMPT)
    return ConversationGateway(
        store=store if store is not None else SessionStore(),
        provider=provider,
        config=config,
        timeout=settings.provider_timeout_seconds,
    )
