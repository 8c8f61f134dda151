from __future__ import annotations

"""Server-side conversation memory.

Transcripts live in process memory only, keyed by the caller-supplied
session id. Nothing survives a restart.
"""

import threading
from typing import Dict, Iterable, List, Literal

from pydantic import BaseModel, Field


Role = Literal["user", "model"]


class Turn(BaseModel):
    role: Role = Field(..., description="'user' or 'model'")
    text: str


class SessionStore:
    """In-memory transcripts, one per session id.

    ``get`` hands out copies, so callers can never mutate a stored
    transcript except through ``append``.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, List[Turn]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> List[Turn]:
        with self._lock:
            return [turn.model_copy() for turn in self._sessions.get(session_id, [])]

    def append(self, session_id: str, turns: Iterable[Turn]) -> None:
        new_turns = [turn.model_copy() for turn in turns]
        with self._lock:
            self._sessions.setdefault(session_id, []).extend(new_turns)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
