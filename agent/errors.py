from __future__ import annotations

import asyncio


HISTORY_ROLE_MARKER = "First content should be with role"


class ChatError(Exception):
    """Base for failures surfaced to the chat caller.

    ``public_message`` is the only text the caller ever sees.
    """

    status_code: int = 500
    public_message: str = "Failed to get a response from Tina. Please try again."

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail


class ValidationError(ChatError):
    status_code = 400
    public_message = "Missing sessionId or userResponse in request body."


class ProviderError(ChatError):
    status_code = 500
    public_message = "Failed to get a response from Tina. Please try again."


class HistorySyncError(ChatError):
    status_code = 500
    public_message = (
        "There was an internal chat history synchronization issue. "
        "Please refresh the page and try again."
    )


def classify_provider_error(exc: BaseException) -> ChatError:
    # Gemini reports role-order violations only as message text.
    if isinstance(exc, asyncio.TimeoutError):
        return ProviderError("provider call timed out")
    message = str(exc)
    if HISTORY_ROLE_MARKER in message and "user" in message:
        return HistorySyncError(message)
    return ProviderError(message)
