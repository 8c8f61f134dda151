from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from agent.agent import ConversationGateway, build_gateway
from agent.core.memory import Turn
from agent.errors import ChatError, ValidationError
from config.settings import get_settings


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("tina")


class ChatRequest(BaseModel):
    session_id: Optional[str] = Field(
        default=None, alias="sessionId", description="Caller-supplied session identifier"
    )
    user_response: Optional[str] = Field(
        default=None,
        alias="userResponse",
        description="User's latest message; empty string starts the conversation",
    )


class ChatResponse(BaseModel):
    response: str
    history: List[Turn]


def get_gateway(request: Request) -> ConversationGateway:
    return request.app.state.gateway


async def chat(
    req: ChatRequest, gateway: ConversationGateway = Depends(get_gateway)
) -> ChatResponse:
    logger.info(
        "Incoming chat: session=%s text_len=%s",
        req.session_id,
        len(req.user_response or ""),
    )
    result = await gateway.handle_turn(req.session_id, req.user_response)
    return ChatResponse(response=result.reply, history=result.transcript)


def health() -> Dict[str, str]:
    return {"status": "ok"}


async def _chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        logger.warning("Rejected chat request: %s", exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Wrong field types are reported the same way as missing fields.
    logger.warning("Malformed chat request: %s", exc.errors())
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"error": ValidationError.public_message},
    )


def create_app(gateway: Optional[ConversationGateway] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "gateway", None) is None:
            app.state.gateway = build_gateway(get_settings())
            logger.info("Config: model=%s", app.state.gateway.config.model)
        yield

    app = FastAPI(title="Tina Insurance Chat", version="1.0.0", lifespan=lifespan)
    app.state.gateway = gateway

    # CORS: allow local frontend during development
    if get_settings().is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ChatError, _chat_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.add_api_route("/chat", chat, methods=["POST"], response_model=ChatResponse)
    app.add_api_route("/health", health, methods=["GET"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
