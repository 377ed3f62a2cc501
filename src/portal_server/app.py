from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portal.config import merge_config, resolve_config
from portal.errors import ValidationError
from portal.intents import classify_intent, escalation_example
from portal.llm import GeminiClient, chat_answer, knowledge_answer
from portal.loader import load_knowledge
from portal.logging_utils import build_logger
from portal.pipeline import QueryPipeline
from portal.store import PortalStore
from portal.topics import to_messages

logger = logging.getLogger("portal.server")

DEFAULT_EXAMPLE_MESSAGE = "I need to speak to a manager about my billing issue urgently"


class AskRequest(BaseModel):
    question: Optional[Any] = None
    history: Optional[List[Any]] = None
    userId: Optional[str] = None
    sessionData: Optional[Dict[str, Any]] = None


class ClassifyRequest(BaseModel):
    user_message: Optional[Any] = None


class AnalyticsRecordRequest(BaseModel):
    query: Optional[str] = None
    responseSource: Optional[str] = None
    confidence: Optional[float] = None
    intent: Optional[str] = None
    successful: Optional[bool] = None


class ChatRequest(BaseModel):
    message: Optional[str] = None
    chatId: Optional[str] = None
    userId: Optional[str] = "anonymous"


class GeminiRequest(BaseModel):
    question: Optional[str] = None
    conversationId: Optional[str] = None
    history: Optional[List[Any]] = None


class AiRequest(BaseModel):
    query: Optional[str] = None


def _system_reply(answer: str, status_code: int) -> JSONResponse:
    return JSONResponse({"answer": answer, "source": "System", "confidence": 100}, status_code=status_code)


def create_app(
    config_path: Optional[str] = None,
    knowledge_dir: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    store: Optional[PortalStore] = None,
    rng: Optional[random.Random] = None,
    llm_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    cfg = resolve_config(config_path)
    if overrides:
        cfg = merge_config(cfg, overrides)
    build_logger(cfg["logging"].get("level", "INFO"), cfg["logging"].get("dir"))

    knowledge = load_knowledge(knowledge_dir or cfg["knowledge"].get("dir"))
    store = store or PortalStore(cfg, rng=rng)
    pipeline = QueryPipeline(cfg, knowledge, store, rng=rng)
    gemini = GeminiClient.from_config(cfg, transport=llm_transport)
    logger.info("Loaded %d knowledge entries", len(knowledge))

    app = FastAPI(title="support-portal")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = cfg
    app.state.knowledge = knowledge
    app.state.store = store
    app.state.pipeline = pipeline

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected malformed body for %s: %s", request.url.path, exc.errors())
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.post("/ask")
    async def ask(body: AskRequest) -> JSONResponse:
        try:
            result = pipeline.respond(body.question, body.history, body.userId, body.sessionData)
        except ValidationError as exc:
            return _system_reply(str(exc), 400)
        except Exception:
            logger.exception("Error processing question")
            return _system_reply("Sorry, I encountered an error processing your request.", 500)
        return JSONResponse(result.as_payload())

    @app.post("/classify")
    async def classify(body: ClassifyRequest) -> JSONResponse:
        message = body.user_message
        if not isinstance(message, str) or not message:
            return JSONResponse({"error": "Please provide a valid user_message parameter"}, status_code=400)
        return JSONResponse(classify_intent(message).as_payload())

    @app.get("/analytics")
    async def analytics(request: Request, timeFrame: str = "24h") -> JSONResponse:
        expected = f"Bearer {cfg['analytics'].get('api_key', 'admin-key')}"
        if request.headers.get("Authorization") != expected:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)
        try:
            return JSONResponse(store.queries.summarize(timeFrame))
        except Exception:
            logger.exception("Error generating analytics")
            return JSONResponse({"error": "Failed to generate analytics"}, status_code=500)

    @app.post("/analytics")
    async def record_analytics(body: AnalyticsRecordRequest) -> JSONResponse:
        if not body.query or not body.responseSource or body.confidence is None or not body.intent:
            return JSONResponse({"error": "Missing required fields"}, status_code=400)
        store.queries.add(
            body.query,
            body.responseSource,
            body.confidence,
            body.intent,
            successful=bool(body.successful),
        )
        return JSONResponse({"success": True})

    @app.post("/chat")
    async def post_chat(body: ChatRequest) -> JSONResponse:
        try:
            payload = store.chats.post(body.message or "", body.chatId, body.userId or "anonymous")
        except ValidationError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)
        return JSONResponse(payload)

    @app.get("/chat")
    async def get_chat(chatId: Optional[str] = None) -> JSONResponse:
        if not chatId:
            return JSONResponse({"error": "Chat ID is required"}, status_code=400)
        messages = [m.as_payload() for m in store.chats.get(chatId)]
        return JSONResponse({"success": True, "chatId": chatId, "messages": messages})

    @app.post("/gemini")
    async def gemini_chat(body: GeminiRequest) -> JSONResponse:
        if not body.question or not body.question.strip():
            return _system_reply("I didn't receive a question. Please ask me something specific.", 400)
        try:
            payload = await chat_answer(
                gemini,
                store.conversations,
                body.question,
                body.conversationId,
                to_messages(body.history),
            )
        except Exception:
            logger.exception("Error in /gemini")
            return _system_reply("Sorry, an error occurred while processing your request. Please try again later.", 500)
        return JSONResponse(payload)

    @app.post("/ai")
    async def ai(body: AiRequest) -> JSONResponse:
        if not body.query or not body.query.strip():
            return JSONResponse(
                {
                    "answer": "I didn't receive a question. Please ask me something specific.",
                    "source": {"type": "error", "id": "empty-query", "title": "Empty Query"},
                },
                status_code=400,
            )
        try:
            return JSONResponse(await knowledge_answer(gemini, knowledge, body.query))
        except Exception:
            logger.exception("Error in /ai")
            return JSONResponse(
                {
                    "answer": (
                        "I apologize, but I encountered an error while processing your request. "
                        "Please try again or contact support."
                    ),
                    "source": {"type": "error", "id": "error-1", "title": "Error Response"},
                },
                status_code=500,
            )

    @app.get("/examples")
    async def examples(scenario: str = "default", message: Optional[str] = None) -> JSONResponse:
        if scenario == "classification":
            return JSONResponse(classify_intent(message or DEFAULT_EXAMPLE_MESSAGE).as_payload())
        return JSONResponse(escalation_example(scenario).as_payload())

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "ok", "items": len(knowledge)}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=9000)
