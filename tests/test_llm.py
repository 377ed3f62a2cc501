import asyncio
import json

import httpx

from portal.llm import (
    AI_DEGRADED_ANSWER,
    AI_FALLBACK_ANSWER,
    CONNECTION_ANSWER,
    INVALID_KEY_ANSWER,
    NOT_CONFIGURED_ANSWER,
    RATE_LIMIT_ANSWER,
    SYSTEM_PROMPT,
    ConversationMemory,
    GeminiClient,
    chat_answer,
    knowledge_answer,
)
from portal.types import Message


def _client(handler, api_key="test-key"):
    return GeminiClient(api_key=api_key, transport=httpx.MockTransport(handler))


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_unconfigured_key_short_circuits():
    def handler(request):
        raise AssertionError("no request expected")

    result = asyncio.run(chat_answer(_client(handler, api_key=""), ConversationMemory(), "hi"))
    assert result == {"answer": NOT_CONFIGURED_ANSWER, "source": "System", "confidence": 100}


def test_successful_call_builds_payload_and_remembers():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_reply("We are open 9 to 6."))

    memory = ConversationMemory()
    history = [Message(role="user", content="hi"), Message(role="assistant", content="hello")]
    result = asyncio.run(chat_answer(_client(handler), memory, "hours?", "conv-1", history))

    assert result == {"answer": "We are open 9 to 6.", "source": "API", "confidence": 90}
    assert seen["url"].endswith("gemini-1.5-pro:generateContent?key=test-key")
    contents = seen["body"]["contents"]
    assert contents[0] == {"role": "user", "parts": [{"text": SYSTEM_PROMPT}]}
    assert [c["role"] for c in contents[1:]] == ["user", "model", "user"]
    assert seen["body"]["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 800}
    assert [m.role for m in memory.get("conv-1").messages] == ["user", "assistant", "user", "assistant"]


def test_memory_is_capped():
    memory = ConversationMemory(limit=20)
    history = [Message(role="user", content=str(i)) for i in range(30)]
    memory.prepare("c", "next", history)
    assert len(memory.get("c").messages) == 20
    assert memory.get("c").messages[-1].content == "next"


def test_missing_candidate_text():
    result = asyncio.run(chat_answer(_client(lambda r: httpx.Response(200, json={})), ConversationMemory(), "hi"))
    assert result["answer"] == "Sorry, I couldn't generate a response from the API."


def test_invalid_key_and_rate_limit():
    invalid = lambda r: httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid. Pass a valid key."}})
    limited = lambda r: httpx.Response(429, json={"error": {"code": 429, "message": "Quota exceeded"}})
    assert asyncio.run(chat_answer(_client(invalid), ConversationMemory(), "hi"))["answer"] == INVALID_KEY_ANSWER
    assert asyncio.run(chat_answer(_client(limited), ConversationMemory(), "hi"))["answer"] == RATE_LIMIT_ANSWER


def test_other_upstream_error():
    failing = lambda r: httpx.Response(500, json={"error": {"code": 500, "message": "Internal"}})
    result = asyncio.run(chat_answer(_client(failing), ConversationMemory(), "hi"))
    assert result["answer"] == "Error from Gemini API: Internal. Please try again or switch to local mode."
    assert result["confidence"] == 100


def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(chat_answer(_client(handler), ConversationMemory(), "hi"))
    assert result == {"answer": CONNECTION_ANSWER, "source": "System", "confidence": 30}


def test_knowledge_answer_prefers_faq(knowledge):
    result = asyncio.run(knowledge_answer(GeminiClient(), knowledge, "business hours"))
    assert result["source"] == {"type": "faq", "id": "faq-2", "title": "What are your business hours?"}


def test_knowledge_answer_without_key(knowledge):
    result = asyncio.run(knowledge_answer(GeminiClient(), knowledge, "quantum teleportation"))
    assert result["answer"] == AI_FALLBACK_ANSWER
    assert result["source"]["id"] == "fallback-response"


def test_knowledge_answer_degrades_on_error(knowledge):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    result = asyncio.run(knowledge_answer(_client(handler), knowledge, "quantum teleportation"))
    assert result["answer"] == AI_DEGRADED_ANSWER
    assert result["source"]["id"] == "degraded-response"


def test_memory_cap_holds_after_answer():
    memory = ConversationMemory(limit=2)
    memory.prepare("c", "first", [Message(role="user", content="earlier")])
    memory.remember_answer("c", "reply")
    messages = memory.get("c").messages
    assert [m.content for m in messages] == ["first", "reply"]
