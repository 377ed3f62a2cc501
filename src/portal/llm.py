"""portal.llm

Pass-through to the Gemini generateContent endpoint, plus per-conversation
memory for the chat variant. Upstream failures never surface as HTTP errors;
they are mapped to fixed answers the UI can show as-is.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .errors import UpstreamError
from .types import KnowledgeBase, Message

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI customer support assistant. Answer questions about company products, services, "
    "policies, and account management. Be helpful, concise, and friendly. Reference only factual information."
)

KNOWLEDGE_PROMPT = """You are a helpful customer support AI assistant for our company. Your goal is to provide concise, accurate, and friendly responses to customer inquiries.

Here is some information about our company that might be useful:
- Business hours: Monday through Friday, 9 AM to 6 PM EST
- Payment methods: All major credit/debit cards, PayPal, and bank transfers
- Payment portal: example.com/payments
- Password reset: Via 'Forgot Password' link on login page
- Account updates: Through 'Account Settings' section

Always be polite, direct, and avoid speculation if you don't know an answer. If the question is about a topic not covered in our knowledge base, kindly direct the user to contact customer support for more specific information."""

PLACEHOLDER_KEYS = {"", "dummy-key-for-dev", "your-gemini-api-key-here"}

NOT_CONFIGURED_ANSWER = (
    "The Gemini API is not configured. Please add your API key to the .env.local file. "
    "You can get a key from https://ai.google.dev/"
)
INVALID_KEY_ANSWER = (
    "The Gemini API key is not valid. Please update your API key in the .env.local file. "
    "You can get a valid key from https://ai.google.dev/"
)
RATE_LIMIT_ANSWER = "The Gemini API rate limit has been exceeded. Please try again later or switch to local mode."
CONNECTION_ANSWER = (
    "I'm having trouble connecting to the external API. Please check your API configuration "
    "or switch to the local knowledge base."
)
EMPTY_CANDIDATE_ANSWER = "Sorry, I couldn't generate a response from the API."

AI_FALLBACK_ANSWER = (
    "I'm sorry, I don't have enough information to answer that question. "
    "Please try asking about passwords, payments, business hours, or account updates."
)
AI_DEGRADED_ANSWER = (
    "I'm having trouble connecting to my AI service. Let me try to answer based on what I know: "
    "Please check our FAQ section for common questions about passwords, payments, and account management."
)
AI_EMPTY_ANSWER = "I couldn't generate a response. Please try again."


@dataclass
class Conversation:
    last_interaction: float
    messages: List[Message] = field(default_factory=list)


class ConversationMemory:
    def __init__(self, limit: int = 20) -> None:
        self.limit = limit
        self._conversations: Dict[str, Conversation] = {}

    def prepare(self, conversation_id: Optional[str], question: str, history: Sequence[Message]) -> List[Message]:
        """Return the turns to send upstream and remember them under the id."""
        if not conversation_id:
            return [Message(role="user", content=question)]

        conversation = self._conversations.setdefault(conversation_id, Conversation(last_interaction=time.time()))
        conversation.last_interaction = time.time()
        turns = list(history) if history else list(conversation.messages)
        turns.append(Message(role="user", content=question))
        conversation.messages = turns[-self.limit:]
        return turns

    def remember_answer(self, conversation_id: Optional[str], answer: str) -> None:
        conversation = self._conversations.get(conversation_id) if conversation_id else None
        if conversation is not None:
            conversation.messages.append(Message(role="assistant", content=answer))
            conversation.messages = conversation.messages[-self.limit:]

    def get(self, conversation_id: str) -> Optional[Conversation]:
        return self._conversations.get(conversation_id)

    def clear(self) -> None:
        self._conversations.clear()

    def __len__(self) -> int:
        return len(self._conversations)


class GeminiClient:
    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-1.5-pro",
        endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models",
        temperature: float = 0.7,
        max_output_tokens: int = 800,
        timeout_seconds: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_config(cls, config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None) -> "GeminiClient":
        llm_cfg = config.get("llm", {})
        return cls(
            api_key=llm_cfg.get("api_key", ""),
            model=llm_cfg.get("model", "gemini-1.5-pro"),
            endpoint=llm_cfg.get("endpoint", "https://generativelanguage.googleapis.com/v1beta/models"),
            temperature=llm_cfg.get("temperature", 0.7),
            max_output_tokens=llm_cfg.get("max_output_tokens", 800),
            timeout_seconds=llm_cfg.get("timeout_seconds", 30),
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return self.api_key not in PLACEHOLDER_KEYS

    @property
    def url(self) -> str:
        return f"{self.endpoint}/{self.model}:generateContent"

    def build_payload(self, turns: Sequence[Message], system_prompt: Optional[str] = SYSTEM_PROMPT) -> Dict[str, Any]:
        contents = []
        if system_prompt:
            contents.append({"role": "user", "parts": [{"text": system_prompt}]})
        for msg in turns:
            role = "model" if msg.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": msg.content}]})
        return {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def generate(self, turns: Sequence[Message], system_prompt: Optional[str] = SYSTEM_PROMPT) -> Optional[str]:
        """Return the first candidate's text, or None when the response has none.

        Raises UpstreamError for non-2xx responses (with the upstream status)
        and for transport failures (status 0).
        """
        payload = self.build_payload(turns, system_prompt)
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
                response = await client.post(self.url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(str(exc)) from exc

        if response.is_error:
            try:
                error = (response.json() or {}).get("error") or {}
            except ValueError:
                error = {}
            raise UpstreamError(error.get("message") or "", status_code=error.get("code") or response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Malformed response body", status_code=response.status_code) from exc
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or None
        except (KeyError, IndexError, TypeError):
            return None


def _system_answer(answer: str, confidence: int = 100) -> Dict[str, Any]:
    return {"answer": answer, "source": "System", "confidence": confidence}


def upstream_error_answer(error: UpstreamError) -> Dict[str, Any]:
    if error.status_code == 0:
        return _system_answer(CONNECTION_ANSWER, confidence=30)
    message = str(error)
    if error.status_code == 400 and "API key not valid" in message:
        return _system_answer(INVALID_KEY_ANSWER)
    if error.status_code == 429:
        return _system_answer(RATE_LIMIT_ANSWER)
    return _system_answer(f"Error from Gemini API: {message or 'Unknown error'}. Please try again or switch to local mode.")


async def chat_answer(
    client: GeminiClient,
    memory: ConversationMemory,
    question: str,
    conversation_id: Optional[str] = None,
    history: Sequence[Message] = (),
) -> Dict[str, Any]:
    if not client.configured:
        logger.error("Gemini API key is not configured")
        return _system_answer(NOT_CONFIGURED_ANSWER)

    turns = memory.prepare(conversation_id, question, history)
    try:
        text = await client.generate(turns)
    except UpstreamError as exc:
        logger.warning("Gemini call failed (status %s): %s", exc.status_code, exc)
        return upstream_error_answer(exc)

    answer = text or EMPTY_CANDIDATE_ANSWER
    memory.remember_answer(conversation_id, answer)
    return {"answer": answer, "source": "API", "confidence": 90}


def _ai_source(source_id: str, title: str, source_type: str = "ai") -> Dict[str, str]:
    return {"type": source_type, "id": source_id, "title": title}


async def knowledge_answer(client: GeminiClient, knowledge: KnowledgeBase, query: str) -> Dict[str, Any]:
    """FAQ substring lookup first, then a knowledge-primed prompt."""
    needle = query.lower()
    for faq in knowledge.faqs:
        if needle in faq.title.lower() or needle in faq.body.lower():
            logger.info("FAQ match found: %s", faq.id)
            return {"answer": faq.body, "source": _ai_source(faq.id, faq.title, "faq")}

    if not client.configured:
        logger.info("Using fallback responses due to missing API key")
        return {"answer": AI_FALLBACK_ANSWER, "source": _ai_source("fallback-response", "Fallback Response")}

    prompt = f"{KNOWLEDGE_PROMPT}\n\nCustomer question: {query}\n\nYour helpful response:"
    try:
        text = await client.generate([Message(role="user", content=prompt)], system_prompt=None)
    except UpstreamError as exc:
        logger.warning("Gemini call failed (status %s): %s", exc.status_code, exc)
        return {"answer": AI_DEGRADED_ANSWER, "source": _ai_source("degraded-response", "Fallback Response")}

    return {"answer": text or AI_EMPTY_ANSWER, "source": _ai_source("gemini-response", "AI Response")}
