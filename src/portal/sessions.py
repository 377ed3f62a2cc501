import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import ValidationError


@dataclass
class ChatMessage:
    id: str
    content: str
    userId: str
    timestamp: str
    chatId: str

    def as_payload(self) -> Dict[str, Any]:
        return asdict(self)


class ChatSessionStore:
    """Append-only chat transcripts keyed by chat id."""

    def __init__(self, history_window: int = 10) -> None:
        self.history_window = history_window
        self._sessions: Dict[str, List[ChatMessage]] = {}

    def post(self, message: str, chat_id: Optional[str] = None, user_id: str = "anonymous") -> Dict[str, Any]:
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message content is required")

        session_id = chat_id or str(uuid.uuid4())
        messages = self._sessions.setdefault(session_id, [])
        new_message = ChatMessage(
            id=str(uuid.uuid4()),
            content=message.strip(),
            userId=user_id or "anonymous",
            timestamp=datetime.now(timezone.utc).isoformat(),
            chatId=session_id,
        )
        messages.append(new_message)
        return {
            "success": True,
            "message": new_message.as_payload(),
            "chatId": session_id,
            "chatHistory": [m.as_payload() for m in messages[-self.history_window:]],
        }

    def get(self, chat_id: str) -> List[ChatMessage]:
        return list(self._sessions.get(chat_id, []))

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
