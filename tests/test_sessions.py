import pytest

from portal.errors import ValidationError
from portal.sessions import ChatSessionStore


def test_post_creates_session_and_returns_history():
    chats = ChatSessionStore()
    first = chats.post("  hello  ")
    chat_id = first["chatId"]
    assert first["message"]["content"] == "hello"
    assert first["message"]["userId"] == "anonymous"

    second = chats.post("again", chat_id, "u-1")
    assert second["chatId"] == chat_id
    assert [m["content"] for m in second["chatHistory"]] == ["hello", "again"]
    assert len(chats.get(chat_id)) == 2


def test_history_window():
    chats = ChatSessionStore(history_window=10)
    for i in range(12):
        payload = chats.post(f"m{i}", "chat-1")
    assert len(payload["chatHistory"]) == 10
    assert payload["chatHistory"][0]["content"] == "m2"
    assert len(chats.get("chat-1")) == 12


def test_unknown_chat_is_empty():
    assert ChatSessionStore().get("missing") == []


def test_blank_message_is_rejected():
    with pytest.raises(ValidationError, match="Message content is required"):
        ChatSessionStore().post("   ")
