import random
import time
from typing import Any, Callable, Dict, Optional

from .analytics import QueryLog
from .cache import ResponseCache
from .llm import ConversationMemory
from .sessions import ChatSessionStore


class PortalStore:
    """Process-wide mutable state shared by the request handlers.

    There is no locking; handlers are expected to run one at a time per
    process.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        cache_cfg = config.get("cache", {})
        analytics_cfg = config.get("analytics", {})
        self.cache = ResponseCache(
            ttl_seconds=cache_cfg.get("ttl_seconds", 300),
            sweep_probability=cache_cfg.get("sweep_probability", 0.1),
            clock=clock,
            rng=rng,
        )
        self.queries = QueryLog(
            max_records=analytics_cfg.get("max_records", 1000),
            success_threshold=analytics_cfg.get("success_threshold", 60),
            clock=clock,
        )
        self.chats = ChatSessionStore(history_window=config.get("chat", {}).get("history_window", 10))
        self.conversations = ConversationMemory(limit=config.get("llm", {}).get("memory_limit", 20))

    def clear(self) -> None:
        self.cache.clear()
        self.queries.clear()
        self.chats.clear()
        self.conversations.clear()
