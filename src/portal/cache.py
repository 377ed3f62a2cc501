import random
import time
from typing import Callable, Dict, Optional, Tuple

from .types import MatchResult


class ResponseCache:
    """TTL cache of answers keyed by normalized query text.

    An entry is expired once its age reaches the TTL. ``get`` ignores expired
    entries but leaves them in place until the next ``sweep`` drops them.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        sweep_probability: float = 0.1,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.sweep_probability = sweep_probability
        self._clock = clock
        self._rng = rng or random.Random()
        self._store: Dict[str, Tuple[float, MatchResult]] = {}

    def get(self, key: str) -> Optional[MatchResult]:
        item = self._store.get(key)
        if not item:
            return None
        created_at, value = item
        if self._clock() - created_at >= self.ttl_seconds:
            return None
        return value

    def set(self, key: str, value: MatchResult) -> None:
        self._store[key] = (self._clock(), value)

    def sweep(self) -> int:
        now = self._clock()
        expired = [key for key, (created_at, _) in self._store.items() if now - created_at >= self.ttl_seconds]
        for key in expired:
            self._store.pop(key, None)
        return len(expired)

    def maybe_sweep(self) -> int:
        if self._rng.random() < self.sweep_probability:
            return self.sweep()
        return 0

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store
