"""portal.analytics

In-memory query log with windowed summaries. Records are kept newest first
and the oldest one is dropped once the log is full.
"""

import logging
import time
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

import pandas as pd

from .types import QueryRecord

logger = logging.getLogger(__name__)

TIME_FRAMES = {
    "24h": 24 * 60 * 60,
    "7d": 7 * 24 * 60 * 60,
    "30d": 30 * 24 * 60 * 60,
    "all": None,
}
DEFAULT_TIME_FRAME = "24h"
TOP_QUERIES = 10
RECENT_QUERIES = 10


class QueryLog:
    def __init__(
        self,
        max_records: int = 1000,
        success_threshold: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.success_threshold = success_threshold
        self._clock = clock
        self._records: Deque[QueryRecord] = deque(maxlen=max_records)

    def record(self, record: QueryRecord) -> None:
        # appendleft on a full deque drops the oldest entry from the right
        self._records.appendleft(record)
        logger.debug("Recorded query %r from %s (%s)", record.query, record.response_source, record.confidence)

    def add(
        self,
        query: str,
        response_source: str,
        confidence: int,
        intent: str,
        successful: Optional[bool] = None,
    ) -> QueryRecord:
        if successful is None:
            successful = confidence > self.success_threshold
        record = QueryRecord(
            timestamp=self._clock(),
            query=query,
            response_source=response_source,
            confidence=confidence,
            intent=intent,
            successful=bool(successful),
        )
        self.record(record)
        return record

    def records(self) -> List[QueryRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def _frame(self, time_frame: str) -> pd.DataFrame:
        columns = ["timestamp", "query", "response_source", "confidence", "intent", "successful"]
        df = pd.DataFrame([vars(r) for r in self._records], columns=columns)
        window = TIME_FRAMES.get(time_frame, TIME_FRAMES[DEFAULT_TIME_FRAME])
        if window is not None and not df.empty:
            df = df[df["timestamp"] >= self._clock() - window]
        return df

    def summarize(self, time_frame: str = DEFAULT_TIME_FRAME) -> Dict[str, Any]:
        df = self._frame(time_frame)
        total = int(len(df))
        summary: Dict[str, Any] = {
            "timeFrame": time_frame,
            "totalQueries": total,
            "successRate": 0,
            "avgConfidence": 0,
            "sourceStats": {},
            "intentStats": {},
            "topQueries": [],
            "recentQueries": [],
        }
        if df.empty:
            return summary

        summary["successRate"] = float(df["successful"].mean() * 100)
        summary["avgConfidence"] = float(df["confidence"].mean())

        by_source = df.groupby("response_source", sort=False)["successful"].agg(["count", "sum"])
        summary["sourceStats"] = {
            source: {"count": int(row["count"]), "successful": int(row["sum"])}
            for source, row in by_source.iterrows()
        }

        by_intent = df.groupby("intent", sort=False).agg(
            count=("confidence", "size"),
            avgConfidence=("confidence", "mean"),
            successRate=("successful", "mean"),
        )
        summary["intentStats"] = {
            intent: {
                "count": int(row["count"]),
                "avgConfidence": float(row["avgConfidence"]),
                "successRate": float(row["successRate"] * 100),
            }
            for intent, row in by_intent.iterrows()
        }

        normalized = df["query"].str.lower().str.strip()
        counts = normalized.value_counts(sort=True)
        summary["topQueries"] = [
            {"query": query, "count": int(count)} for query, count in counts.head(TOP_QUERIES).items()
        ]

        summary["recentQueries"] = [
            {
                "timestamp": datetime.fromtimestamp(row.timestamp, tz=timezone.utc).isoformat(),
                "query": row.query,
                "source": row.response_source,
                "confidence": int(row.confidence),
                "intent": row.intent,
            }
            for row in df.head(RECENT_QUERIES).itertuples(index=False)
        ]
        return summary
