from portal.analytics import QueryLog
from portal.types import QueryRecord


def test_log_is_capped_and_newest_first(clock):
    log = QueryLog(max_records=1000, clock=clock)
    for i in range(1001):
        log.add(f"q{i}", "FAQ", 80, "billing")
    records = log.records()
    assert len(records) == 1000
    assert records[0].query == "q1000"
    assert records[-1].query == "q1"


def test_success_follows_threshold(clock):
    log = QueryLog(clock=clock)
    assert log.add("a", "FAQ", 61, "billing").successful is True
    assert log.add("b", "FAQ", 60, "billing").successful is False
    assert log.add("c", "FAQ", 10, "billing", successful=True).successful is True


def test_summary_of_empty_log(clock):
    summary = QueryLog(clock=clock).summarize()
    assert summary["timeFrame"] == "24h"
    assert summary["totalQueries"] == 0
    assert summary["topQueries"] == []


def test_summary_aggregates(clock):
    log = QueryLog(clock=clock)
    log.add("Hours?", "FAQ", 90, "product_info")
    log.add("hours?", "FAQ", 80, "product_info")
    log.add("refund", "System", 40, "billing")

    summary = log.summarize("24h")
    assert summary["totalQueries"] == 3
    assert round(summary["successRate"], 2) == 66.67
    assert summary["avgConfidence"] == 70.0
    assert summary["sourceStats"] == {
        "FAQ": {"count": 2, "successful": 2},
        "System": {"count": 1, "successful": 0},
    }
    assert summary["intentStats"]["product_info"] == {"count": 2, "avgConfidence": 85.0, "successRate": 100.0}
    assert summary["topQueries"][0] == {"query": "hours?", "count": 2}
    assert [q["query"] for q in summary["recentQueries"]] == ["refund", "hours?", "Hours?"]
    assert summary["recentQueries"][0]["source"] == "System"


def test_time_frame_filters_old_records(clock):
    log = QueryLog(clock=clock)
    log.record(QueryRecord(clock() - 2 * 24 * 3600, "old", "FAQ", 90, "billing", True))
    log.add("new", "FAQ", 90, "billing")
    assert log.summarize("24h")["totalQueries"] == 1
    assert log.summarize("7d")["totalQueries"] == 2
    assert log.summarize("all")["totalQueries"] == 2
