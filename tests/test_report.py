import io

from logsearcher.counters import HitCounters
from logsearcher.report import (
    RankedEntry,
    frequency_threshold,
    rank_addresses,
    report,
)


def make_counters(counts):
    counters = HitCounters()
    for address, cnt in counts.items():
        for _ in range(cnt):
            counters.record_hit()
            counters.record_address(address)
    return counters


def test_counters_total_includes_hits_without_address():
    counters = HitCounters()
    counters.record_hit()
    counters.record_hit()
    counters.record_address("10.0.0.1")

    assert counters.total == 2
    assert counters.addresses == {"10.0.0.1": 1}
    assert counters.total >= counters.addresses.total()


def test_frequency_threshold():
    assert frequency_threshold(3) == 30
    assert frequency_threshold(0) == 0
    assert frequency_threshold(2, per_day_threshold=5) == 10
    assert frequency_threshold(2, per_day_threshold=None) is None


def test_rank_addresses_threshold_is_strict():
    counters = make_counters({"a": 21, "b": 20, "c": 30})

    ranked = rank_addresses(counters, threshold=20)

    assert ranked == [RankedEntry("c", 30), RankedEntry("a", 21)]


def test_rank_addresses_limits_to_topn():
    counters = make_counters({f"10.0.0.{i}": i for i in range(1, 31)})

    ranked = rank_addresses(counters, threshold=0)

    assert len(ranked) == 20
    assert ranked[0] == RankedEntry("10.0.0.30", 30)
    assert ranked[-1] == RankedEntry("10.0.0.11", 11)
    assert len(rank_addresses(counters, threshold=None, topn=None)) == 30


def test_rank_addresses_topn_zero_is_empty():
    counters = make_counters({"a": 1, "b": 2})

    assert rank_addresses(counters, threshold=None, topn=0) == []
    assert rank_addresses(counters, threshold=None, topn=1) == [RankedEntry("b", 2)]


def test_report_prints_total_and_ranking():
    counters = make_counters({"10.0.0.1": 25, "10.0.0.2": 3})
    counters.record_hit()
    stream = io.StringIO()

    ranked = report(counters, 2, False, stream=stream)

    lines = stream.getvalue().splitlines()
    assert lines[0] == "Total hits: \t 29"
    assert lines[1].startswith("Top 20 IPs:")
    assert lines[2:] == ["10.0.0.1 \t 25"]
    assert ranked == [RankedEntry("10.0.0.1", 25)]


def test_report_same_day_range_shows_everything():
    counters = make_counters({"10.0.0.1": 1, "10.0.0.2": 2})
    stream = io.StringIO()

    report(counters, 0, False, stream=stream)

    assert stream.getvalue().splitlines()[2:] == ["10.0.0.2 \t 2", "10.0.0.1 \t 1"]


def test_report_without_threshold():
    counters = make_counters({"10.0.0.1": 1})
    stream = io.StringIO()

    report(counters, 30, False, stream=stream, per_day_threshold=None)

    lines = stream.getvalue().splitlines()
    assert lines[1] == "Top 20 IPs: (showing all IPs)"
    assert lines[2:] == ["10.0.0.1 \t 1"]


def test_report_count_only_prints_total_only():
    counters = make_counters({"10.0.0.1": 5})
    stream = io.StringIO()

    ranked = report(counters, 0, True, stream=stream)

    assert ranked == []
    assert stream.getvalue() == "Total hits: \t 5\n"
