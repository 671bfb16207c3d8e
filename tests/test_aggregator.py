"""
Tests for AddressAggregator: unique set is idempotent, counts are cumulative.
"""

from __future__ import annotations

import pytest
from conftest import FakeResolver, make_doc

from walletscan.extraction.aggregator import AddressAggregator
from walletscan.extraction.extractor import extract_addresses


def test_add_findings_counts_duplicates():
    agg = AddressAggregator()
    agg.add_findings(["0xa", "0xb", "0xa"])
    addresses, counts = agg.snapshot()
    assert addresses == ["0xa", "0xb"]
    assert counts == {"0xa": 2, "0xb": 1}
    assert agg.unique_count == 2
    assert agg.total_findings == 3


def test_add_same_findings_twice_doubles_counts_not_set():
    agg = AddressAggregator()
    findings = ["0xa", "0xb", "0xa"]
    agg.add_findings(findings)
    agg.add_findings(findings)
    addresses, counts = agg.snapshot()
    assert len(addresses) == 2
    assert counts == {"0xa": 4, "0xb": 2}


def test_snapshot_keeps_insertion_order():
    agg = AddressAggregator()
    agg.add_findings(["0xc"])
    agg.add_findings(["0xa", "0xc", "0xb"])
    assert agg.snapshot()[0] == ["0xc", "0xa", "0xb"]


def test_snapshot_is_a_copy():
    agg = AddressAggregator()
    agg.add_findings(["0xa"])
    addresses, counts = agg.snapshot()
    addresses.append("0xz")
    counts["0xa"] = 99
    assert agg.addresses == ["0xa"]
    assert agg.count_of("0xa") == 1


def test_merge_is_idempotent_union():
    left = AddressAggregator()
    left.add_findings(["0xa", "0xb"])
    right = AddressAggregator()
    right.add_findings(["0xb", "0xc"])

    left.merge(right)
    assert set(left.addresses) == {"0xa", "0xb", "0xc"}
    left.merge(right)
    assert left.unique_count == 3


def test_merge_accepts_plain_iterables_and_leaves_counts():
    agg = AddressAggregator()
    agg.add_findings(["0xa"])
    agg.merge({"0xb"})
    agg.merge(["0xa"])
    assert agg.addresses == ["0xa", "0xb"]
    assert agg.count_of("0xa") == 1
    assert agg.count_of("0xb") == 0
    assert "0xb" in agg
    assert len(agg) == 2


def test_empty_findings():
    agg = AddressAggregator()
    agg.add_findings([])
    assert agg.snapshot() == ([], {})


def test_block_record_through_aggregator():
    """Block with txs from A, B, A -> counts {a: 2, b: 1}, unique {a, b}."""
    doc = make_doc(
        "eth_getBlockByNumber",
        params=["0x1", True],
        result={"transactions": [{"from": "0xA"}, {"from": "0xB"}, {"from": "0xA"}]},
    )
    agg = AddressAggregator()
    agg.add_findings(extract_addresses(doc, FakeResolver()))
    addresses, counts = agg.snapshot()
    assert set(addresses) == {"0xa", "0xb"}
    assert counts == {"0xa": 2, "0xb": 1}


def test_call_record_counts_twice():
    """eth_call with params[0].from contributes 2 to that address from one record."""
    doc = make_doc("eth_call", params=[{"from": "0xDeAd", "to": "0xbeef"}, "latest"], result="0x")
    agg = AddressAggregator()
    agg.add_findings(extract_addresses(doc, FakeResolver()))
    assert agg.count_of("0xdead") == 2
    assert agg.unique_count == 1


def test_mixed_case_across_records_counts_as_one_address():
    agg = AddressAggregator()
    resolver = FakeResolver()
    agg.add_findings(extract_addresses(make_doc("eth_getTransactionByHash", result={"from": "0xABC"}), resolver))
    agg.add_findings(extract_addresses(make_doc("eth_getTransactionByHash", result={"from": "0xabc"}), resolver))
    assert agg.snapshot() == (["0xabc"], {"0xabc": 2})


def test_merge_rejects_bare_string():
    agg = AddressAggregator()
    with pytest.raises(TypeError, match="single string"):
        agg.merge("0xabc")
    assert agg.unique_count == 0
