"""
Address aggregation across records and chains.

AddressAggregator folds extractor findings into an insertion-ordered set of
unique addresses and an address -> occurrence count mapping. Both only grow:
no eviction, no decrement. Findings are expected to be normalized already.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Union


class AddressAggregator:
    """Unique address set plus cumulative occurrence counts for one run."""

    def __init__(self) -> None:
        # dict keys keep insertion order; values unused
        self._unique: dict[str, None] = {}
        self._counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._unique)

    def __contains__(self, address: object) -> bool:
        return address in self._unique

    def add_findings(self, findings: Iterable[str]) -> None:
        """Record each finding: insert into the unique set and increment its count."""
        for address in findings:
            self._unique.setdefault(address, None)
            self._counts[address] += 1

    def merge(self, other: Union["AddressAggregator", Iterable[str]]) -> None:
        """
        Union another unique-address set into this one. Counts are not touched.

        other is an aggregator or a collection of addresses; a bare string is a
        TypeError rather than a set of characters.
        """
        if isinstance(other, str):
            raise TypeError("merge expects a collection of addresses, not a single string")
        addresses = other.addresses if isinstance(other, AddressAggregator) else other
        for address in addresses:
            self._unique.setdefault(address, None)

    @property
    def addresses(self) -> list[str]:
        return list(self._unique)

    @property
    def unique_count(self) -> int:
        return len(self._unique)

    @property
    def total_findings(self) -> int:
        return sum(self._counts.values())

    def count_of(self, address: str) -> int:
        return self._counts.get(address, 0)

    def snapshot(self) -> tuple[list[str], dict[str, int]]:
        """Return (unique addresses in insertion order, copy of the counts mapping)."""
        return list(self._unique), dict(self._counts)
