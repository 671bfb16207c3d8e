"""
Address extraction core: record decoding, sender extraction rules, aggregation.
"""

from walletscan.extraction.aggregator import AddressAggregator
from walletscan.extraction.extractor import extract_addresses, normalize_address
from walletscan.extraction.records import RpcRecord

__all__ = [
    "AddressAggregator",
    "RpcRecord",
    "extract_addresses",
    "normalize_address",
]
