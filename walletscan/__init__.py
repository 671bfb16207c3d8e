"""
WalletScan — sender wallet extraction from captured blockchain RPC traffic.

Reads JSON-RPC request/response records from MongoDB per chain, extracts
sender addresses (inline or via transaction-hash resolution), deduplicates
and counts them, and writes CSV reports. Modules are split between config,
logging, record extraction, aggregation, ingestion, and reporting.
"""

__version__ = "0.1.0"
