"""
Structured logging for WalletScan.

JSON logs with timestamp, event_type, and chain/record context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from walletscan.walletscan_logging.logger import bind_chain, get_logger

__all__ = ["bind_chain", "get_logger"]
