"""
JSON-RPC access used to resolve transaction hashes into transactions.
"""

from walletscan.rpc.resolver import ResolvedTransaction, Resolver, TransactionResolver

__all__ = ["ResolvedTransaction", "Resolver", "TransactionResolver"]
