"""Shared domain ports.

This package is domain-accessible and should not depend on application code.
"""

from .ledger_client_protocol import LedgerClientProtocol

__all__ = ["LedgerClientProtocol"]
