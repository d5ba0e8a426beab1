"""Ledgers backing the pooled assets and LP claims."""

from dex.ledger.base import (
    AssetLedger,
    ClaimLedger,
    InsufficientAllowance,
    InsufficientBalance,
    LedgerError,
)
from dex.ledger.token import FungibleToken, derive_token_address

__all__ = [
    "AssetLedger",
    "ClaimLedger",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "FungibleToken",
    "derive_token_address",
]
