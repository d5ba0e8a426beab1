"""Event records, wire models and shared types."""

from dex.models.events import EventLog, LiquidityAdded, LiquidityRemoved, PoolEvent, Swap
from dex.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    # Events
    "PoolEvent",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
    "EventLog",
]
