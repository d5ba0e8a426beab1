"""Constant-product AMM pool - Python Implementation."""

from dex.config import LiquidityPolicy, PoolConfig
from dex.ledger.token import FungibleToken
from dex.pool import Direction, Pool, PoolState, create_pool

__version__ = "0.1.0"
__all__ = [
    "Direction",
    "FungibleToken",
    "LiquidityPolicy",
    "Pool",
    "PoolConfig",
    "PoolState",
    "create_pool",
    "__version__",
]
