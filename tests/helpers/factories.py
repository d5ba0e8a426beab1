"""Factory functions for creating test ledgers and pools.

Usage:
    from tests.helpers import make_pool, fund

    pool, token_a, token_b = make_pool()
    fund(pool, ALICE)
"""

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig
from dex.ledger.token import FungibleToken
from dex.pool import Pool
from dex.safe_int import UINT256_MAX
from tests.helpers.constants import INITIAL_BALANCE, TOKEN_A, TOKEN_B


def make_tokens() -> tuple[FungibleToken, FungibleToken]:
    """Create "Token A" and "Token B" at fixed addresses."""
    token_a = FungibleToken("Token A", "TKA", address=TOKEN_A)
    token_b = FungibleToken("Token B", "TKB", address=TOKEN_B)
    return token_a, token_b


def make_pool(config: PoolConfig = DEFAULT_POOL_CONFIG) -> tuple[Pool, FungibleToken, FungibleToken]:
    """Create an empty pool over fresh tokens.

    Returns:
        (pool, token_a, token_b)
    """
    token_a, token_b = make_tokens()
    return Pool(token_a, token_b, config=config), token_a, token_b


def fund(
    pool: Pool,
    account: str,
    amount_a: int = INITIAL_BALANCE,
    amount_b: int = INITIAL_BALANCE,
    approve: bool = True,
) -> None:
    """Mint both pooled assets to account and approve the pool without limit."""
    for token, amount in ((pool.token_a, amount_a), (pool.token_b, amount_b)):
        if amount:
            token.mint(account, amount)
        if approve:
            token.approve(account, pool.address, UINT256_MAX)
