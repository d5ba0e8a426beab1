"""Pytest configuration and fixtures."""

import pytest

from dex.config import LiquidityPolicy, PoolConfig
from dex.ledger.token import FungibleToken
from dex.pool import Pool
from tests.helpers import ALICE, BOB, TOKENS_100, fund, make_pool

# =============================================================================
# Pools
# =============================================================================


@pytest.fixture
def pool() -> Pool:
    """An empty pool; ALICE and BOB are funded and have approved it."""
    empty_pool, _, _ = make_pool()
    fund(empty_pool, ALICE)
    fund(empty_pool, BOB)
    return empty_pool


@pytest.fixture
def token_a(pool: Pool) -> FungibleToken:
    return pool.token_a


@pytest.fixture
def token_b(pool: Pool) -> FungibleToken:
    return pool.token_b


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """The funded pool after ALICE deposited 100e18 of each asset."""
    pool.add_liquidity(ALICE, TOKENS_100, TOKENS_100)
    return pool


@pytest.fixture
def strict_pool() -> Pool:
    """An empty STRICT_RATIO pool with ALICE and BOB funded."""
    empty_pool, _, _ = make_pool(PoolConfig(liquidity_policy=LiquidityPolicy.STRICT_RATIO))
    fund(empty_pool, ALICE)
    fund(empty_pool, BOB)
    return empty_pool


@pytest.fixture
def small_pool() -> Pool:
    """A pool seeded with 100/100 base units, ALICE holding all 100 claims."""
    empty_pool, _, _ = make_pool()
    fund(empty_pool, ALICE)
    fund(empty_pool, BOB)
    empty_pool.add_liquidity(ALICE, 100, 100)
    return empty_pool
