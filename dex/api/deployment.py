"""Local deployment: two demo assets and one pool over them."""

from dataclasses import dataclass

import structlog

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig
from dex.constants import DEMO_TOKEN_A, DEMO_TOKEN_B
from dex.ledger.token import FungibleToken
from dex.pool import Pool, create_pool

logger = structlog.get_logger()


@dataclass
class Deployment:
    """The assets and pool served by the API."""

    token_a: FungibleToken
    token_b: FungibleToken
    pool: Pool


def deploy(config: PoolConfig = DEFAULT_POOL_CONFIG) -> Deployment:
    """Create "Token A" and "Token B" and an empty pool for the pair."""
    token_a = FungibleToken(*DEMO_TOKEN_A)
    token_b = FungibleToken(*DEMO_TOKEN_B)
    pool = create_pool(token_a, token_b, config=config)
    logger.info(
        "pool_deployed",
        pool=pool.address,
        token_a=token_a.address,
        token_b=token_b.address,
    )
    return Deployment(token_a=token_a, token_b=token_b, pool=pool)
