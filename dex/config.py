"""Configuration for pools and the HTTP surface."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class LiquidityPolicy(str, Enum):
    """How a deposit into a seeded pool is converted into claims.

    PROPORTIONAL_MIN: accept any ratio, mint the lesser proportional share
        min(a * T / Ra, b * T / Rb). The excess side stays in the pool.
    STRICT_RATIO: reject deposits with b < a * Rb / Ra, mint a * T / Ra.
        Surplus B is still pulled in and accrues to all holders.
    """

    PROPORTIONAL_MIN = "proportional_min"
    STRICT_RATIO = "strict_ratio"


@dataclass(frozen=True)
class PoolConfig:
    """Per-pool behavior chosen at construction.

    Attributes:
        liquidity_policy: Deposit policy for seeded pools. Fixed for the
            lifetime of the pool.
        check_invariants: If True, verify reserve/claim invariants after
            every committed operation.
    """

    liquidity_policy: LiquidityPolicy = LiquidityPolicy.PROPORTIONAL_MIN
    check_invariants: bool = True


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()


_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the HTTP surface, read from DEX_* environment variables.

    Attributes:
        host: Bind address (DEX_HOST, default 0.0.0.0)
        port: Bind port (DEX_PORT, default 8000)
        debug: Enable reload mode (DEX_DEBUG, default false)
        log_level: structlog filter level (DEX_LOG_LEVEL, default INFO)
        pool: Pool settings (DEX_LIQUIDITY_POLICY)
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    pool: PoolConfig = DEFAULT_POOL_CONFIG

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build a config from environment variables.

        Raises:
            ValueError: If DEX_PORT is not an integer or DEX_LIQUIDITY_POLICY
                is not a known policy
        """
        env = os.environ if environ is None else environ
        policy = LiquidityPolicy(
            env.get("DEX_LIQUIDITY_POLICY", LiquidityPolicy.PROPORTIONAL_MIN.value).lower()
        )
        return cls(
            host=env.get("DEX_HOST", "0.0.0.0"),
            port=int(env.get("DEX_PORT", "8000")),
            debug=env.get("DEX_DEBUG", "false").lower() in _TRUTHY,
            log_level=env.get("DEX_LOG_LEVEL", "INFO").upper(),
            pool=PoolConfig(liquidity_policy=policy),
        )
