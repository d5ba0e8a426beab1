"""Liquidity accounting: claims minted on deposit, amounts paid on withdrawal.

Pure functions over reserves and total claims. The pool applies their
results; nothing here touches state.

Rounding always favors the pool: minted claims and withdrawn amounts are
floored, so the remaining holders can only gain dust, never lose it.
"""

from __future__ import annotations

from dex.amm.pricing import quote
from dex.config import LiquidityPolicy
from dex.errors import (
    InsufficientClaimBalance,
    InsufficientClaimsMinted,
    InvariantViolation,
    RatioViolation,
    ZeroAmount,
)
from dex.safe_int import S


def initial_claims(amount_a: int, amount_b: int) -> int:
    """Claims minted by the first deposit into an empty pool.

    claims = floor(sqrt(amount_a * amount_b))

    The first depositor sets the exchange rate to whatever ratio they
    deposit.
    """
    return (S(amount_a) * S(amount_b)).isqrt().value


def claims_for_deposit(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_claims: int,
    policy: LiquidityPolicy,
) -> int:
    """Claims minted for a deposit of (amount_a, amount_b).

    Args:
        amount_a: Deposit of asset A
        amount_b: Deposit of asset B
        reserve_a: Current reserve of A
        reserve_b: Current reserve of B
        total_claims: Outstanding claims (0 means the pool is empty)
        policy: Deposit policy for seeded pools

    Returns:
        Claims to mint, always > 0

    Raises:
        ZeroAmount: If either amount is zero
        RatioViolation: Under STRICT_RATIO, if amount_b is below the
            amount implied by amount_a and the reserve ratio
        InsufficientClaimsMinted: If the deposit rounds down to zero claims
    """
    if amount_a <= 0 or amount_b <= 0:
        raise ZeroAmount(f"Both deposit amounts must be positive: ({amount_a}, {amount_b})")

    if total_claims == 0:
        claims = initial_claims(amount_a, amount_b)
    elif reserve_a == 0 or reserve_b == 0:
        raise InvariantViolation(
            f"Pool has {total_claims} claims but reserves ({reserve_a}, {reserve_b})"
        )
    else:
        share_a = S(amount_a) * S(total_claims) // S(reserve_a)
        if policy is LiquidityPolicy.STRICT_RATIO:
            required_b = quote(amount_a, reserve_a, reserve_b)
            if amount_b < required_b:
                raise RatioViolation(
                    f"Deposit of {amount_a} A requires at least {required_b} B, got {amount_b}"
                )
            claims = share_a.value
        else:
            share_b = S(amount_b) * S(total_claims) // S(reserve_b)
            claims = share_a.min(share_b).value

    if claims == 0:
        raise InsufficientClaimsMinted(
            f"Deposit ({amount_a}, {amount_b}) is too small to mint any claims"
        )
    return claims


def amounts_for_withdrawal(
    claims: int,
    reserve_a: int,
    reserve_b: int,
    total_claims: int,
    claim_balance: int | None = None,
) -> tuple[int, int]:
    """Assets returned for burning `claims`.

    amount_x = floor(claims * reserve_x / total_claims)

    Args:
        claims: Claims to burn
        reserve_a: Current reserve of A
        reserve_b: Current reserve of B
        total_claims: Outstanding claims
        claim_balance: Caller's claim balance, if it should be checked

    Raises:
        ZeroAmount: If claims is zero
        InsufficientClaimBalance: If claims exceeds claim_balance or total_claims
    """
    if claims <= 0:
        raise ZeroAmount("Claims to burn must be positive")
    if claim_balance is not None and claims > claim_balance:
        raise InsufficientClaimBalance(f"Cannot burn {claims} claims, balance is {claim_balance}")
    if claims > total_claims:
        raise InsufficientClaimBalance(
            f"Cannot burn {claims} claims, total outstanding is {total_claims}"
        )

    amount_a = S(claims) * S(reserve_a) // S(total_claims)
    amount_b = S(claims) * S(reserve_b) // S(total_claims)
    return amount_a.value, amount_b.value


__all__ = [
    "initial_claims",
    "claims_for_deposit",
    "amounts_for_withdrawal",
]
