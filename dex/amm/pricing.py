"""Constant-product pricing.

The pool uses the constant product formula x * y = k with a 0.3% fee on
the input amount. All functions are pure and operate on integers with
floor division; the operation order is fixed because reordering changes
the rounding of the result.
"""

from __future__ import annotations

from dataclasses import dataclass

from dex.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from dex.errors import InsufficientLiquidity, InvalidReserves, ZeroInput
from dex.safe_int import S


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against given reserves."""

    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int

    @property
    def reserves_after(self) -> tuple[int, int]:
        """(reserve_in, reserve_out) once the swap is applied."""
        return self.reserve_in + self.amount_in, self.reserve_out - self.amount_out


def _check_reserves(reserve_in: int, reserve_out: int) -> None:
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidReserves(f"Invalid reserves: ({reserve_in}, {reserve_out})")


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate output amount for an exact input.

    Formula: amount_out = (in * 997 * res_out) / (res_in * 1000 + in * 997)

    The result is always strictly below reserve_out, so a single swap can
    never drain the pool.

    Args:
        amount_in: Input asset amount
        reserve_in: Reserve of input asset in pool
        reserve_out: Reserve of output asset in pool

    Returns:
        Output asset amount

    Raises:
        InvalidReserves: If either reserve is zero
        ZeroInput: If amount_in is zero
        ArithmeticOverflow: If an intermediate product exceeds uint256
    """
    _check_reserves(reserve_in, reserve_out)
    if amount_in <= 0:
        raise ZeroInput("Swap input must be positive")

    amount_in_with_fee = S(amount_in) * S(FEE_NUMERATOR)
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee

    return (numerator // denominator).value


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate the minimum input that yields at least amount_out.

    Formula: amount_in = (res_in * out * 1000) / ((res_out - out) * 997) + 1

    Args:
        amount_out: Desired output asset amount
        reserve_in: Reserve of input asset in pool
        reserve_out: Reserve of output asset in pool

    Returns:
        Required input asset amount

    Raises:
        InvalidReserves: If either reserve is zero
        ZeroInput: If amount_out is zero
        InsufficientLiquidity: If amount_out is not below reserve_out
    """
    _check_reserves(reserve_in, reserve_out)
    if amount_out <= 0:
        raise ZeroInput("Requested output must be positive")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Requested output {amount_out} must be below reserve {reserve_out}"
        )

    numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
    denominator = (S(reserve_out) - S(amount_out)) * S(FEE_NUMERATOR)

    return (numerator // denominator + S(1)).value


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth amount_a of A at the current reserve ratio (no fee).

    Raises:
        InvalidReserves: If either reserve is zero
    """
    _check_reserves(reserve_a, reserve_b)
    return (S(amount_a) * S(reserve_b) // S(reserve_a)).value


def simulate_swap(amount_in: int, reserve_in: int, reserve_out: int) -> SwapQuote:
    """Price a swap and return the amounts together with the input reserves."""
    amount_out = get_amount_out(amount_in, reserve_in, reserve_out)
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
    )


__all__ = [
    "SwapQuote",
    "get_amount_out",
    "get_amount_in",
    "quote",
    "simulate_swap",
]
